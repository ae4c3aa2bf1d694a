# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Command Line Interface for stackctl.
"""
import os
import click
from dotenv import load_dotenv
from ..PARSERS.config_parser import ConfigParser
from ..MANAGERS.cluster_runtime import Cluster
from ..MANAGERS.patch_manager import get_component_patches
from ..MANAGERS.volume_manager import get_log_volumes_for_config

@click.group()
@click.option('--config', '-c', 'config_file', default='stackctl.yaml', envvar='STACKCTL_CONFIG',
              help='Cluster configuration file path')
@click.option('--dry-run', is_flag=True, default=False, envvar='STACKCTL_DRY_RUN',
              help='Print the actions instead of running them')
@click.option('--workdir', '-w', default=None, envvar='STACKCTL_WORKDIR',
              help='Directory for logs and pid files')
@click.pass_context
def cli(ctx, config_file, dry_run, workdir):
    """
    stackctl - run cluster components in dependency order.

    Starts and stops the processes of a local cluster, honoring the links
    between components and the patches layered over them.
    """
    ctx.ensure_object(dict)
    ctx.obj['file'] = config_file
    if os.path.exists(config_file):
        parser = ConfigParser()
        try:
            ctx.obj['config'] = parser.parse(config_file)
            ctx.obj['cluster'] = Cluster(ctx.obj['config'], dry_run=dry_run or None, workdir=workdir)
        except Exception as e:
            click.echo(f"Error: {e}")
            ctx.exit(1)

def _get_cluster(ctx):
    cluster = ctx.obj.get('cluster')
    if cluster is None:
        click.echo(f"Error: {ctx.obj['file']} not found.")
    return cluster

@cli.command()
@click.pass_context
def up(ctx):
    """Start components in dependency order."""
    cluster = _get_cluster(ctx)
    if cluster:
        try:
            cluster.up()
        except Exception as e:
            click.echo(f"Error: {e}")
            ctx.exit(1)
        if not cluster.is_dry_run():
            click.echo("Components started.")

@cli.command()
@click.pass_context
def down(ctx):
    """Stop components in reverse dependency order."""
    cluster = _get_cluster(ctx)
    if cluster:
        try:
            cluster.down()
        except Exception as e:
            click.echo(f"Error: {e}")
            ctx.exit(1)
        if not cluster.is_dry_run():
            click.echo("Components stopped.")

@cli.command()
@click.pass_context
def ps(ctx):
    """List component status"""
    cluster = _get_cluster(ctx)
    if cluster:
        status = cluster.ps()
        click.echo(f"{'COMPONENT':25} {'STATUS':10}")
        click.echo("-" * 35)
        for name, state in status.items():
            click.echo(f"{name:25} {state:10}")

@cli.command()
@click.pass_context
def components(ctx):
    """List components grouped in startup order"""
    cluster = _get_cluster(ctx)
    if cluster:
        try:
            groups = cluster.groups()
        except Exception as e:
            click.echo(f"Error: {e}")
            ctx.exit(1)
        for i, group in enumerate(groups):
            click.echo(f"{i}: {', '.join(component.name for component in group)}")

@cli.command()
@click.argument('name')
@click.pass_context
def args(ctx, name):
    """Show the final arguments of a component"""
    cluster = _get_cluster(ctx)
    if cluster:
        component = cluster.get_component(name)
        if component is None:
            click.echo(f"Error: component {name} not found.")
            ctx.exit(1)
        patch = get_component_patches(cluster.config, name)
        try:
            resolved = cluster.component_for_start(component)
        except Exception as e:
            click.echo(f"Error: {e}")
            ctx.exit(1)
        if patch.extra_args:
            click.echo(f"# {len(patch.extra_args)} extra args from patches")
        for arg in resolved.args:
            click.echo(arg)

@cli.command()
@click.pass_context
def volumes(ctx):
    """Show the volumes mounted for log and attach resources"""
    cluster = _get_cluster(ctx)
    if cluster:
        for volume in get_log_volumes_for_config(cluster.config):
            mode = "ro" if volume.read_only else "rw"
            click.echo(f"{volume.name}: {volume.host_path}:{volume.mount_path}:{mode}")

@cli.command(name='export-logs')
@click.argument('dest', type=click.Path(file_okay=False))
@click.pass_context
def export_logs(ctx, dest):
    """Copy component logs into DEST"""
    cluster = _get_cluster(ctx)
    if cluster:
        try:
            cluster.export_logs(dest)
        except Exception as e:
            click.echo(f"Error: {e}")
            ctx.exit(1)

def main():
    """
    Main entry point for the CLI.
    """
    load_dotenv()
    cli(obj={})

if __name__ == '__main__':
    main()
