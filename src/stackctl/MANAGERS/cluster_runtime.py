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
Cluster runtime: brings components up and down in dependency order.
"""
import os
import shlex
import shutil
import threading
from typing import Dict, List, Optional
from ..MODELS.cluster_config import ClusterConfiguration
from ..MODELS.component import Component
from ..RUNNERS.dependency_resolver import DependencyResolver
from ..RUNNERS.group_executor import Action, ExecutionMode, foreach_components
from ..RUNNERS.process_runner import ProcessRunner
from ..UTILS.path_utils import expand_path
from .patch_manager import apply_component_patches
from .volume_manager import expand_volumes_host_paths, get_log_volumes_for_config, prepare_host_paths

class Cluster:
    """
    Runs the components of a cluster configuration as local processes.
    """
    def __init__(self, config: ClusterConfiguration, dry_run: Optional[bool] = None,
                 workdir: Optional[str] = None):
        """
        Initializes the cluster runtime.

        :param config: Configuration of the cluster.
        :param dry_run: Print what would run instead of running it.
            Defaults to the configuration's ``dryRun`` option.
        :param workdir: Directory for logs and pid files.
            Defaults to the configuration's ``workDir`` option.
        """
        self.config = config
        self.dry_run = config.options.dry_run if dry_run is None else dry_run
        self.workdir = expand_path(workdir or config.options.workdir)
        self.resolver = DependencyResolver()
        self.runners: Dict[str, ProcessRunner] = {
            component.name: ProcessRunner(component.name, self.workdir)
            for component in config.components
        }

    def is_dry_run(self) -> bool:
        return self.dry_run

    def groups(self) -> List[List[Component]]:
        """
        Groups the components by their links.

        :return: Groups in startup order.
        :raises DependencyError: If the links form a cycle.
        """
        return self.resolver.group_by_links(self.config.components)

    def foreach_components(self, action: Action, reverse: bool = False, order: bool = True):
        """
        Calls ``action(cancel_event, component)`` for every component.

        :param action: The action to run.
        :param reverse: Walk the dependency groups back to front.
        :param order: Honor the dependency groups. Only pass False for
            actions that do not depend on startup order.
        """
        groups = self.groups()
        mode = ExecutionMode.DRY_RUN if self.dry_run else ExecutionMode.NORMAL
        foreach_components(groups, action, reverse=reverse, order=order, mode=mode)

    def component_for_start(self, component: Component) -> Component:
        """
        Resolves the component as it will be launched: patches applied, the
        log directories of the cluster mounted, and host paths made absolute.

        :param component: The baseline component.
        :return: The resolved component.
        """
        patched = apply_component_patches(component, self.config.components_patches)
        volumes = list(patched.volumes) + get_log_volumes_for_config(self.config)
        return patched.model_copy(update={"volumes": expand_volumes_host_paths(volumes)})

    def get_component(self, name: str) -> Optional[Component]:
        for component in self.config.components:
            if component.name == name:
                return component
        return None

    def up(self):
        """
        Starts all components, group by group.
        """
        print(f"Starting components in order: {self._format_groups()}")
        self.foreach_components(self._start_component)

    def down(self):
        """
        Stops all components in reverse dependency order.
        """
        print(f"Stopping components in order: {self._format_groups(reverse=True)}")
        self.foreach_components(self._stop_component, reverse=True)

    def ps(self) -> Dict[str, str]:
        """
        Returns the status of all components.

        :return: Component names and their statuses.
        """
        return {name: runner.status() for name, runner in self.runners.items()}

    def export_logs(self, dest_dir: str):
        """
        Copies every component's log file into ``dest_dir``.

        :param dest_dir: Destination directory, created if missing.
        """
        dest_dir = expand_path(dest_dir)

        def export(cancel_event: threading.Event, component: Component):
            if cancel_event.is_set():
                return
            src = self.runners[component.name].log_file
            dest = os.path.join(dest_dir, os.path.basename(src))
            if self.dry_run:
                print(f"cp {shlex.quote(src)} {shlex.quote(dest)}")
                return
            if not os.path.exists(src):
                print(f"[{component.name}] No log file at {src}, skipping.")
                return
            shutil.copyfile(src, dest)

        if not self.dry_run:
            os.makedirs(dest_dir, exist_ok=True)
        self.foreach_components(export, order=False)

    def _start_component(self, cancel_event: threading.Event, component: Component):
        if cancel_event.is_set():
            return
        component = self.component_for_start(component)
        command = component.full_command()
        if self.dry_run:
            print(f"# Start {component.name}")
            print(shlex.join(command))
            return
        if not command:
            print(f"[{component.name}] No command specified, nothing to run.")
            return

        prepare_host_paths(component.volumes)
        env = os.environ.copy()
        env.update({e.name: e.value for e in component.envs})
        self.runners[component.name].start(command, env=env, working_dir=component.work_dir)

    def _stop_component(self, cancel_event: threading.Event, component: Component):
        if cancel_event.is_set():
            return
        runner = self.runners[component.name]
        if self.dry_run:
            print(f"# Stop {component.name}")
            print(f"kill $(cat {shlex.quote(runner.pid_file)})")
            return
        runner.stop(cancel_event=cancel_event)

    def _format_groups(self, reverse: bool = False) -> str:
        groups = self.groups()
        if reverse:
            groups = list(reversed(groups))
        return " -> ".join("[" + ", ".join(c.name for c in group) + "]" for group in groups)
