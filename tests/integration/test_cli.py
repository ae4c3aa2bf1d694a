import os
import pytest
from click.testing import CliRunner
from stackctl.CLI.main import cli

CONFIG = """
components:
  - name: etcd
    binary: etcd
    args: [--data-dir=/tmp/etcd]
  - name: kube-apiserver
    binary: kube-apiserver
    links: [etcd]
    args:
      - --etcd-servers=http://localhost:2379
      - --etcd-prefix=/registry
componentsPatches:
  - name: kube-apiserver
    extraArgs:
      - key: etcd-servers
        value: http://192.168.66.2:3379
        override: true
      - key: etcd-prefix
        value: /test
---
kind: Logs
metadata:
  name: web
spec:
  logs:
    - logsFile: /var/log/web/web.log
    - logsFile: /var/log/web/web-previous.log
"""

@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "stackctl.yaml"
    path.write_text(CONFIG)
    return str(path)

def invoke(config_file, tmp_path, *args):
    runner = CliRunner()
    return runner.invoke(cli, ['-c', config_file, '-w', str(tmp_path / 'work'), *args])

def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'Start components' in result.output

def test_cli_up_no_file():
    runner = CliRunner()
    result = runner.invoke(cli, ['-c', 'non_existent.yaml', 'up'])
    assert result.exit_code == 0
    assert 'Error: non_existent.yaml not found.' in result.output

def test_cli_components(config_file, tmp_path):
    result = invoke(config_file, tmp_path, 'components')
    assert result.exit_code == 0
    assert result.output.splitlines() == ['0: etcd', '1: kube-apiserver']

def test_cli_args(config_file, tmp_path):
    result = invoke(config_file, tmp_path, 'args', 'kube-apiserver')
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == '# 2 extra args from patches'
    assert lines[1:] == [
        '--etcd-prefix=/registry',
        '--etcd-prefix=/test',
        '--etcd-servers=http://192.168.66.2:3379',
    ]

def test_cli_args_unknown_component(config_file, tmp_path):
    result = invoke(config_file, tmp_path, 'args', 'missing')
    assert result.exit_code == 1
    assert 'Error: component missing not found.' in result.output

def test_cli_volumes(config_file, tmp_path):
    result = invoke(config_file, tmp_path, 'volumes')
    assert result.exit_code == 0
    assert result.output.splitlines() == ['log-volume-0: /var/log/web:/var/log/web:ro']

def test_cli_dry_run_up(config_file, tmp_path):
    result = invoke(config_file, tmp_path, '--dry-run', 'up')
    assert result.exit_code == 0
    assert '# Start etcd' in result.output
    assert 'etcd --data-dir=/tmp/etcd' in result.output
    assert result.output.index('# Start etcd') < result.output.index('# Start kube-apiserver')
    assert 'Components started.' not in result.output
    assert not (tmp_path / 'work' / 'pids').exists()

def test_cli_dry_run_from_env(config_file, tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ['-c', config_file, '-w', str(tmp_path / 'work'), 'down'],
                           env={'STACKCTL_DRY_RUN': '1'})
    assert result.exit_code == 0
    assert result.output.index('# Stop kube-apiserver') < result.output.index('# Stop etcd')

def test_cli_ps(config_file, tmp_path):
    result = invoke(config_file, tmp_path, 'ps')
    assert result.exit_code == 0
    assert 'etcd' in result.output
    assert 'stopped' in result.output

def test_cli_cycle(tmp_path):
    path = tmp_path / "cycle.yaml"
    path.write_text("components:\n  - {name: a, links: [b]}\n  - {name: b, links: [a]}\n")
    result = CliRunner().invoke(cli, ['-c', str(path), '-w', str(tmp_path / 'work'), 'up'])
    assert result.exit_code == 1
    assert 'Circular dependency' in result.output

def test_cli_invalid_config(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("components:\n  - binary: etcd\n")
    result = CliRunner().invoke(cli, ['-c', str(path), 'components'])
    assert result.exit_code == 1
    assert 'Error:' in result.output

def test_cli_args_unresolvable_host_path(tmp_path, monkeypatch):
    path = tmp_path / "home.yaml"
    path.write_text(
        "components:\n"
        "  - name: etcd\n"
        "    args: [--data-dir=/tmp/etcd]\n"
        "    volumes:\n"
        "      - {hostPath: ~/etcd, mountPath: /var/lib/etcd}\n"
    )
    monkeypatch.setattr(os.path, "expanduser", lambda p: p)
    result = CliRunner().invoke(cli, ['-c', str(path), '-w', str(tmp_path / 'work'), 'args', 'etcd'])
    assert result.exit_code == 1
    assert 'Error: Unable to resolve home directory' in result.output
