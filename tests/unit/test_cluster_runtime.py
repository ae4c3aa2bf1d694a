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
Unit tests for the cluster runtime.
"""
import os
import threading
import pytest
from stackctl.MODELS.cluster_config import ClusterConfiguration, ClusterOptions
from stackctl.MODELS.component import Component, Volume
from stackctl.MODELS.component_patches import ComponentPatches, ExtraArgs
from stackctl.MODELS.log_resources import Log, Logs, LogsSpec
from stackctl.MANAGERS.cluster_runtime import Cluster
from stackctl.RUNNERS.dependency_resolver import DependencyError


def new_config(**kwargs):
    return ClusterConfiguration(
        components=[
            Component(name="kube-apiserver", binary="kube-apiserver", links=["etcd"],
                      args=["--etcd-servers=http://localhost:2379", "--etcd-prefix=/registry"]),
            Component(name="etcd", binary="etcd", args=["--data-dir=/tmp/etcd"]),
            Component(name="kube-scheduler", binary="kube-scheduler", links=["kube-apiserver"]),
            Component(name="kube-controller-manager", binary="kube-controller-manager",
                      links=["kube-apiserver"]),
        ],
        components_patches=[
            ComponentPatches(name="kube-apiserver", extra_args=[
                ExtraArgs(key="etcd-servers", value="http://192.168.66.2:3379", override=True),
            ]),
        ],
        **kwargs,
    )


class TestCluster:
    """Tests for Cluster."""

    def test_dry_run_defaults_to_options(self, tmp_path):
        config = new_config(options=ClusterOptions(dry_run=True))
        assert Cluster(config, workdir=str(tmp_path)).is_dry_run() is True
        assert Cluster(config, dry_run=False, workdir=str(tmp_path)).is_dry_run() is False

    def test_groups(self, tmp_path):
        cluster = Cluster(new_config(), workdir=str(tmp_path))
        assert [[c.name for c in g] for g in cluster.groups()] == [
            ["etcd"],
            ["kube-apiserver"],
            ["kube-controller-manager", "kube-scheduler"],
        ]

    def test_component_for_start(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = new_config()
        config.components[0].volumes.append(Volume(host_path="~/certs", mount_path="/etc/certs"))
        cluster = Cluster(config, workdir=str(tmp_path))

        resolved = cluster.component_for_start(cluster.get_component("kube-apiserver"))
        assert resolved.args == [
            "--etcd-prefix=/registry",
            "--etcd-servers=http://192.168.66.2:3379",
        ]
        assert resolved.volumes[0].host_path == os.path.join(str(tmp_path), "certs")
        assert config.components[0].volumes[0].host_path == "~/certs"

    def test_component_for_start_mounts_log_dirs(self, tmp_path):
        config = new_config(logs=[Logs(name="web", spec=LogsSpec(logs=[
            Log(logs_file="/var/log/web/a.log"),
            Log(logs_file="/var/log/web/./b.log"),
        ]))])
        cluster = Cluster(config, workdir=str(tmp_path))

        resolved = cluster.component_for_start(cluster.get_component("etcd"))
        log_volumes = [v for v in resolved.volumes if v.name and v.name.startswith("log-volume-")]
        assert [(v.host_path, v.mount_path, v.read_only) for v in log_volumes] == [
            ("/var/log/web", "/var/log/web", True),
        ]
        assert config.components[1].volumes == []

    def test_dry_run_up(self, tmp_path, capsys):
        cluster = Cluster(new_config(), dry_run=True, workdir=str(tmp_path))
        cluster.up()
        out = capsys.readouterr().out
        assert "kube-apiserver --etcd-prefix=/registry --etcd-servers=http://192.168.66.2:3379" in out
        starts = [line for line in out.splitlines() if line.startswith("# Start")]
        assert starts == [
            "# Start etcd",
            "# Start kube-apiserver",
            "# Start kube-controller-manager",
            "# Start kube-scheduler",
        ]
        assert not (tmp_path / "pids").exists()

    def test_dry_run_down(self, tmp_path, capsys):
        cluster = Cluster(new_config(), dry_run=True, workdir=str(tmp_path))
        cluster.down()
        stops = [line for line in capsys.readouterr().out.splitlines() if line.startswith("# Stop")]
        assert stops == [
            "# Stop kube-controller-manager",
            "# Stop kube-scheduler",
            "# Stop kube-apiserver",
            "# Stop etcd",
        ]

    def test_dependency_error_before_any_action(self, tmp_path):
        config = ClusterConfiguration(components=[
            Component(name="solo"),
            Component(name="a", links=["b"]),
            Component(name="b", links=["a"]),
        ])
        cluster = Cluster(config, workdir=str(tmp_path))
        calls = []
        with pytest.raises(DependencyError):
            cluster.foreach_components(lambda cancel_event, component: calls.append(component.name))
        assert calls == []

    def test_foreach_components_reverse(self, tmp_path):
        cluster = Cluster(new_config(), workdir=str(tmp_path))
        calls = []
        lock = threading.Lock()

        def action(cancel_event, component):
            with lock:
                calls.append(component.name)

        cluster.foreach_components(action, reverse=True)
        assert calls[-2:] == ["kube-apiserver", "etcd"]

    def test_ps_without_processes(self, tmp_path):
        cluster = Cluster(new_config(), workdir=str(tmp_path))
        assert set(cluster.ps().values()) == {"stopped"}

    def test_export_logs(self, tmp_path):
        workdir = tmp_path / "work"
        cluster = Cluster(new_config(), workdir=str(workdir))
        (workdir / "logs").mkdir(parents=True)
        (workdir / "logs" / "etcd.log").write_text("etcd started\n")

        dest = tmp_path / "export"
        cluster.export_logs(str(dest))
        assert (dest / "etcd.log").read_text() == "etcd started\n"
        assert not (dest / "kube-apiserver.log").exists()
