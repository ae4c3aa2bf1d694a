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
Volume handling for components: host path expansion and log directory mounts.
"""
import os
from typing import Iterable, List
from ..MODELS.component import Volume, HostPathType
from ..MODELS.cluster_config import ClusterConfiguration
from ..MODELS.log_resources import Logs, ClusterLogs, Attach, ClusterAttach
from ..UTILS.path_utils import expand_path

def expand_volumes_host_paths(volumes: List[Volume]) -> List[Volume]:
    """
    Expands home-relative and relative host paths to absolute paths.

    :param volumes: The volumes to expand, left unchanged.
    :return: Copies of the volumes with absolute host paths.
    :raises PathResolutionError: If any host path cannot be expanded.
    """
    result = []
    for volume in volumes:
        host_path = expand_path(volume.host_path)
        result.append(volume.model_copy(update={"host_path": host_path}))
    return result

def get_log_volumes(logs: Iterable[Logs] = (),
                    cluster_logs: Iterable[ClusterLogs] = (),
                    attaches: Iterable[Attach] = (),
                    cluster_attaches: Iterable[ClusterAttach] = ()) -> List[Volume]:
    """
    Builds one read-only mount per directory holding a log file.

    Every directory is mounted onto itself, so log paths stay valid inside
    the component.

    :param logs: Per-pod log resources.
    :param cluster_logs: Cluster-wide log resources.
    :param attaches: Per-pod attach resources.
    :param cluster_attaches: Cluster-wide attach resources.
    :return: Volumes named ``log-volume-<index>`` in sorted directory order.
    """
    mount_dirs = set()
    for resource in list(logs) + list(cluster_logs):
        for log in resource.spec.logs:
            mount_dirs.add(_log_dir(log.logs_file))

    for resource in list(attaches) + list(cluster_attaches):
        for attach in resource.spec.attaches:
            mount_dirs.add(_log_dir(attach.logs_file))

    return [
        Volume(
            name=f"log-volume-{i}",
            host_path=logs_dir,
            mount_path=logs_dir,
            path_type=HostPathType.DIRECTORY_OR_CREATE,
            read_only=True,
        )
        for i, logs_dir in enumerate(sorted(mount_dirs))
    ]

def get_log_volumes_for_config(config: ClusterConfiguration) -> List[Volume]:
    """
    Builds the log mounts for every log and attach resource in a configuration.
    """
    return get_log_volumes(
        logs=config.logs,
        cluster_logs=config.cluster_logs,
        attaches=config.attaches,
        cluster_attaches=config.cluster_attaches,
    )

def _log_dir(logs_file: str) -> str:
    return os.path.normpath(os.path.dirname(logs_file)) if logs_file else "."

def prepare_host_paths(volumes: List[Volume]):
    """
    Creates the host directories of volumes that ask for them.

    :param volumes: Volumes with absolute host paths.
    """
    for volume in volumes:
        if volume.path_type == HostPathType.DIRECTORY_OR_CREATE and not os.path.exists(volume.host_path):
            os.makedirs(volume.host_path, exist_ok=True)
        elif volume.path_type == HostPathType.FILE_OR_CREATE and not os.path.exists(volume.host_path):
            parent = os.path.dirname(volume.host_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            open(volume.host_path, "a").close()
