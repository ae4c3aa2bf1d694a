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
Models for overall cluster configuration.
"""
from typing import List
from pydantic import BaseModel, ConfigDict, Field
from .component import Component
from .component_patches import ComponentPatches
from .log_resources import Logs, ClusterLogs, Attach, ClusterAttach

class ClusterOptions(BaseModel):
    """
    Options that apply to the cluster as a whole.
    """
    model_config = ConfigDict(populate_by_name=True)

    dry_run: bool = Field(default=False, alias="dryRun")
    workdir: str = Field(default="~/.stackctl", alias="workDir")

class ClusterConfiguration(BaseModel):
    """
    Complete configuration for a cluster: its components, the patches
    layered over them, and the log/attach resources they serve.
    """
    model_config = ConfigDict(populate_by_name=True)

    options: ClusterOptions = Field(default_factory=ClusterOptions)
    components: List[Component] = []
    components_patches: List[ComponentPatches] = Field(default=[], alias="componentsPatches")

    logs: List[Logs] = []
    cluster_logs: List[ClusterLogs] = Field(default=[], alias="clusterLogs")
    attaches: List[Attach] = []
    cluster_attaches: List[ClusterAttach] = Field(default=[], alias="clusterAttaches")
