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
Models for log and attach resources whose log files are mounted into components.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class Selector(BaseModel):
    """
    Selects the pods a cluster-wide resource applies to.
    """
    model_config = ConfigDict(populate_by_name=True)

    match_namespaces: List[str] = Field(default=[], alias="matchNamespaces")
    match_names: List[str] = Field(default=[], alias="matchNames")

class Log(BaseModel):
    """
    A log file served for a set of containers.
    """
    model_config = ConfigDict(populate_by_name=True)

    containers: List[str] = []
    logs_file: str = Field(alias="logsFile")
    follow: bool = False

class AttachConfig(BaseModel):
    """
    A log file streamed when attaching to a set of containers.
    """
    model_config = ConfigDict(populate_by_name=True)

    containers: List[str] = []
    logs_file: str = Field(alias="logsFile")

class LogsSpec(BaseModel):
    logs: List[Log] = []

class ClusterLogsSpec(LogsSpec):
    selector: Optional[Selector] = None

class AttachSpec(BaseModel):
    attaches: List[AttachConfig] = []

class ClusterAttachSpec(AttachSpec):
    selector: Optional[Selector] = None

class Logs(BaseModel):
    """
    Logs for the containers of a single pod.
    """
    name: str = ""
    namespace: str = "default"
    spec: LogsSpec = Field(default_factory=LogsSpec)

class ClusterLogs(BaseModel):
    """
    Logs for the containers of every selected pod.
    """
    name: str = ""
    spec: ClusterLogsSpec = Field(default_factory=ClusterLogsSpec)

class Attach(BaseModel):
    """
    Attach output for the containers of a single pod.
    """
    name: str = ""
    namespace: str = "default"
    spec: AttachSpec = Field(default_factory=AttachSpec)

class ClusterAttach(BaseModel):
    """
    Attach output for the containers of every selected pod.
    """
    name: str = ""
    spec: ClusterAttachSpec = Field(default_factory=ClusterAttachSpec)
