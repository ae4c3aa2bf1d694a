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
Models for cluster components, their volumes, environment and ports.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

class HostPathType(str, Enum):
    """
    Kinds of host path a volume may mount.
    """
    UNSET = ""
    DIRECTORY_OR_CREATE = "DirectoryOrCreate"
    DIRECTORY = "Directory"
    FILE_OR_CREATE = "FileOrCreate"
    FILE = "File"
    SOCKET = "Socket"
    CHAR_DEVICE = "CharDevice"
    BLOCK_DEVICE = "BlockDevice"

class Env(BaseModel):
    """
    A single environment entry passed to a component.
    """
    name: str
    value: str = ""

class Volume(BaseModel):
    """
    Mount descriptor mapping a host path into a component.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    host_path: str = Field(default="", alias="hostPath")
    mount_path: str = Field(default="", alias="mountPath")
    path_type: HostPathType = Field(default=HostPathType.UNSET, alias="pathType")
    read_only: bool = Field(default=False, alias="readOnly")

class Port(BaseModel):
    """
    A port exposed by a component.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    port: int
    host_port: Optional[int] = Field(default=None, alias="hostPort")
    protocol: str = "TCP"

class Component(BaseModel):
    """
    A named unit of deployable work in the cluster.
    
    ``links`` names the components that must be up before this one starts.
    ``args`` holds flag tokens of the form ``--key=value``.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str
    links: List[str] = []

    # Execution
    binary: Optional[str] = None
    command: List[str] = []
    args: List[str] = []
    work_dir: Optional[str] = Field(default=None, alias="workDir")

    # Environment
    envs: List[Env] = []

    # Storage
    volumes: List[Volume] = []

    # Networking
    ports: List[Port] = []

    def full_command(self) -> List[str]:
        """
        Builds the command line that launches the component.

        :return: Binary (if any), command, then args.
        """
        command = [self.binary] if self.binary else []
        return command + list(self.command) + list(self.args)
