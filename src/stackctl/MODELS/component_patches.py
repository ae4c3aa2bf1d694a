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
Models for site-specific patches layered over component definitions.
"""
from typing import List
from pydantic import BaseModel, ConfigDict, Field
from .component import Env, Volume

class ExtraArgs(BaseModel):
    """
    A single argument directive. With ``override`` set, the value replaces
    every value currently held for ``key``; otherwise it is added alongside.
    """
    key: str
    value: str
    override: bool = False

class ComponentPatches(BaseModel):
    """
    Overrides targeting exactly one component by name.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    extra_args: List[ExtraArgs] = Field(default=[], alias="extraArgs")
    extra_volumes: List[Volume] = Field(default=[], alias="extraVolumes")
    extra_envs: List[Env] = Field(default=[], alias="extraEnvs")
