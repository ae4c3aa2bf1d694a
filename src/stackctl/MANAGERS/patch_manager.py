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
Layering of component patches over baseline component definitions.
"""
from typing import Dict, List, Tuple, Union
from ..MODELS.component import Component
from ..MODELS.component_patches import ComponentPatches
from ..MODELS.cluster_config import ClusterConfiguration

def get_component_patches(patches: Union[ClusterConfiguration, List[ComponentPatches]],
                          component_name: str) -> ComponentPatches:
    """
    Looks up the patch record for a component.

    :param patches: A cluster configuration or a list of patch records.
    :param component_name: Name of the component.
    :return: The first matching record, or an empty record for the component.
    """
    if isinstance(patches, ClusterConfiguration):
        patches = patches.components_patches
    for patch in patches:
        if patch.name == component_name:
            return patch
    return ComponentPatches(name=component_name)

def apply_component_patches(component: Component, patches: List[ComponentPatches]) -> Component:
    """
    Applies every patch targeting the component, in list order.

    :param component: The baseline component, left unchanged.
    :param patches: Patch records; records for other components are ignored.
    :return: A patched copy of the component.
    """
    patched = component.model_copy(deep=True)
    for patch in patches:
        patched = apply_component_patch(patched, patch)
    return patched

def apply_component_patch(component: Component, patch: ComponentPatches) -> Component:
    """
    Applies a single patch record.

    Extra volumes and envs are appended as they are. Extra args are merged
    by key, then the args are rebuilt in sorted order.

    :param component: The component to patch, left unchanged.
    :param patch: The patch record.
    :return: The patched component, or ``component`` itself if the patch
        targets another component.
    """
    if patch.name != component.name:
        return component

    return component.model_copy(update={
        "volumes": list(component.volumes) + [v.model_copy() for v in patch.extra_volumes],
        "envs": list(component.envs) + [e.model_copy() for e in patch.extra_envs],
        "args": _merge_args(component.args, patch),
    }, deep=True)

def _merge_args(args: List[str], patch: ComponentPatches) -> List[str]:
    args_map: Dict[str, List[str]] = {}
    for arg in args:
        key, value = parse_arg(arg)
        if not key or not value:
            continue
        args_map.setdefault(key, []).append(value)

    for extra in patch.extra_args:
        values = args_map.get(extra.key, [])
        if values and extra.override:
            values = []
        args_map[extra.key] = values + [extra.value]

    return sorted(f"--{key}={value}" for key, values in args_map.items() for value in values)

def parse_arg(arg: str) -> Tuple[str, str]:
    """
    Splits a ``--key=value`` token on its first ``=``.

    :param arg: The argument token.
    :return: Key and value, or two empty strings if the token is not a flag.
    """
    if not arg.startswith("--") or "=" not in arg:
        return "", ""
    key, value = arg[2:].split("=", 1)
    return key, value
