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
Dependency resolution for components to determine startup and shutdown groups.
"""
from typing import List, Dict, Set
from ..MODELS.component import Component

class DependencyError(Exception):
    """
    Raised when component links cannot be resolved into groups.
    """

class DependencyResolver:
    """
    Groups components by their links so that each group only depends on
    the groups before it.
    """
    def group_by_links(self, components: List[Component]) -> List[List[Component]]:
        """
        Partitions components into ordered groups of mutually independent components.

        :param components: Components of the cluster.
        :return: Groups in startup order, each sorted by component name.
        :raises DependencyError: If the links form a cycle.
        """
        known = {component.name for component in components}
        pending: Dict[str, Component] = {component.name: component for component in components}
        done: Set[str] = set()
        groups: List[List[Component]] = []

        while pending:
            ready = [
                component for component in pending.values()
                # Only depend on components defined in the config
                if all(link in done for link in component.links if link in known)
            ]
            if not ready:
                raise DependencyError(
                    f"Circular dependency detected involving {', '.join(sorted(pending))}"
                )
            ready.sort(key=lambda component: component.name)
            for component in ready:
                del pending[component.name]
            done.update(component.name for component in ready)
            groups.append(ready)

        return groups

def group_by_links(components: List[Component]) -> List[List[Component]]:
    """
    Shortcut for :meth:`DependencyResolver.group_by_links`.
    """
    return DependencyResolver().group_by_links(components)
