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
Parsers for cluster configuration YAML files.
"""
import yaml
from typing import Any, Dict, Type
from pydantic import BaseModel
from ..MODELS.cluster_config import ClusterConfiguration
from ..MODELS.log_resources import Logs, ClusterLogs, Attach, ClusterAttach

class ConfigParser:
    """
    Parser for cluster configuration files.

    A file holds one or more YAML documents, each selecting its type with
    ``kind``: ``ClusterConfiguration`` documents contribute options,
    components and patches; ``Logs``, ``ClusterLogs``, ``Attach`` and
    ``ClusterAttach`` documents contribute log resources.
    """
    RESOURCE_KINDS: Dict[str, Type[BaseModel]] = {
        "Logs": Logs,
        "ClusterLogs": ClusterLogs,
        "Attach": Attach,
        "ClusterAttach": ClusterAttach,
    }
    NAMESPACED_KINDS = ("Logs", "Attach")

    def parse(self, config_path: str) -> ClusterConfiguration:
        """
        Parses a configuration file from a path.

        :param config_path: Path to the configuration file.
        :return: Parsed configuration.
        """
        with open(config_path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> ClusterConfiguration:
        """
        Parses configuration documents from a string.

        :param content: YAML content.
        :return: Parsed configuration.
        :raises yaml.YAMLError: If the content is not valid YAML.
        :raises pydantic.ValidationError: If a document does not match its kind.
        """
        config = ClusterConfiguration()
        for doc in yaml.safe_load_all(content):
            if not doc:
                continue
            if not isinstance(doc, dict):
                print(f"Warning: skipping document that is not a mapping: {doc!r}")
                continue

            kind = doc.get('kind', 'ClusterConfiguration')
            if kind == 'ClusterConfiguration':
                self._merge_cluster_configuration(config, doc)
            elif kind in self.RESOURCE_KINDS:
                self._add_resource(config, kind, doc)
            else:
                print(f"Warning: skipping document of unknown kind {kind!r}")
        return config

    def _merge_cluster_configuration(self, config: ClusterConfiguration, doc: Dict[str, Any]):
        """
        Merges a ClusterConfiguration document into the configuration.

        Options are taken from the last document that sets them; components
        and patches accumulate in document order.
        """
        data = {k: v for k, v in doc.items() if k not in ('kind', 'apiVersion')}
        parsed = ClusterConfiguration.model_validate(data)
        if 'options' in data:
            config.options = parsed.options
        config.components.extend(parsed.components)
        config.components_patches.extend(parsed.components_patches)

    def _add_resource(self, config: ClusterConfiguration, kind: str, doc: Dict[str, Any]):
        metadata = doc.get('metadata') or {}
        data: Dict[str, Any] = {
            'name': metadata.get('name', ''),
            'spec': doc.get('spec') or {},
        }
        if kind in self.NAMESPACED_KINDS:
            data['namespace'] = metadata.get('namespace', 'default')

        resource = self.RESOURCE_KINDS[kind].model_validate(data)
        if kind == 'Logs':
            config.logs.append(resource)
        elif kind == 'ClusterLogs':
            config.cluster_logs.append(resource)
        elif kind == 'Attach':
            config.attaches.append(resource)
        else:
            config.cluster_attaches.append(resource)
