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
Parsers for Cranefiles, in JSON or YAML.
"""
import os
import yaml
from typing import Dict, Any, List, Optional
from pydantic import ValidationError
from ..MODELS.container import Container
from ..MODELS.container_group import ContainerGroup
from ..exceptions import ConfigurationError

DEFAULT_CONFIG_FILES = ["Cranefile", "crane.json", "crane.yaml", "crane.yml"]


class ConfigParser:
    """
    Parser for container group definitions.

    Accepted layouts:
        - a list of container definitions, each with a `name`;
        - a mapping with a `containers` key holding such a list;
        - a mapping with a `containers` key mapping names to definitions.
    Declared order is kept.
    """
    def find_config_file(self, directory: str = ".") -> str:
        """
        Looks for a default configuration file.

        :param directory: Directory to search in.
        :return: Path of the first default file found.
        :raises ConfigurationError: If none exists.
        """
        for name in DEFAULT_CONFIG_FILES:
            path = os.path.join(directory, name)
            if os.path.isfile(path):
                return path
        raise ConfigurationError(f"No configuration found. Looked for {', '.join(DEFAULT_CONFIG_FILES)}.")

    def parse(self, config_path: str) -> ContainerGroup:
        """
        Parses a configuration file from a path.

        :param config_path: Path to the configuration file.
        :return: Parsed group.
        """
        try:
            with open(config_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration {config_path}: {e}") from e
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> ContainerGroup:
        """
        Parses a configuration from a string. JSON is read as YAML.

        :param content: JSON or YAML content.
        :return: Parsed group.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse configuration: {e}") from e
        if not data:
            data = []

        definitions = self._definitions(data)
        containers = [self._parse_container(i, definition) for i, definition in enumerate(definitions)]
        try:
            return ContainerGroup(containers=containers)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {self._first_error(e)}") from e

    def _definitions(self, data: Any) -> List[Dict[str, Any]]:
        """
        Normalizes the accepted layouts to a list of definitions.
        """
        if isinstance(data, dict):
            if 'containers' not in data:
                raise ConfigurationError("Configuration must contain a 'containers' key")
            data = data['containers'] or []
            if isinstance(data, dict):
                definitions = []
                for name, definition in data.items():
                    if definition is not None and not isinstance(definition, dict):
                        raise ConfigurationError(f"Container {name} must be a mapping")
                    definition = dict(definition or {})
                    definition.setdefault('name', name)
                    definitions.append(definition)
                return definitions
        if not isinstance(data, list):
            raise ConfigurationError("Containers must be given as a list or a mapping")
        return data

    def _parse_container(self, index: int, definition: Any) -> Container:
        """
        Validates a single container definition.

        :param index: Position of the definition, used in error messages.
        :param definition: The definition dictionary.
        :return: A Container instance.
        """
        if not isinstance(definition, dict):
            raise ConfigurationError(f"Container #{index + 1} must be a mapping")
        label = definition.get('name') or f"#{index + 1}"
        try:
            return Container.model_validate(definition)
        except ValidationError as e:
            raise ConfigurationError(f"Container {label}: {self._first_error(e)}") from e

    def _first_error(self, error: ValidationError) -> str:
        """
        Formats the first validation error as `field.path: message`.
        """
        first = error.errors()[0]
        location = ".".join(str(part) for part in first.get('loc', ()))
        if location:
            return f"{location}: {first['msg']}"
        return first['msg']


def load_group(config: Optional[str] = None,
               config_file: Optional[str] = None,
               directory: str = ".") -> ContainerGroup:
    """
    Loads a group from inline text, an explicit file or a default file.

    :param config: Inline JSON or YAML.
    :param config_file: Path of a configuration file.
    :param directory: Directory searched for default files.
    :return: Parsed group.
    """
    parser = ConfigParser()
    if config:
        return parser.parse_from_string(config)
    if config_file:
        return parser.parse(config_file)
    return parser.parse(parser.find_config_file(directory))
