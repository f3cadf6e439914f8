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
Resolution of the host path backing a volume of another container.

Older docker versions expose volumes as `{{.Volumes}}`, a display-formatted
map; newer ones only have the structured `{{.Mounts}}` list. The map is tried
first and the mounts list is the fallback.
"""
import re
from typing import List
from pydantic import TypeAdapter, ValidationError
from ..MODELS.mount import Mount
from ..RUNNERS.process_runner import ProcessRunner
from ..exceptions import CommandError, ConfigurationError
from .runtime_inspector import NO_VALUE

VOLUME_MAP_PATTERN = re.compile(r"map\[(.*)\]$")

_MOUNTS = TypeAdapter(List[Mount])


def parse_volume_map(output: str, destination: str) -> str:
    """
    Finds the host path of a destination in `{{.Volumes}}` output.

    :param output: Text like `map[/data:/var/lib/docker/vfs/dir/ab12 /logs:/home/core/logs]`.
    :param destination: Path inside the source container.
    :return: The host path.
    :raises ConfigurationError: If the text is not a map or has no such destination.
    """
    match = VOLUME_MAP_PATTERN.search(output)
    if not match:
        raise ConfigurationError(f"Cannot parse volumes from inspect output '{output}'")
    for vol_map in match.group(1).split(" "):
        parts = vol_map.split(":")
        if len(parts) < 2:
            continue
        container_path, host_path = parts[0], parts[1]
        if container_path == destination:
            return host_path
    raise ConfigurationError(f"Cannot find volume {destination} in inspect output '{output}'")


def parse_mounts(output: str, destination: str) -> str:
    """
    Finds the source of a destination in `{{json .Mounts}}` output.

    :param output: JSON list of mounts.
    :param destination: Path inside the source container.
    :return: The source path.
    :raises ConfigurationError: If the output cannot be decoded or has no such destination.
    """
    try:
        mounts = _MOUNTS.validate_json(output)
    except ValidationError as e:
        raise ConfigurationError(f"Cannot parse mounts from inspect output '{output}': {e}") from e
    for mount in mounts:
        if mount.destination == destination:
            return mount.source
    raise ConfigurationError(f"Cannot find mount matching volume {destination} in inspect output '{output}'")


class VolumeSourceResolver:
    """
    Computes where a volume of another container lives on the host.
    """
    def __init__(self, runner: ProcessRunner):
        """
        :param runner: Runner used for the inspection commands.
        """
        self.runner = runner

    def resolve_source(self, source_container: str, destination: str) -> str:
        """
        Resolves the host path backing `destination` inside `source_container`.

        :param source_container: Name of the container owning the volume.
        :param destination: Path of the volume inside that container.
        :return: The host path.
        :raises ConfigurationError: If the volume cannot be found.
        """
        try:
            output = self.runner.output(["inspect", "--format={{.Volumes}}", source_container])
        except CommandError:
            return self._resolve_from_mounts(source_container, destination)
        if output == NO_VALUE:
            return self._resolve_from_mounts(source_container, destination)
        return parse_volume_map(output, destination)

    def _resolve_from_mounts(self, source_container: str, destination: str) -> str:
        try:
            output = self.runner.output(["inspect", "--format={{json .Mounts}}", source_container])
        except CommandError as e:
            raise ConfigurationError(
                f"Cannot inspect mounts of {source_container} for volume {destination}: {e}"
            ) from e
        return parse_mounts(output, destination)
