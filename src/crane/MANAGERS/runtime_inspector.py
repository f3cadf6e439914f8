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
Queries docker for container identity, running state and image presence.
"""
import re
from typing import List
from ..MODELS.container import Container
from ..RUNNERS.process_runner import ProcessRunner
from ..UTILS.image_reference import ImageReference
from ..UTILS import console
from ..exceptions import CommandError, InspectionError

NO_VALUE = "<no value>"

STATUS_FORMAT = (
    "{{.State.Running}}\t{{.Id}}\t"
    "{{if .NetworkSettings.IPAddress}}{{.NetworkSettings.IPAddress}}{{else}}-{{end}}\t"
    "{{range $k,$v := $.NetworkSettings.Ports}}{{$k}},{{end}}"
)


class RuntimeInspector:
    """
    Read-only view of the docker state.

    The existence probes list ids or images and keep only whole-line matches,
    so an id prefix never counts as a hit. They never raise.
    """
    def __init__(self, runner: ProcessRunner):
        """
        Initializes the inspector.

        :param runner: Runner used for the inspection commands.
        """
        self.runner = runner

    def resolve_id(self, container: Container) -> str:
        """
        Returns the id of the container, inspecting docker on first use.

        :param container: The container to look up.
        :return: The id, or an empty string if no such container exists.
        :raises InspectionError: If docker could not be queried.
        """
        if container.id:
            return container.id
        try:
            output = self.runner.output(["inspect", "--type=container", "--format={{.Id}}", container.name])
        except CommandError as e:
            if "No such" in e.output:
                return ""
            raise InspectionError(f"Cannot inspect container {container.name}: {e}") from e

        for possible_id in re.split(r"[|\n]", output):
            possible_id = possible_id.strip()
            if possible_id and possible_id != NO_VALUE:
                container.id = possible_id
                return possible_id
        return ""

    def exists(self, container: Container) -> bool:
        """
        Checks whether the container exists, running or not.
        """
        return self._listed(container, ["ps", "--quiet", "--all", "--no-trunc"])

    def is_running(self, container: Container) -> bool:
        """
        Checks whether the container is running.
        """
        return self._listed(container, ["ps", "--quiet", "--no-trunc"])

    def image_exists(self, image: str) -> bool:
        """
        Checks whether the image is present locally. An untagged reference
        matches the `latest` tag.
        """
        try:
            ref = ImageReference.parse(image)
        except ValueError:
            return False
        listing = [self.runner.executable, "images", "--no-trunc", f"--format={ref.listing_format}"]
        return self._contains(listing, ref.short_name)

    def status(self, container: Container) -> List[str]:
        """
        Inspects running flag, id, IP address and exposed ports in one query.

        :return: [running, id, address, ports]
        :raises InspectionError: If the container cannot be inspected.
        """
        try:
            output = self.runner.output(["inspect", "--type=container", f"--format={STATUS_FORMAT}", container.name])
        except CommandError as e:
            raise InspectionError(e.output or str(e)) from e
        fields = output.split("\t")
        fields += [""] * (4 - len(fields))
        running, container_id, address, ports = fields[:4]
        return [running, container_id, address, ports.rstrip(",")]

    def _listed(self, container: Container, listing: List[str]) -> bool:
        try:
            container_id = self.resolve_id(container)
        except InspectionError as e:
            # Reported but treated as absent
            console.warning(f"Warning: {e}")
            return False
        if not container_id:
            return False
        return self._contains([self.runner.executable] + listing, container_id)

    def _contains(self, listing: List[str], token: str) -> bool:
        try:
            output = self.runner.piped_output(listing, ["grep", "-xF", token])
        except CommandError as e:
            # grep exits 1 on no match; anything else is a failed listing or filter
            if e.command == listing or e.returncode != 1:
                console.warning(f"Warning: {e}")
            return False
        return len(output.strip()) > 0
