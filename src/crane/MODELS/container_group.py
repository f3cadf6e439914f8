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
Models for a group of containers and the options an invocation runs with.
"""
from typing import Iterable, Iterator, List
from pydantic import BaseModel, field_validator
from .container import Container
from ..exceptions import ConfigurationError


class OrchestrationOptions(BaseModel):
    """
    Process-wide options threaded into the orchestrator.

    manual_targeting is set when containers were selected by name; it lets
    containers flagged `manual` take part in run and start.
    """
    manual_targeting: bool = False
    verbose: bool = False


class ContainerGroup(BaseModel):
    """
    Ordered containers processed together by one invocation.
    Providers of volumes and links must come before their consumers.
    """
    containers: List[Container] = []

    @field_validator("containers")
    @classmethod
    def _unique_names(cls, containers: List[Container]) -> List[Container]:
        seen = set()
        for container in containers:
            if container.name in seen:
                raise ValueError(f"duplicate container name '{container.name}'")
            seen.add(container.name)
        return containers

    def __iter__(self) -> Iterator[Container]:
        return iter(self.containers)

    def __len__(self) -> int:
        return len(self.containers)

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.containers]

    def select(self, targets: Iterable[str]) -> "ContainerGroup":
        """
        Returns the sub-group of the named containers, in declared order.

        :param targets: Container names.
        :raises ConfigurationError: If a name is not part of the group.
        """
        wanted = set(targets)
        unknown = wanted - set(self.names)
        if unknown:
            raise ConfigurationError(f"Unknown container(s): {', '.join(sorted(unknown))}")
        return ContainerGroup(containers=[c for c in self.containers if c.name in wanted])
