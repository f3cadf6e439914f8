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
Models for defining containers and the parameters they are run with.
"""
from typing import List, Optional, Union, Any
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Command = Union[str, List[str]]


class RunParameters(BaseModel):
    """
    Flags passed to `docker run`. Keys follow the docker flag names.
    String values may contain environment placeholders; they are expanded
    when the arguments are compiled, not when the configuration is loaded.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    add_host: List[str] = Field(default=[], alias="add-host")
    other: List[str] = []
    cidfile: str = ""
    cpu_shares: int = Field(default=0, alias="cpu-shares")
    detach: bool = False
    dns: List[str] = []
    entrypoint: str = ""
    env: List[str] = []
    expose: List[str] = []
    hostname: str = ""
    interactive: bool = False
    link: List[str] = []
    lxc_conf: List[str] = Field(default=[], alias="lxc-conf")
    mapped_volumes_from: List[str] = Field(default=[], alias="mapped-volumes-from")
    memory: str = ""
    net: str = ""
    privileged: bool = False
    publish: List[str] = []
    publish_all: bool = Field(default=False, alias="publish-all")
    rm: bool = False
    tty: bool = False
    user: str = ""
    volume: List[str] = []
    volumes_from: List[str] = Field(default=[], alias="volumes-from")
    workdir: str = ""
    cmd: Optional[Command] = None

    @field_validator("env", mode="before")
    @classmethod
    def _env_mapping(cls, value: Any) -> Any:
        # {"KEY": "value"} is accepted as well as ["KEY=value"]
        if isinstance(value, dict):
            return [f"{k}={'' if v is None else v}" for k, v in value.items()]
        return value

    @field_validator("expose", mode="before")
    @classmethod
    def _expose_numbers(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(v) if isinstance(v, int) and not isinstance(v, bool) else v for v in value]
        return value

    @field_validator("cmd", mode="before")
    @classmethod
    def _check_command(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return list(value)
        raise ValueError("cmd must be a string or a list of strings")

    @property
    def command_tokens(self) -> List[str]:
        """
        The trailing command of `docker run`: nothing, one token or a token list.
        """
        if self.cmd is None:
            return []
        if isinstance(self.cmd, str):
            return [self.cmd] if self.cmd else []
        return list(self.cmd)


class Container(BaseModel):
    """
    A container of a group: where its image comes from and how it is run.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str
    image: str
    dockerfile: str = ""
    manual: bool = False
    run: RunParameters = Field(default_factory=RunParameters, validation_alias=AliasChoices("run", "Run"))

    # Runtime-assigned identifier, cached once resolved
    id: Optional[str] = None

    @field_validator("name", "image")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def builds_locally(self) -> bool:
        return bool(self.dockerfile)
