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
Model of a mount as reported by `docker inspect --format '{{json .Mounts}}'`.
"""
from pydantic import BaseModel, ConfigDict, Field


class Mount(BaseModel):
    """
    Defines a mapping between a path inside a container and its source.
    """
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="Source")
    destination: str = Field(alias="Destination")
    mode: str = Field(default="", alias="Mode")
    rw: bool = Field(default=True, alias="RW")
