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
Builders for translating a container definition into `docker run` arguments.
"""
import os
from typing import List, Mapping, Optional
from ..MODELS.container import Container
from ..MANAGERS.volume_resolver import VolumeSourceResolver
from ..UTILS.string_interpolation import EnvironmentInterpolator
from ..exceptions import ConfigurationError

DEFAULT_NET = "bridge"


class RunArgumentCompiler:
    """
    Maps run parameters to the ordered arguments of `docker run`.

    All flags come first, then `--name`, the image and the command, as the
    docker CLI takes the image and command positionally.
    """
    def __init__(self,
                 resolver: VolumeSourceResolver,
                 cwd: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initializes the compiler.

        :param resolver: Resolver for mapped-volumes-from entries.
        :param cwd: Directory relative volume paths are resolved against. Defaults to the current directory.
        :param environ: Variables placeholders are expanded with. Defaults to os.environ.
        """
        self.resolver = resolver
        self.cwd = cwd
        self.environ = environ

    def compile(self, container: Container) -> List[str]:
        """
        Builds the argument list for creating and starting a container.

        :param container: The container to translate.
        :return: Arguments starting with `run`.
        :raises ConfigurationError: If a value cannot be translated.
        """
        params = container.run
        args = ["run"]

        for add_host in self._expand_all(params.add_host):
            args += ["--add-host", add_host]
        net = self._expand(params.net) or DEFAULT_NET
        if net != DEFAULT_NET:
            args += ["--net", net]
        # Passed through as-is for flags without a dedicated field
        args += self._expand_all(params.other)

        if params.cidfile:
            args += ["--cidfile", self._expand(params.cidfile)]
        if params.cpu_shares > 0:
            args += ["--cpu-shares", str(params.cpu_shares)]
        if params.detach:
            args.append("--detach")
        for dns in self._expand_all(params.dns):
            args += ["--dns", dns]
        if params.entrypoint:
            args += ["--entrypoint", self._expand(params.entrypoint)]
        for env in self._expand_all(params.env):
            args += ["--env", env]
        for expose in self._expand_all(params.expose):
            args += ["--expose", expose]
        if params.hostname:
            args += ["--hostname", self._expand(params.hostname)]
        if params.interactive:
            args.append("--interactive")
        for link in self._expand_all(params.link):
            args += ["--link", link]
        for lxc_conf in self._expand_all(params.lxc_conf):
            args += ["--lxc-conf", lxc_conf]
        for mapped in self._expand_all(params.mapped_volumes_from):
            args += ["--volume", self._mapped_volume(container, mapped)]
        if params.memory:
            args += ["--memory", self._expand(params.memory)]
        if params.privileged:
            args.append("--privileged")
        for port in self._expand_all(params.publish):
            args += ["--publish", port]
        if params.publish_all:
            args.append("--publish-all")
        if params.rm:
            args.append("--rm")
        if params.tty:
            args.append("--tty")
        if params.user:
            args += ["--user", self._expand(params.user)]
        for volume in self._expand_all(params.volume):
            args += ["--volume", self._absolute_volume(volume)]
        for volumes_from in self._expand_all(params.volumes_from):
            args += ["--volumes-from", volumes_from]
        if params.workdir:
            args += ["--workdir", self._expand(params.workdir)]

        args += ["--name", container.name, container.image]
        args += self._command(container)
        return args

    def _expand(self, value: str) -> str:
        return EnvironmentInterpolator.expand(value, self.environ)

    def _expand_all(self, values: List[str]) -> List[str]:
        return EnvironmentInterpolator.expand_all(values, self.environ)

    def _absolute_volume(self, volume: str) -> str:
        """
        Makes the host part of `host:container[:mode]` absolute; docker only bind mounts absolute paths.
        """
        paths = volume.split(":")
        if not os.path.isabs(paths[0]):
            cwd = self.cwd if self.cwd is not None else os.getcwd()
            paths[0] = os.path.join(cwd, paths[0])
        return ":".join(paths)

    def _mapped_volume(self, container: Container, mapped: str) -> str:
        """
        Turns `source:volume:dest[:mode]` into `host:dest[:mode]`.
        """
        parts = mapped.split(":")
        if len(parts) < 3:
            raise ConfigurationError(
                f"Container {container.name}: mapped-volumes-from entry '{mapped}' "
                "must look like source:volume:destination"
            )
        source, volume, dest = parts[0], parts[1], parts[2]
        host_path = self.resolver.resolve_source(source, volume)
        return ":".join([host_path, dest] + parts[3:])

    def _command(self, container: Container) -> List[str]:
        cmd = container.run.cmd
        if cmd is None or isinstance(cmd, str):
            return container.run.command_tokens
        if isinstance(cmd, list) and all(isinstance(token, str) for token in cmd):
            return list(cmd)
        raise ConfigurationError(f"Container {container.name}: cmd is of unknown type")
