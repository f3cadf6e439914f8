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
Unit tests for the docker run argument compiler.
"""
import pytest
from pydantic import ValidationError
from crane.BUILDERS.run_arguments import RunArgumentCompiler
from crane.MANAGERS.volume_resolver import VolumeSourceResolver
from crane.MODELS.container import Container, RunParameters
from crane.exceptions import ConfigurationError


def make_compiler(runtime, environ=None, cwd="/work"):
    return RunArgumentCompiler(VolumeSourceResolver(runtime), cwd=cwd, environ=environ or {})


def make_container(name="web", image="nginx:latest", **params):
    return Container(name=name, image=image, run=RunParameters(**params))


class TestRunArgumentCompiler:
    """Tests for RunArgumentCompiler."""

    def test_minimal_invocation(self, runtime):
        """Test that default parameters only produce name and image."""
        args = make_compiler(runtime).compile(make_container())
        assert args == ["run", "--name", "web", "nginx:latest"]

    def test_boolean_flags(self, runtime):
        """Test that true booleans emit a single flag each."""
        container = make_container(detach=True, interactive=True, privileged=True,
                                   publish_all=True, rm=True, tty=True)
        args = make_compiler(runtime).compile(container)
        for flag in ["--detach", "--interactive", "--privileged", "--publish-all", "--rm", "--tty"]:
            assert args.count(flag) == 1

    def test_repeatable_fields(self, runtime):
        """Test that list fields emit one flag per element."""
        container = make_container(env=["A=1", "B=2"], publish=["80:80", "443:443"],
                                   link=["db:db"], dns=["8.8.8.8"])
        args = make_compiler(runtime).compile(container)
        assert args[1:9] == ["--dns", "8.8.8.8", "--env", "A=1", "--env", "B=2", "--link", "db:db"]
        assert args[9:13] == ["--publish", "80:80", "--publish", "443:443"]

    def test_flags_precede_name_image_and_command(self, runtime):
        """Test the positional order of name, image and command."""
        container = make_container(hostname="web.local", workdir="/srv", cmd=["nginx", "-g", "daemon off;"])
        args = make_compiler(runtime).compile(container)
        assert args[-6:] == ["--name", "web", "nginx:latest", "nginx", "-g", "daemon off;"]
        assert args.index("--workdir") < args.index("--name")

    def test_environment_expansion(self, runtime):
        """Test that placeholders are replaced by their values."""
        environ = {"APP_ENV": "prod", "DOMAIN": "example.com"}
        container = make_container(env=["APP_ENV=$APP_ENV"], hostname="web.${DOMAIN}",
                                   add_host=["api.${DOMAIN}:10.0.0.1"])
        args = make_compiler(runtime, environ=environ).compile(container)
        assert "APP_ENV=prod" in args
        assert "web.example.com" in args
        assert "api.example.com:10.0.0.1" in args
        assert not any("$" in a for a in args)

    def test_image_is_not_expanded(self, runtime):
        """Test that the image name reaches docker as configured."""
        container = make_container(image="registry.local/app:$TAG")
        args = make_compiler(runtime, environ={"TAG": "1.0"}).compile(container)
        assert args == ["run", "--name", "web", "registry.local/app:$TAG"]

    def test_expansion_happens_at_compile_time(self, runtime, monkeypatch):
        """Test that the process environment is read when compiling."""
        container = make_container(user="$CRANE_TEST_USER")
        compiler = RunArgumentCompiler(VolumeSourceResolver(runtime))
        monkeypatch.setenv("CRANE_TEST_USER", "alice")
        assert compiler.compile(container)[1:3] == ["--user", "alice"]
        monkeypatch.setenv("CRANE_TEST_USER", "bob")
        assert compiler.compile(container)[1:3] == ["--user", "bob"]

    def test_net_default_is_omitted(self, runtime):
        """Test that bridge networking emits no flag."""
        assert "--net" not in make_compiler(runtime).compile(make_container(net="bridge"))
        args = make_compiler(runtime).compile(make_container(net="host"))
        assert args[1:3] == ["--net", "host"]

    def test_other_passed_verbatim(self, runtime):
        """Test that other entries are emitted without a flag."""
        args = make_compiler(runtime, environ={"LIMIT": "1024"}).compile(
            make_container(other=["--ulimit=nofile=${LIMIT}"]))
        assert args[1] == "--ulimit=nofile=1024"

    def test_scalar_fields(self, runtime):
        """Test that scalar fields emit flag and value when set."""
        container = make_container(cidfile="/tmp/cid", cpu_shares=512, entrypoint="/bin/sh",
                                   memory="512m", user="www", workdir="/srv")
        args = make_compiler(runtime).compile(container)
        assert args[1:11] == ["--cidfile", "/tmp/cid", "--cpu-shares", "512",
                              "--entrypoint", "/bin/sh", "--memory", "512m", "--user", "www"]
        assert args[11:13] == ["--workdir", "/srv"]

    def test_relative_volume_is_made_absolute(self, runtime):
        """Test that relative host paths are resolved against the working directory."""
        container = make_container(volume=["data:/var/lib/data:ro", "/abs:/abs"])
        args = make_compiler(runtime, cwd="/work").compile(container)
        assert args[1:5] == ["--volume", "/work/data:/var/lib/data:ro", "--volume", "/abs:/abs"]
        assert args[2].split(":")[1:] == ["/var/lib/data", "ro"]

    def test_mapped_volumes_from(self, runtime):
        """Test that a mapped volume is resolved to a host bind mount."""
        runtime.volumes["store"] = "map[/data:/var/lib/docker/vfs/dir/abc /logs:/srv/logs]"
        container = make_container(mapped_volumes_from=["store:/data:/mnt/data"])
        args = make_compiler(runtime).compile(container)
        assert args[1:3] == ["--volume", "/var/lib/docker/vfs/dir/abc:/mnt/data"]

    def test_mapped_volumes_from_keeps_mode(self, runtime):
        """Test that a trailing mode segment is kept."""
        runtime.mounts["store"] = [{"Source": "/host/data", "Destination": "/data", "Mode": "", "RW": True}]
        container = make_container(mapped_volumes_from=["store:/data:/mnt/data:ro"])
        args = make_compiler(runtime).compile(container)
        assert args[1:3] == ["--volume", "/host/data:/mnt/data:ro"]

    def test_mapped_volumes_from_malformed(self, runtime):
        """Test that an entry without a destination is rejected."""
        container = make_container(mapped_volumes_from=["store:/data"])
        with pytest.raises(ConfigurationError):
            make_compiler(runtime).compile(container)

    def test_command_absent(self, runtime):
        args = make_compiler(runtime).compile(make_container())
        assert args[-1] == "nginx:latest"

    def test_command_string(self, runtime):
        args = make_compiler(runtime).compile(make_container(cmd="echo hi"))
        assert args[-2:] == ["nginx:latest", "echo hi"]

    def test_command_empty_string(self, runtime):
        args = make_compiler(runtime).compile(make_container(cmd=""))
        assert args[-1] == "nginx:latest"

    def test_command_list(self, runtime):
        args = make_compiler(runtime).compile(make_container(cmd=["echo", "hi"]))
        assert args[-3:] == ["nginx:latest", "echo", "hi"]

    def test_command_other_type_rejected(self, runtime):
        """Test that a non-string command never reaches docker."""
        with pytest.raises(ValidationError):
            make_container(cmd=42)
        with pytest.raises(ValidationError):
            make_container(cmd=["echo", 1])
        assert runtime.executed == []

    def test_command_other_type_rejected_at_compile(self, runtime):
        """Test that an unvalidated command is rejected by the compiler."""
        params = RunParameters.model_construct(cmd=42)
        container = Container(name="web", image="nginx", run=params)
        with pytest.raises(ConfigurationError):
            make_compiler(runtime).compile(container)
        assert runtime.executed == []
