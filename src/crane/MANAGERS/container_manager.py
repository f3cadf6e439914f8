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
Lifecycle management of a single container.
"""
from ..MODELS.container import Container
from ..RUNNERS.process_runner import ProcessRunner
from ..BUILDERS.run_arguments import RunArgumentCompiler
from ..UTILS.string_interpolation import EnvironmentInterpolator
from ..UTILS import console
from ..exceptions import PreconditionError
from .runtime_inspector import RuntimeInspector

class ContainerManager:
    """
    Drives one container between absent, stopped and running.

    The state is never stored: every operation asks the inspector first, so
    calling an operation twice is harmless.
    """
    def __init__(self,
                 container: Container,
                 runner: ProcessRunner,
                 inspector: RuntimeInspector,
                 compiler: RunArgumentCompiler,
                 manual_targeting: bool = False):
        """
        Initializes the manager for a container.

        :param container: Definition of the container.
        :param runner: Runner for the state-changing docker commands.
        :param inspector: Source of the current docker state.
        :param compiler: Translator of the run parameters.
        :param manual_targeting: Whether manual containers take part in run and start.
        """
        self.container = container
        self.runner = runner
        self.inspector = inspector
        self.compiler = compiler
        self.manual_targeting = manual_targeting

    @property
    def skipped(self) -> bool:
        return self.container.manual and not self.manual_targeting

    def pull_image(self):
        console.progress(f"Pulling image {self.container.image} ... ")
        self.runner.execute(["pull", self.container.image])

    def build_image(self):
        console.progress(f"Building image {self.container.image} ... ")
        dockerfile = EnvironmentInterpolator.expand(self.container.dockerfile, self.compiler.environ)
        self.runner.execute(["build", "--rm", f"--tag={self.container.image}", dockerfile])

    def provision(self, force: bool = False):
        """
        Builds the image if a Dockerfile is configured, pulls it otherwise.

        :param force: Rebuild or re-pull even if the image exists.
        """
        if force or not self.inspector.image_exists(self.container.image):
            if self.container.builds_locally:
                self.build_image()
            else:
                self.pull_image()
        else:
            console.notice(f"Image {self.container.image} does already exist. Use --force to recreate.")

    def pull(self, force: bool = False):
        """
        Pulls the image from the registry.

        :param force: Re-pull even if the image exists.
        """
        if force or not self.inspector.image_exists(self.container.image):
            self.pull_image()
        else:
            console.notice(f"Image {self.container.image} does already exist. Use --force to re-pull.")

    def run(self):
        """
        Creates and starts the container, or starts it if it already exists.
        """
        if self.skipped:
            return

        if self.inspector.exists(self.container):
            console.notice(f"Container {self.container.name} does already exist. Use --force to recreate.")
            if not self.inspector.is_running(self.container):
                self.start()
            return

        # Compiled before anything is printed or executed
        args = self.compiler.compile(self.container)
        console.progress(f"Running container {self.container.name} ... ")
        self.runner.execute(args)

    def start(self):
        """
        Starts an existing, stopped container.

        :raises PreconditionError: If the container does not exist.
        """
        if self.skipped:
            return

        if not self.inspector.exists(self.container):
            raise PreconditionError(f"Container {self.container.name} does not exist.")
        if not self.inspector.is_running(self.container):
            console.progress(f"Starting container {self.container.name} ... ")
            self.runner.execute(["start", self.container.name])

    def stop(self):
        if self.inspector.is_running(self.container):
            console.progress(f"Stopping container {self.container.name} ... ")
            self.runner.execute(["stop", self.container.name])

    def kill(self):
        if self.inspector.is_running(self.container):
            console.progress(f"Killing container {self.container.name} ... ")
            self.runner.execute(["kill", self.container.name])

    def rm(self):
        """
        Removes a stopped container.

        :raises PreconditionError: If the container is running.
        """
        if not self.inspector.exists(self.container):
            return
        if self.inspector.is_running(self.container):
            raise PreconditionError(f"Container {self.container.name} is running and cannot be removed.")
        console.progress(f"Removing container {self.container.name} ... ")
        self.runner.execute(["rm", self.container.name])
