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
Orchestration of a group of containers, one container at a time.
"""
from typing import List, Optional
from ..MODELS.container_group import ContainerGroup, OrchestrationOptions
from ..RUNNERS.process_runner import ProcessRunner
from ..BUILDERS.run_arguments import RunArgumentCompiler
from ..UTILS import console
from ..exceptions import CraneError
from .container_manager import ContainerManager
from .runtime_inspector import RuntimeInspector
from .volume_resolver import VolumeSourceResolver

class GroupOrchestrator:
    """
    Applies lifecycle operations to every container of a group in declared order.

    Dependencies are not computed: volume and link providers must be listed
    before their consumers. The first error aborts the whole operation.
    """
    def __init__(self,
                 group: ContainerGroup,
                 runner: ProcessRunner,
                 options: Optional[OrchestrationOptions] = None,
                 compiler: Optional[RunArgumentCompiler] = None):
        """
        Initializes the orchestrator.

        :param group: Containers to operate on.
        :param runner: Runner for all docker commands.
        :param options: Manual targeting and verbosity of this invocation.
        :param compiler: Argument compiler, built on the runner if omitted.
        """
        self.group = group
        self.runner = runner
        self.options = options or OrchestrationOptions()
        self.inspector = RuntimeInspector(runner)
        self.compiler = compiler or RunArgumentCompiler(VolumeSourceResolver(runner))
        self.managers: List[ContainerManager] = [
            ContainerManager(container,
                             runner,
                             self.inspector,
                             self.compiler,
                             manual_targeting=self.options.manual_targeting)
            for container in group
        ]

    def lift(self, force: bool = False, kill: bool = False):
        """
        Provisions the images, then runs or starts the containers.
        """
        self.provision(force)
        self.run(force, kill)

    def provision(self, force: bool = False):
        for manager in self.managers:
            manager.provision(force)

    def pull(self, force: bool = False):
        for manager in self.managers:
            manager.pull(force)

    def run(self, force: bool = False, kill: bool = False):
        """
        Runs the containers. With force they are removed first so they are
        recreated; with kill running ones are killed rather than stopped.
        Containers skipped by run are left untouched by both.
        """
        active = [manager for manager in self.managers if not manager.skipped]
        if force or kill:
            self._halt(active, kill)
        if force:
            for manager in active:
                manager.rm()
        for manager in active:
            manager.run()

    def rm(self, force: bool = False, kill: bool = False):
        """
        Removes the containers, halting running ones first if force or kill is set.
        """
        if force or kill:
            self._halt(self.managers, kill)
        for manager in self.managers:
            manager.rm()

    def _halt(self, managers: List[ContainerManager], kill: bool):
        for manager in managers:
            if kill:
                manager.kill()
            else:
                manager.stop()

    def kill(self):
        for manager in self.managers:
            manager.kill()

    def start(self):
        for manager in self.managers:
            manager.start()

    def stop(self):
        for manager in self.managers:
            manager.stop()

    def status(self) -> List[List[str]]:
        """
        Prints and returns one status row per container.

        :return: Rows of name, running, id, address and ports, after a header row.
        """
        rows = [["NAME", "RUNNING", "ID", "IP", "PORTS"]]
        for manager in self.managers:
            name = manager.container.name
            try:
                rows.append([name] + self.inspector.status(manager.container))
            except CraneError as e:
                rows.append([name, f"Error: {e}"])
        console.table(rows)
        return rows
