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
Execution of docker commands, either attached to the terminal or with
captured output.
"""
import subprocess
from typing import List
from ..exceptions import CommandError
from ..UTILS import console

class ProcessRunner:
    """
    Runs one external command at a time and waits for it to finish.
    """
    def __init__(self, executable: str = "docker", verbose: bool = False):
        """
        Initializes the process runner.

        Args:
            executable (str): Program every command is passed to.
            verbose (bool): Echo each attached command before running it.
        """
        self.executable = executable
        self.verbose = verbose

    def execute(self, args: List[str]):
        """
        Runs the executable with inherited stdin, stdout and stderr.

        Args:
            args (List[str]): Arguments passed to the executable.

        Raises:
            CommandError: If the command exits non-zero or cannot be started.
        """
        command = [self.executable] + list(args)
        if self.verbose:
            console.command(command)
        try:
            # Avoid shell=True for security reasons (CWE-78)
            result = subprocess.run(command, shell=False)
        except OSError as e:
            raise CommandError(command, output=str(e)) from e
        if result.returncode != 0:
            raise CommandError(command, result.returncode)

    def output(self, args: List[str]) -> str:
        """
        Runs the executable and captures stdout and stderr together.

        Args:
            args (List[str]): Arguments passed to the executable.

        Returns:
            str: The combined output with surrounding whitespace removed.

        Raises:
            CommandError: If the command exits non-zero; the output is attached.
        """
        command = [self.executable] + list(args)
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                shell=False
            )
        except OSError as e:
            raise CommandError(command, output=str(e)) from e
        output = result.stdout.strip()
        if result.returncode != 0:
            raise CommandError(command, result.returncode, output)
        return output

    def piped_output(self, first: List[str], second: List[str]) -> str:
        """
        Runs `first | second` and captures the output of the second stage.

        Args:
            first (List[str]): Full command line of the producing stage.
            second (List[str]): Full command line of the filtering stage.

        Returns:
            str: Stdout of the second stage.

        Raises:
            CommandError: If the second stage exits non-zero (for grep: no match).
        """
        try:
            producer = subprocess.Popen(
                first,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                shell=False
            )
        except OSError as e:
            raise CommandError(first, output=str(e)) from e
        try:
            consumer = subprocess.Popen(
                second,
                stdin=producer.stdout,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                shell=False
            )
        except OSError as e:
            producer.kill()
            producer.wait()
            raise CommandError(second, output=str(e)) from e
        # Let the producer receive SIGPIPE if the consumer exits first
        producer.stdout.close()
        output, _ = consumer.communicate()
        producer.wait()
        if consumer.returncode != 0:
            if producer.returncode > 0:
                raise CommandError(first, producer.returncode)
            raise CommandError(first + ["|"] + second, consumer.returncode)
        return output
