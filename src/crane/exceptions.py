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

"""Custom exceptions for Crane."""
from typing import List, Optional


class CraneError(Exception):
    """Base exception for all Crane errors."""
    pass


class CommandError(CraneError):
    """Exception raised when an external command exits non-zero."""
    def __init__(self, args: List[str], returncode: Optional[int] = None, output: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.output = output
        message = f"Command '{' '.join(self.command)}' failed"
        if returncode is not None:
            message += f" with exit status {returncode}"
        if output:
            message += f": {output}"
        super().__init__(message)


class InspectionError(CraneError):
    """Exception raised when a read-only docker query fails."""
    pass


class ConfigurationError(CraneError):
    """Exception raised for invalid configuration or untranslatable runtime output."""
    pass


class PreconditionError(CraneError):
    """Exception raised when a container is not in a state the operation requires."""
    pass
