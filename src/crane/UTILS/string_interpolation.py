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
Utilities for string interpolation using environment variables.
"""
import os
import re
from typing import Iterable, List, Mapping, Optional

class EnvironmentInterpolator:
    """
    Utility for expanding environment variables in configuration values.
    Supports $VAR, ${VAR}, ${VAR:-default} and ${VAR:+value}.
    Unset variables expand to an empty string, as in a shell.
    """
    # Group 1: braced VAR name
    # Group 2: - or +
    # Group 3: default or value
    # Group 4: bare VAR name
    PATTERN = re.compile(r'\$(?:\{([^}:]+)(?::(-|\+)([^}]*))?\}|([A-Za-z_][A-Za-z0-9_]*))')

    @classmethod
    def expand(cls, template: str, context: Optional[Mapping[str, str]] = None) -> str:
        """
        Expands environment variables in the template string.

        :param template: The string containing $VAR or ${VAR} placeholders.
        :param context: The environment variables context. Defaults to os.environ.
        :return: The expanded string.
        """
        if context is None:
            context = os.environ

        def replace(match):
            """
            Internal replacement function for re.sub.
            """
            var_name = match.group(1) or match.group(4)
            modifier = match.group(2)
            alt_value = match.group(3)

            value = context.get(var_name)

            if modifier == '-':
                # ${VAR:-default} -> use default if VAR is unset or empty
                return value if value else alt_value
            elif modifier == '+':
                # ${VAR:+value} -> use alt_value if VAR is set and not empty, else empty
                return alt_value if value else ''
            return value if value is not None else ''

        return cls.PATTERN.sub(replace, template)

    @classmethod
    def expand_all(cls, templates: Iterable[str], context: Optional[Mapping[str, str]] = None) -> List[str]:
        """
        Expands every string of a sequence.
        """
        return [cls.expand(t, context) for t in templates]
