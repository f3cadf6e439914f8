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
Console output helpers. Progress goes to stdout, notices are yellow,
errors are red on stderr.
"""
from typing import List
import click


def progress(message: str):
    """Prints a progress line without a trailing newline; the command output follows it."""
    click.echo(message, nl=False)


def notice(message: str):
    click.secho(message, fg="yellow")


def warning(message: str):
    click.secho(message, fg="yellow", err=True)


def error(message: str):
    click.secho(message, fg="red", err=True)


def command(args: List[str]):
    """Echoes a command line before it is executed (verbose mode)."""
    click.echo(f"\n--> {' '.join(args)}")


def table(rows: List[List[str]]):
    """
    Prints rows as left-aligned columns separated by two spaces.

    :param rows: Rows of cells, the first row being the header.
    """
    if not rows:
        return
    widths = [0] * max(len(row) for row in rows)
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    for row in rows:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(row)]
        click.echo("  ".join(cells).rstrip())
