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
Command Line Interface for Crane.
"""
import functools
import click
from .. import __version__
from ..PARSERS.config_parser import load_group
from ..MANAGERS.group_orchestrator import GroupOrchestrator
from ..MODELS.container_group import OrchestrationOptions
from ..RUNNERS.process_runner import ProcessRunner
from ..UTILS import console
from ..exceptions import CraneError

force_option = click.option('--force', '-f', is_flag=True, help='Force the operation')
kill_option = click.option('--kill', '-k', is_flag=True, help='Kill containers instead of stopping them')


def crane_command(func):
    """
    Loads the configuration, builds the orchestrator and reports errors.

    Every Crane error ends here: it is printed without a traceback and the
    process exits with status 1.
    """
    @click.pass_context
    @functools.wraps(func)
    def wrapper(ctx, *args, **kwargs):
        try:
            group = load_group(ctx.obj['config'], ctx.obj['config_file'])
            targets = ctx.obj['targets']
            if targets:
                group = group.select(targets)
            options = OrchestrationOptions(manual_targeting=bool(targets), verbose=ctx.obj['verbose'])
            runner = ProcessRunner(verbose=options.verbose)
            orchestrator = GroupOrchestrator(group, runner, options)
            return func(orchestrator, *args, **kwargs)
        except CraneError as e:
            console.error(f"ERROR: {e}")
            ctx.exit(1)
    return wrapper


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--config', '-c', default=None, help='Config to read from (JSON or YAML)')
@click.option('--config-file', '-y', default=None, help='Config file to read from')
@click.option('--target', '-t', 'targets', multiple=True,
              help='Only operate on the named container; manual containers are included when named')
@click.pass_context
def cli(ctx, verbose, config, config_file, targets):
    """
    crane - Lift containers with ease

    Crane is a little tool to orchestrate Docker containers. It reads a
    Cranefile (JSON or YAML) which describes how to obtain container images
    and how to run them. See the corresponding docker commands for more
    information.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['config'] = config
    ctx.obj['config_file'] = config_file
    ctx.obj['targets'] = list(targets)


@cli.command()
@force_option
@kill_option
@crane_command
def lift(orchestrator, force, kill):
    """Build or pull images, then run or start the containers.

    Specified Dockerfiles are used to build the images. If no Dockerfile is
    given, the image is pulled from the index.
    """
    orchestrator.lift(force, kill)


@cli.command()
@force_option
@crane_command
def provision(orchestrator, force):
    """Build or pull images."""
    orchestrator.provision(force)


@cli.command()
@force_option
@crane_command
def pull(orchestrator, force):
    """Pull images from the index."""
    orchestrator.pull(force)


@cli.command()
@force_option
@kill_option
@crane_command
def run(orchestrator, force, kill):
    """Run the containers (docker run)."""
    orchestrator.run(force, kill)


@cli.command()
@force_option
@kill_option
@crane_command
def rm(orchestrator, force, kill):
    """Remove the containers (docker rm)."""
    orchestrator.rm(force, kill)


@cli.command()
@crane_command
def kill(orchestrator):
    """Kill the containers (docker kill)."""
    orchestrator.kill()


@cli.command()
@crane_command
def start(orchestrator):
    """Start the containers (docker start)."""
    orchestrator.start()


@cli.command()
@crane_command
def stop(orchestrator):
    """Stop the containers (docker stop)."""
    orchestrator.stop()


@cli.command()
@crane_command
def status(orchestrator):
    """Displays status of containers."""
    orchestrator.status()


@cli.command()
def version():
    """Display version."""
    click.echo(f"v{__version__}")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
