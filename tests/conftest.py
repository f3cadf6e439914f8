"""
Shared fixtures: an in-memory docker that records the commands it receives.
"""
import json
import pytest
from crane.exceptions import CommandError


class FakeRuntime:
    """
    Stands in for ProcessRunner. Keeps containers and images in memory and
    answers the queries the inspector and resolver issue.
    """
    def __init__(self):
        self.executable = "docker"
        self.verbose = False
        self.containers = {}   # name -> {"id": str, "running": bool, "ip": str, "ports": [str]}
        self.images = set()    # "repo:tag"
        self.volumes = {}      # name -> raw {{.Volumes}} output
        self.mounts = {}       # name -> list of mount dicts
        self.executed = []
        self.queries = []
        self.daemon_down = False

    # Helpers used by tests

    def add_container(self, name, running=False, ip="", ports=None):
        self.containers[name] = {
            "id": f"{name}-{'0' * 60}",
            "running": running,
            "ip": ip,
            "ports": ports or [],
        }

    def executed_commands(self, subcommand):
        return [args for args in self.executed if args and args[0] == subcommand]

    # ProcessRunner interface

    def execute(self, args):
        args = list(args)
        self.executed.append(args)
        sub = args[0]
        if sub == "run":
            name = args[args.index("--name") + 1]
            self.add_container(name, running=True)
        elif sub == "start":
            self.containers[args[1]]["running"] = True
        elif sub in ("stop", "kill"):
            self.containers[args[1]]["running"] = False
        elif sub == "rm":
            del self.containers[args[1]]
        elif sub == "pull":
            self.images.add(self._tagged(args[1]))
        elif sub == "build":
            tag = [a for a in args if a.startswith("--tag=")][0]
            self.images.add(self._tagged(tag[len("--tag="):]))

    def output(self, args):
        args = list(args)
        self.queries.append(args)
        command = ["docker"] + args
        if self.daemon_down:
            raise CommandError(command, 1, "Cannot connect to the Docker daemon")
        name = args[-1]
        fmt = [a for a in args if a.startswith("--format=")][0][len("--format="):]
        if fmt == "{{.Volumes}}":
            if name not in self.volumes:
                raise CommandError(command, 1, "Template parsing error: map has no entry for key \"Volumes\"")
            return self.volumes[name]
        if fmt == "{{json .Mounts}}":
            if name not in self.mounts:
                raise CommandError(command, 1, f"Error: No such object: {name}")
            return json.dumps(self.mounts[name])
        if name not in self.containers:
            raise CommandError(command, 1, f"Error: No such container: {name}")
        container = self.containers[name]
        if fmt == "{{.Id}}":
            return container["id"]
        # combined status query
        return "\t".join([
            "true" if container["running"] else "false",
            container["id"],
            container["ip"] or "-",
            "".join(f"{p}," for p in container["ports"]),
        ]).strip()

    def piped_output(self, first, second):
        self.queries.append(list(first) + ["|"] + list(second))
        if self.daemon_down:
            raise CommandError(first, 1)
        sub = first[1]
        if sub == "ps":
            lines = [c["id"] for c in self.containers.values()
                     if "--all" in first or c["running"]]
        elif sub == "images":
            lines = sorted(self.images)
        else:
            lines = []
        token = second[-1]
        matches = [line for line in lines if line == token]
        if not matches:
            raise CommandError(first + ["|"] + second, 1)
        return "\n".join(matches) + "\n"

    @staticmethod
    def _tagged(image):
        last = image.rsplit("/", 1)[-1]
        return image if ":" in last else f"{image}:latest"


@pytest.fixture
def runtime():
    return FakeRuntime()
