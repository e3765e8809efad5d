"""Shared fixtures: an in-memory filesystem and a recording command runner."""

from __future__ import annotations

import pytest

from mymake.errors import CommandError
from mymake.parser import parse_rules
from mymake.planner import BuildPlanner
from mymake.probe import FileStat
from mymake.ui.console import Console, set_console


class FakeProbe:
    """Files are a name -> mtime mapping; a missing key means no file."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.clock = max(self.files.values(), default=0) + 1
        self.calls = []

    def probe(self, path):
        self.calls.append(path)
        if path in self.files:
            return FileStat(exists=True, modified_at=self.files[path])
        return FileStat(exists=False, error="No such file or directory")

    def touch(self, name):
        self.files[name] = self.clock
        self.clock += 1


class FakeRunner:
    """
    Records commands instead of running them.

    `touch X` creates/updates X in the fake probe; commands listed in
    `fail_on` raise CommandError.
    """

    def __init__(self, probe=None, fail_on=()):
        self.probe = probe
        self.fail_on = set(fail_on)
        self.commands = []

    def execute(self, command):
        if command in self.fail_on:
            raise CommandError("Command failed (exit=1)", details={"cmd": command, "exit_code": 1})
        self.commands.append(command)
        parts = command.split()
        if self.probe is not None and parts and parts[0] == "touch":
            for name in parts[1:]:
                self.probe.touch(name)


@pytest.fixture(autouse=True)
def quiet_console():
    console = Console(debug=False)
    set_console(console)
    return console


@pytest.fixture
def plan():
    """
    Factory: plan(rule_text, files=None, fail_on=()) -> (planner, runner, probe)

    The planner is wired to a FakeProbe seeded with `files` and a FakeRunner
    that fails on every command in `fail_on`.
    """
    def _plan(text, files=None, fail_on=()):
        probe = FakeProbe(files)
        runner = FakeRunner(probe, fail_on=fail_on)
        graph = parse_rules(text).graph
        return BuildPlanner(graph, runner=runner, probe=probe), runner, probe

    return _plan
