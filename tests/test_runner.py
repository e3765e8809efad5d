"""Tests for runner.py and probe.py - the shell and filesystem edges."""

import os

import pytest

from mymake.errors import CommandError, NotFoundError, RuleFileError
from mymake.probe import OsFileSystemProbe
from mymake.runner import load_rules, make
from mymake.shell import ShellCommandRunner


class TestShellCommandRunner:
    def test_success_echoes_command(self, tmp_path):
        echoed = []
        runner = ShellCommandRunner(cwd=tmp_path, echo=echoed.append)

        runner.execute("touch out.txt")

        assert (tmp_path / "out.txt").exists()
        assert echoed == ["touch out.txt"]

    def test_failure_raises_with_exit_code(self, tmp_path):
        echoed = []
        runner = ShellCommandRunner(cwd=tmp_path, echo=echoed.append)

        with pytest.raises(CommandError) as exc:
            runner.execute("exit 3")

        assert exc.value.details["exit_code"] == 3
        assert exc.value.details["cmd"] == "exit 3"
        assert echoed == []

    def test_extra_env(self, tmp_path):
        runner = ShellCommandRunner(cwd=tmp_path, env={"MYMAKE_TEST_VALUE": "hello"}, echo=lambda _: None)

        runner.execute('test "$MYMAKE_TEST_VALUE" = hello')

    def test_default_echo_goes_to_console(self, tmp_path, capsys):
        ShellCommandRunner(cwd=tmp_path).execute("true")
        assert capsys.readouterr().out == "true\n"


class TestOsFileSystemProbe:
    def test_existing_file(self, tmp_path):
        path = tmp_path / "main.o"
        path.write_text("")
        os.utime(path, (1000, 1000))

        stat = OsFileSystemProbe(tmp_path).probe("main.o")

        assert stat.exists
        assert stat.modified_at == 1000

    def test_missing_file(self, tmp_path):
        stat = OsFileSystemProbe(tmp_path).probe("nope")

        assert not stat.exists
        assert stat.modified_at is None
        assert stat.error


class TestLoadRules:
    def test_missing_rule_file(self, tmp_path):
        with pytest.raises(RuleFileError) as exc:
            load_rules(tmp_path / "myMakefile")
        assert exc.value.details["file"].endswith("myMakefile")

    def test_crlf_rule_file(self, tmp_path):
        path = tmp_path / "rules"
        path.write_bytes(b"app : main.o\r\n\ttouch app\r\n")

        rules = load_rules(path)

        assert rules.default_target == "app"
        assert [c.text for c in rules.graph.lookup("app").commands] == ["touch app"]


class TestMake:
    def test_builds_default_target_in_order(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "myMakefile").write_text(
            "app : main.o\n\ttouch app\nmain.o :\n\ttouch main.o\n"
        )

        first = make("myMakefile", runner=ShellCommandRunner(echo=lambda _: None))
        second = make("myMakefile", runner=ShellCommandRunner(echo=lambda _: None))

        assert first.target == "app"
        assert first.executed == ["touch main.o", "touch app"]
        assert (tmp_path / "app").exists()
        assert second.up_to_date

    def test_rule_file_without_targets(self, tmp_path):
        path = tmp_path / "empty"
        path.write_text("\n\n")

        with pytest.raises(NotFoundError):
            make(path)
