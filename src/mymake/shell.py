# shell.py
from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol

from .errors import CommandError
from .ui.console import get_console


class CommandRunner(Protocol):
    def execute(self, command: str) -> None:
        """Run one command line; raise CommandError on failure."""
        ...


class ShellCommandRunner:
    """
    Runs command lines through the system shell, one at a time.

    Output is not captured: the command talks to the terminal directly.
    On success the command text is echoed before the next one runs.
    """

    def __init__(
        self,
        *,
        cwd: str | Path | None = None,
        env: Optional[Dict[str, str]] = None,
        echo: Optional[Callable[[str], None]] = None,
    ):
        self.cwd = cwd
        self.env = env
        self.echo = echo

    def execute(self, command: str) -> None:
        env = None
        if self.env:
            env = os.environ.copy()
            env.update(self.env)

        try:
            proc = subprocess.run(
                command,
                shell=True,
                cwd=str(self.cwd) if self.cwd is not None else None,
                env=env,
            )
        except OSError as e:
            raise CommandError(
                "Command could not be started",
                details={"cmd": command, "error": str(e)},
            ) from e

        if proc.returncode != 0:
            raise CommandError(
                f"Command failed (exit={proc.returncode})",
                details={"cmd": command, "exit_code": proc.returncode},
            )

        if self.echo is not None:
            self.echo(command)
        else:
            get_console().print_command(command)
