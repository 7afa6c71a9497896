from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..errors import ShellSpawnError

logger = logging.getLogger(__name__)


class Shell(Enum):
    BASH = "bash"
    ZSH = "zsh"
    SH = "sh"

    def __str__(self) -> str:
        return self.value


DEFAULT_SHELL = Shell.SH

ShellLike = Union[Shell, str, None]


def shell_program(shell: ShellLike) -> str:
    """Resolve a shell choice to the program name to execute.

    Unknown names are custom interpreters and are used as given.
    """
    if shell is None:
        return DEFAULT_SHELL.value
    if isinstance(shell, Shell):
        return shell.value
    return str(shell)


def parse_shell(value: object) -> ShellLike:
    """Accept "Bash", "bash", "fish" or {"Custom": "fish"}."""
    if value is None:
        return None
    if isinstance(value, dict):
        if len(value) != 1 or "Custom" not in value:
            raise ValueError(f"shell mapping must be {{'Custom': <program>}}, got {value!r}")
        custom = str(value["Custom"]).strip()
        if not custom:
            raise ValueError("custom shell name is empty")
        return custom
    name = str(value).strip()
    if not name:
        raise ValueError("shell name is empty")
    for s in Shell:
        if s.value == name.lower():
            return s
    return name


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: list[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class ShellInvoker:
    """Runs a whole command line through `<shell> -c`.

    - run_captured blocks and returns exit code + stdout/stderr.
    - run_attached shares the terminal and returns only the exit code.
    - dry_run logs but does not execute.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def _argv(self, shell: ShellLike, line: str) -> list[str]:
        return [shell_program(shell), "-c", line]

    def run_captured(self, shell: ShellLike, line: str, *, cwd: Optional[str] = None) -> CmdResult:
        argv = self._argv(shell, line)
        logger.info("CMD %s", _fmt_argv(argv))

        if self.dry_run:
            return CmdResult(argv=argv, returncode=0, stdout="", stderr="")

        try:
            p = subprocess.run(
                argv,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            raise ShellSpawnError(f"Cannot start {argv[0]}: {e}") from e

        if p.stdout:
            logger.debug("STDOUT %s", p.stdout.strip())
        if p.stderr:
            logger.debug("STDERR %s", p.stderr.strip())

        return CmdResult(argv=argv, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)

    def run_attached(self, shell: ShellLike, line: str, *, cwd: Optional[str] = None) -> int:
        argv = self._argv(shell, line)
        logger.info("CMD (attached) %s", _fmt_argv(argv))

        if self.dry_run:
            return 0

        try:
            p = subprocess.run(argv, cwd=cwd)
        except OSError as e:
            raise ShellSpawnError(f"Cannot start {argv[0]}: {e}") from e

        return p.returncode
