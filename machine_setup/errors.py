from __future__ import annotations

from typing import Optional

COMMAND_NOT_FOUND = "Command not found"
COMMAND_EXECUTION_FAILED = "Command execution failed"

# sh/dash print "sh: 1: foo: not found", bash and zsh "command not found".
_NOT_FOUND_MARKERS = ("command not found", ": not found")


class MachineSetupError(Exception):
    pass


class ShellSpawnError(MachineSetupError, OSError):
    """The interpreter process could not be started at all."""


class CommandError(MachineSetupError):
    def __init__(self, message: str, *, command: str, returncode: Optional[int], stderr: str = "") -> None:
        super().__init__(f"{message}: {command}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class CommandNotFound(CommandError):
    pass


class CommandExecutionFailed(CommandError):
    pass


class RegistryLoadError(MachineSetupError):
    pass


class RegistryLockedError(MachineSetupError):
    pass


class UnsupportedOperation(MachineSetupError, NotImplementedError):
    pass


def classify_command_error(command: str, returncode: Optional[int], stderr: str) -> CommandError:
    """Map a failed command to a diagnostic error. Does not affect control flow."""

    lowered = (stderr or "").lower()
    if any(m in lowered for m in _NOT_FOUND_MARKERS):
        return CommandNotFound(COMMAND_NOT_FOUND, command=command, returncode=returncode, stderr=stderr)
    return CommandExecutionFailed(COMMAND_EXECUTION_FAILED, command=command, returncode=returncode, stderr=stderr)
