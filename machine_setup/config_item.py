from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .command import CommandUnit, check_satisfied
from .context import RunContext
from .errors import UnsupportedOperation
from .status import Status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigUnit:
    """A command applied interactively, guarded by its own idempotency check."""

    command: CommandUnit
    check: Optional[str] = None

    @classmethod
    def from_line(cls, line: str, *, check: Optional[str] = None) -> "ConfigUnit":
        return cls(command=CommandUnit(command=line, spawn=True), check=check)

    def apply(self, ctx: RunContext, *, cwd: Optional[str] = None) -> Status:
        Status.RUNNING.print_message(f"Applying configuration: {self.command.command}")

        if self.check is not None and check_satisfied(ctx, self.check, cwd=cwd):
            logger.info("Configuration already applied: %s", self.command.command)
            Status.PASSED.print_message(self.command.command)
            return Status.PASSED

        return self.command.run_attached(ctx, cwd=cwd)

    def revert(self, ctx: RunContext) -> Status:
        raise UnsupportedOperation(f"Reverting configuration is not supported: {self.command.command}")
