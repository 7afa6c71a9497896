from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .context import RunContext
from .errors import MachineSetupError, ShellSpawnError, classify_command_error
from .lib.distribution import Distribution, should_skip
from .lib.shell import CmdResult, Shell, ShellLike, shell_program
from .status import Status

logger = logging.getLogger(__name__)

# Guard checks always run under plain sh, whatever the payload uses.
CHECK_SHELL = Shell.SH


def check_satisfied(ctx: RunContext, check: str, *, cwd: Optional[str] = None) -> bool:
    """True when the check exits 0 with non-empty stdout."""

    try:
        r = ctx.invoker.run_captured(CHECK_SHELL, check, cwd=cwd)
    except ShellSpawnError as e:
        logger.warning("Check could not be started (%s); treating as not satisfied", e)
        return False
    return r.returncode == 0 and bool(r.stdout)


@dataclass(frozen=True)
class CommandOutcome:
    status: Status
    result: Optional[CmdResult] = None
    error: Optional[MachineSetupError] = None

    @property
    def stdout(self) -> str:
        return self.result.stdout if self.result else ""


@dataclass(frozen=True)
class CommandUnit:
    command: str
    shell: ShellLike = None
    distribution: Optional[Distribution] = None
    check: Optional[str] = None
    spawn: bool = False

    def __post_init__(self) -> None:
        if not self.command or not self.command.strip():
            raise ValueError("command line must not be empty")

    @classmethod
    def from_line(cls, line: str) -> "CommandUnit":
        return cls(command=line)

    def should_skip(self, ctx: RunContext) -> bool:
        return should_skip(self.distribution, ctx.identify)

    def before_run(self, ctx: RunContext, *, cwd: Optional[str] = None) -> Status:
        if self.should_skip(ctx):
            return Status.SKIPPED
        if self.check is not None and check_satisfied(ctx, self.check, cwd=cwd):
            return Status.PASSED
        return Status.RUNNING

    def after_run(self, ctx: RunContext, status: Status) -> Status:
        if not status.is_resting:
            raise ValueError(f"{self.command!r} finished without a resting status")
        status.print_message(self.command)
        return status

    def execute(
        self,
        ctx: RunContext,
        *,
        attached: Optional[bool] = None,
        cwd: Optional[str] = None,
    ) -> CommandOutcome:
        """Run the full lifecycle and return status plus diagnostics."""

        pre = self.before_run(ctx, cwd=cwd)
        if pre is not Status.RUNNING:
            logger.info("%s: %s", pre.value, self.command)
            return CommandOutcome(status=self.after_run(ctx, pre))

        use_attached = self.spawn if attached is None else attached
        result: Optional[CmdResult] = None
        try:
            if use_attached:
                code = ctx.invoker.run_attached(self.shell, self.command, cwd=cwd)
                argv = [shell_program(self.shell), "-c", self.command]
                result = CmdResult(argv=argv, returncode=code, stdout="", stderr="")
            else:
                result = ctx.invoker.run_captured(self.shell, self.command, cwd=cwd)
        except ShellSpawnError as e:
            logger.error("Failed to spawn %r: %s", self.command, e)
            return CommandOutcome(status=self.after_run(ctx, Status.FAILURE), error=e)

        # Negative return codes mean the child was killed by a signal.
        if result.returncode == 0:
            return CommandOutcome(status=self.after_run(ctx, Status.SUCCESS), result=result)

        error = classify_command_error(self.command, result.returncode, result.stderr)
        logger.error("%s (exit %s)", error, result.returncode)
        return CommandOutcome(status=self.after_run(ctx, Status.FAILURE), result=result, error=error)

    def run(self, ctx: RunContext, *, cwd: Optional[str] = None) -> Status:
        return self.execute(ctx, cwd=cwd).status

    def run_attached(self, ctx: RunContext, *, cwd: Optional[str] = None) -> Status:
        return self.execute(ctx, attached=True, cwd=cwd).status
