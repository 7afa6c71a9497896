from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .command import CommandUnit, check_satisfied
from .config_item import ConfigUnit
from .context import RunContext
from .protocols import Applyable, Runnable
from .status import Status, aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetupPrecondition:
    env: List[str] = field(default_factory=list)
    working_dir: Optional[str] = None

    @property
    def resolved_working_dir(self) -> Optional[str]:
        if not self.working_dir:
            return None
        return os.path.expanduser(self.working_dir)


@dataclass
class SetupEntry:
    """One idempotent unit of machine configuration.

    Phases, in order:
    - preconditions (working dir, environment variables)
    - pruning of commands restricted to other distributions
    - entry-wide guard check
    - commands (all run, failures accumulate)
    - configuration items (only when no command failed)
    """

    description: str = ""
    check: Optional[str] = None
    commands: List[CommandUnit] = field(default_factory=list)
    configs: Optional[List[ConfigUnit]] = None
    setup: Optional[SetupPrecondition] = None

    @classmethod
    def build(
        cls,
        *,
        check: Optional[str] = None,
        commands: Sequence[str] = (),
        configs: Optional[Sequence[str]] = None,
        description: str = "",
    ) -> "SetupEntry":
        return cls(
            description=description,
            check=check,
            commands=[CommandUnit.from_line(c) for c in commands],
            configs=[ConfigUnit.from_line(c) for c in configs] if configs is not None else None,
        )

    @property
    def label(self) -> str:
        return self.description or ", ".join(c.command for c in self.commands) or "<empty entry>"

    @property
    def working_dir(self) -> Optional[str]:
        return self.setup.resolved_working_dir if self.setup else None

    def prepare(self, ctx: RunContext) -> Status:
        if self.setup is None:
            return Status.SUCCESS

        wd = self.setup.resolved_working_dir
        if wd and not Path(wd).is_dir():
            if ctx.dry_run:
                logger.info("Would create working directory %s", wd)
            else:
                try:
                    Path(wd).mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.error("Cannot create working directory %s: %s", wd, e)
                    Status.FAILURE.print_message(f"Cannot create working directory {wd}: {e}")
                    return Status.FAILURE
                Status.SUCCESS.print_message(f"Created working directory {wd}")

        for name in self.setup.env:
            if name in ctx.environ:
                continue
            if ctx.dry_run:
                logger.info("Would prompt for environment variable %s", name)
                continue
            value = ctx.prompt.ask(f"Environment variable {name} is not set. Enter a value: ")
            if value and ctx.prompt.confirm(f"Set {name}={value}?"):
                ctx.environ[name] = value
                logger.info("Set environment variable %s", name)
            else:
                # Declining is not fatal; commands may still cope without it.
                Status.WARNING.print_message(f"{name} left unset")

        return Status.SUCCESS

    def applicable_commands(self, ctx: RunContext) -> List[CommandUnit]:
        return [c for c in self.commands if not c.should_skip(ctx)]

    def run_commands(self, ctx: RunContext, commands: Sequence[Runnable]) -> Status:
        Status.RUNNING.print_message(f"Running commands [{self.label}]")
        return aggregate([c.run(ctx, cwd=self.working_dir) for c in commands])

    def run_configs(self, ctx: RunContext) -> Status:
        Status.RUNNING.print_message(f"Running commands [config] [{self.label}]")
        configs: Sequence[Applyable] = self.configs or []
        return aggregate([c.apply(ctx, cwd=self.working_dir) for c in configs])

    def run(self, ctx: RunContext) -> Status:
        if self.prepare(ctx) is Status.FAILURE:
            return Status.FAILURE

        applicable = self.applicable_commands(ctx)
        pruned = len(self.commands) - len(applicable)
        if pruned:
            logger.info("%s: %d command(s) not applicable to this host", self.label, pruned)

        if self.check is not None and check_satisfied(ctx, self.check, cwd=self.working_dir):
            Status.PASSED.print_message(f"Commands: {[c.command for c in applicable]} [skipped]")
            status = Status.PASSED
        else:
            status = self.run_commands(ctx, applicable)

        if self.configs and status is not Status.FAILURE:
            status = self.run_configs(ctx)

        return status
