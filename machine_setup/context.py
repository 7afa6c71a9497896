from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, MutableMapping

from .lib.distribution import Distribution, identify_distribution
from .lib.prompt import ConsolePrompt, PromptProvider
from .lib.shell import ShellInvoker


@dataclass(frozen=True)
class RunContext:
    """Collaborators shared by every unit during one registry run."""

    invoker: ShellInvoker = field(default_factory=ShellInvoker)
    identify: Callable[[], Distribution] = identify_distribution
    prompt: PromptProvider = field(default_factory=ConsolePrompt)
    environ: MutableMapping[str, str] = field(default_factory=lambda: os.environ)

    @property
    def dry_run(self) -> bool:
        return self.invoker.dry_run
