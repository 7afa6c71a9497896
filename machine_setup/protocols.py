from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .context import RunContext
from .status import Status


@runtime_checkable
class Runnable(Protocol):
    def run(self, ctx: RunContext, *, cwd: Optional[str] = None) -> Status:
        ...


@runtime_checkable
class Hooked(Protocol):
    """Two-phase unit: before_run decides whether the payload runs at all.

    before_run returns Running to mean "proceed", or a resting status that
    short-circuits the payload.
    """

    def before_run(self, ctx: RunContext, *, cwd: Optional[str] = None) -> Status:
        ...

    def after_run(self, ctx: RunContext, status: Status) -> Status:
        ...


@runtime_checkable
class Applyable(Protocol):
    def apply(self, ctx: RunContext, *, cwd: Optional[str] = None) -> Status:
        ...

    def revert(self, ctx: RunContext) -> Status:
        ...
