from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .context import RunContext
from .errors import RegistryLockedError
from .loader import load_entries
from .setup_entry import SetupEntry
from .status import Status, aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryResult:
    entry_statuses: List[Tuple[str, Status]]

    @property
    def status(self) -> Status:
        return aggregate(s for _, s in self.entry_statuses)

    @property
    def failed(self) -> List[str]:
        return [label for label, s in self.entry_statuses if s is Status.FAILURE]


@dataclass
class SetupRegistry:
    """Ordered setup entries, executed once, strictly in registration order."""

    entries: List[SetupEntry] = field(default_factory=list)
    _executing: bool = field(default=False, init=False, repr=False)

    @classmethod
    def load(cls, path: str) -> "SetupRegistry":
        return cls(entries=load_entries(path))

    @classmethod
    def from_entries(cls, entries: Iterable[SetupEntry]) -> "SetupRegistry":
        return cls(entries=list(entries))

    def add(self, entry: SetupEntry) -> None:
        if self._executing:
            raise RegistryLockedError("Cannot add setup entries while the registry is executing")
        self.entries.append(entry)

    def execute(self, ctx: Optional[RunContext] = None) -> RegistryResult:
        ctx = ctx or RunContext()
        results: List[Tuple[str, Status]] = []

        self._executing = True
        try:
            for i, entry in enumerate(self.entries, start=1):
                logger.info("Running entry %d/%d: %s", i, len(self.entries), entry.label)
                status = entry.run(ctx)
                logger.info("Entry %s finished: %s", entry.label, status.value)
                results.append((entry.label, status))
        finally:
            self._executing = False

        result = RegistryResult(entry_statuses=results)
        if result.failed:
            logger.warning("Failed entries: %s", ", ".join(result.failed))
        return result
