from __future__ import annotations

import sys
from enum import Enum
from typing import Iterable, Tuple

RESET = "\x1b[0m"

_COLORS = {
    "Running": "\x1b[34m",
    "Success": "\x1b[32m",
    "Passed": "\x1b[32m",
    "Warning": "\x1b[33m",
    "Skipped": "\x1b[33m",
    "Failure": "\x1b[31m",
    "Normal": RESET,
}

_ICONS = {
    "Running": "⏳Running",
    "Success": "✅Succeeded",
    "Passed": "✔️Passed",
    "Warning": "⚠️Warning",
    "Skipped": "⏭️Skipped",
    "Failure": "❌Failed",
    "Normal": "",
}

# Running is deliberately absent: it is never a resting value.
_RANK = {
    "Normal": 0,
    "Skipped": 1,
    "Passed": 2,
    "Success": 3,
    "Warning": 4,
    "Failure": 5,
}


class Status(Enum):
    """Outcome of a command, configuration item, entry or registry run."""

    RUNNING = "Running"
    SUCCESS = "Success"
    WARNING = "Warning"
    FAILURE = "Failure"
    SKIPPED = "Skipped"
    PASSED = "Passed"
    NORMAL = "Normal"

    @property
    def rank(self) -> int:
        try:
            return _RANK[self.value]
        except KeyError:
            raise ValueError("Running is a transient status and cannot be ranked") from None

    @property
    def color(self) -> str:
        return _COLORS[self.value]

    @property
    def is_resting(self) -> bool:
        return self is not Status.RUNNING

    def print_message(self, message: str) -> None:
        icon, stream = presentation(self)
        out = sys.stderr if stream == "stderr" else sys.stdout
        if self is Status.NORMAL:
            print(message, file=out)
        else:
            print(f"{self.color}==> {icon}: {message}{RESET}", file=out)


def presentation(status: Status) -> Tuple[str, str]:
    """Return the (icon, stream) pair a status is shown with."""
    stream = "stderr" if status is Status.FAILURE else "stdout"
    return _ICONS[status.value], stream


def aggregate(statuses: Iterable[Status]) -> Status:
    """Reduce child statuses: any failure fails the parent, otherwise success.

    Every child is consumed, so callers may pass a generator that runs the
    children lazily without short-circuiting.
    """

    worst = Status.NORMAL
    for s in statuses:
        if s.rank > worst.rank:
            worst = s
    return Status.FAILURE if worst is Status.FAILURE else Status.SUCCESS
