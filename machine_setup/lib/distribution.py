from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ARCH_MARKER = "etc/arch-release"
LSB_RELEASE = "etc/lsb-release"
UBUNTU_MARKER = "DISTRIB_ID=Ubuntu"


class Distribution(Enum):
    UBUNTU = "Ubuntu"
    ARCH_LINUX = "ArchLinux"
    UNKNOWN = "Unknown"

    @property
    def display_name(self) -> str:
        return {"ArchLinux": "Arch Linux"}.get(self.value, self.value)

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def parse(cls, value: object) -> "Distribution":
        key = str(value).strip().lower().replace(" ", "").replace("_", "")
        aliases = {
            "ubuntu": cls.UBUNTU,
            "archlinux": cls.ARCH_LINUX,
            "arch": cls.ARCH_LINUX,
        }
        if key not in aliases:
            raise ValueError(f"Unknown distribution: {value!r}")
        return aliases[key]


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def identify_distribution(root: str = "/") -> Distribution:
    """Identify the host distribution from marker files under `root`.

    Computed fresh on every call.
    """

    base = Path(root)
    if (base / ARCH_MARKER).exists():
        return Distribution.ARCH_LINUX

    lsb = base / LSB_RELEASE
    if lsb.exists():
        content = _read_text(lsb)
        if content is not None and UBUNTU_MARKER in content:
            return Distribution.UBUNTU

    return Distribution.UNKNOWN


def should_skip(
    restriction: Optional[Distribution],
    identify: Callable[[], Distribution] = identify_distribution,
) -> bool:
    """True when a unit restricted to `restriction` does not apply to this host.

    Unknown hosts never match a named restriction.
    """
    if restriction is None:
        return False
    host = identify()
    if host is not restriction:
        logger.info("Host is %s, unit is restricted to %s", host, restriction)
        return True
    return False
