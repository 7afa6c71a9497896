from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .loader import detect_format
from .registry import RegistryResult

logger = logging.getLogger(__name__)


def build_report(result: RegistryResult, *, registry_path: str, dry_run: bool) -> Dict[str, Any]:
    return {
        "registry": registry_path,
        "dry_run": dry_run,
        "status": result.status.value,
        "entries": [{"description": label, "status": s.value} for label, s in result.entry_statuses],
        "failed": result.failed,
    }


def save_report(path: str, report: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    if detect_format(p) == "yaml":
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("YAML report requested but PyYAML is not available") from e
        p.write_text(yaml.safe_dump(report, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")

    logger.info("Report written to %s", str(p))
