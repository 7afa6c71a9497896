from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .command import CommandUnit
from .config_item import ConfigUnit
from .errors import RegistryLoadError
from .lib.distribution import Distribution
from .lib.shell import parse_shell
from .setup_entry import SetupEntry, SetupPrecondition

logger = logging.getLogger(__name__)

_ENTRY_KEYS = {"description", "check", "commands", "configs", "setup"}
_COMMAND_KEYS = {"command", "shell", "distribution", "check"}
_CONFIG_KEYS = {"command", "check"}
_SETUP_KEYS = {"env", "working_dir"}


def detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"yaml", "yml"}:
        return "yaml"
    # Default to JSON for unknown extensions.
    return "json"


def read_document(path: str) -> Any:
    p = Path(path)
    if not p.exists():
        raise RegistryLoadError(f"Registry file not found: {path}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise RegistryLoadError(f"Cannot read registry {path}: {e}") from e

    if detect_format(p) == "yaml":
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("PyYAML is required to read YAML registries") from e
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise RegistryLoadError(f"Invalid YAML in {path}: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise RegistryLoadError(f"Invalid JSON in {path}: {e}") from e


def _check_keys(obj: Dict[str, Any], allowed: set, where: str) -> None:
    unknown = sorted(set(obj) - allowed)
    if unknown:
        raise RegistryLoadError(f"{where}: unknown key(s) {', '.join(unknown)}")


def _opt_str(value: Any, where: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise RegistryLoadError(f"{where} must be a string")
    return value


def _as_list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise RegistryLoadError(f"{where} must be a list")
    return value


def parse_command(raw: Any, where: str, *, spawn: bool = False) -> CommandUnit:
    if isinstance(raw, str):
        raw = {"command": raw}
    if not isinstance(raw, dict):
        raise RegistryLoadError(f"{where} must be a string or a mapping")
    _check_keys(raw, _COMMAND_KEYS, where)

    line = _opt_str(raw.get("command"), f"{where}.command")
    if not line or not line.strip():
        raise RegistryLoadError(f"{where}.command must be a non-empty string")

    try:
        shell = parse_shell(raw.get("shell"))
    except ValueError as e:
        raise RegistryLoadError(f"{where}.shell: {e}") from e

    distribution = None
    if raw.get("distribution") is not None:
        try:
            distribution = Distribution.parse(raw["distribution"])
        except ValueError as e:
            raise RegistryLoadError(f"{where}.distribution: {e}") from e

    return CommandUnit(
        command=line,
        shell=shell,
        distribution=distribution,
        check=_opt_str(raw.get("check"), f"{where}.check"),
        spawn=spawn,
    )


def parse_config(raw: Any, where: str) -> ConfigUnit:
    if isinstance(raw, str):
        return ConfigUnit(command=parse_command(raw, where, spawn=True))
    if not isinstance(raw, dict):
        raise RegistryLoadError(f"{where} must be a string or a mapping")
    _check_keys(raw, _CONFIG_KEYS, where)
    return ConfigUnit(
        command=parse_command(raw.get("command"), f"{where}.command", spawn=True),
        check=_opt_str(raw.get("check"), f"{where}.check"),
    )


def parse_setup(raw: Any, where: str) -> Optional[SetupPrecondition]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise RegistryLoadError(f"{where} must be a mapping")
    _check_keys(raw, _SETUP_KEYS, where)

    env = _as_list(raw.get("env") or [], f"{where}.env")
    if not all(isinstance(v, str) and v.strip() for v in env):
        raise RegistryLoadError(f"{where}.env must contain variable names")

    return SetupPrecondition(
        env=[v.strip() for v in env],
        working_dir=_opt_str(raw.get("working_dir"), f"{where}.working_dir"),
    )


def parse_entry(raw: Any, where: str) -> SetupEntry:
    if not isinstance(raw, dict):
        raise RegistryLoadError(f"{where} must be a mapping")
    _check_keys(raw, _ENTRY_KEYS, where)

    commands = _as_list(raw.get("commands") or [], f"{where}.commands")
    configs_raw = raw.get("configs")
    configs = None
    if configs_raw is not None:
        configs = [
            parse_config(c, f"{where}.configs[{i}]")
            for i, c in enumerate(_as_list(configs_raw, f"{where}.configs"))
        ]

    return SetupEntry(
        description=_opt_str(raw.get("description"), f"{where}.description") or "",
        check=_opt_str(raw.get("check"), f"{where}.check"),
        commands=[parse_command(c, f"{where}.commands[{i}]") for i, c in enumerate(commands)],
        configs=configs,
        setup=parse_setup(raw.get("setup"), f"{where}.setup"),
    )


def load_entries(path: str) -> List[SetupEntry]:
    """Load every entry of a registry document, or fail as a whole."""

    data = read_document(path)
    if isinstance(data, dict):
        _check_keys(data, {"entries"}, path)
        data = data.get("entries")
    entries = _as_list(data, f"{path}: entries")

    parsed = [parse_entry(e, f"entries[{i}]") for i, e in enumerate(entries)]
    logger.info("Loaded %d setup entries from %s", len(parsed), path)
    return parsed
