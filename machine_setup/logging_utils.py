from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_LOG_PATH = "~/.local/state/machine-setup/machine-setup.log"
FALLBACK_LOG_NAME = "machine-setup.log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = False,
) -> str:
    """Attach the run log to the root logger and return the file in use.

    Status lines reach the terminal on their own, so the console handler only
    exists for --verbose. An unwritable log directory falls back to
    ./machine-setup.log.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if getattr(root, "_machine_setup_configured", False):
        return getattr(root, "_machine_setup_log_path", log_path)

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    chosen_path = os.path.expanduser(log_path)
    try:
        Path(chosen_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(chosen_path)
    except OSError:
        chosen_path = str(Path.cwd() / FALLBACK_LOG_NAME)
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        root.addHandler(console)

    root._machine_setup_configured = True  # type: ignore[attr-defined]
    root._machine_setup_log_path = chosen_path  # type: ignore[attr-defined]
    logging.getLogger(__name__).info("Logging to %s", chosen_path)
    return chosen_path
