from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .context import RunContext
from .errors import RegistryLoadError
from .lib.prompt import ConsolePrompt, PromptProvider
from .lib.shell import ShellInvoker
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .registry import RegistryResult, SetupRegistry
from .report import build_report, save_report
from .status import Status

logger = logging.getLogger(__name__)


DEFAULT_REGISTRY_PATH = "setup.yaml"


def run(
    *,
    registry_path: str = DEFAULT_REGISTRY_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    report_path: Optional[str] = None,
    dry_run: bool = False,
    verbose: bool = False,
    prompt: Optional[PromptProvider] = None,
) -> RegistryResult:
    """Load the registry and run every entry in order."""

    configure_logging(log_path=log_path, level=logging.DEBUG if verbose else logging.INFO, also_console=verbose)

    # Load errors are fatal: nothing runs from a half-parsed registry.
    registry = SetupRegistry.load(registry_path)

    ctx = RunContext(invoker=ShellInvoker(dry_run=dry_run), prompt=prompt or ConsolePrompt())

    try:
        result = registry.execute(ctx)
    except Exception:
        logger.exception("Setup run failed")
        raise

    result.status.print_message(f"{len(result.entry_statuses)} setup entries processed")
    if report_path:
        save_report(report_path, build_report(result, registry_path=registry_path, dry_run=dry_run))
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="machine-setup")
    p.add_argument("--registry", default=DEFAULT_REGISTRY_PATH, help="Path to the setup registry (yaml|json)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the log file")
    p.add_argument("--report", default=None, help="Write a run summary here (json|yaml)")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    p.add_argument("-v", "--verbose", action="store_true", help="Also log to the console")

    args = p.parse_args(argv)

    try:
        result = run(
            registry_path=args.registry,
            log_path=args.log,
            report_path=args.report,
            dry_run=bool(args.dry_run),
            verbose=bool(args.verbose),
        )
    except RegistryLoadError as e:
        logger.error("Cannot load registry: %s", e)
        print(f"machine-setup: {e}", file=sys.stderr)
        return 2

    return 1 if result.status is Status.FAILURE else 0


if __name__ == "__main__":
    raise SystemExit(main())
