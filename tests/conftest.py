from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from machine_setup.context import RunContext
from machine_setup.lib.distribution import Distribution
from machine_setup.lib.shell import CmdResult, ShellInvoker, shell_program


class SpyInvoker(ShellInvoker):
    """Records every call and answers from canned responses.

    `responses` maps a command line to (returncode, stdout, stderr). Unknown
    lines succeed with empty output.
    """

    def __init__(self, responses: Optional[Dict[str, Tuple[int, str, str]]] = None) -> None:
        super().__init__(dry_run=False)
        self.responses = dict(responses or {})
        self.calls: List[Tuple[str, str, str, Optional[str]]] = []

    def lines(self, mode: Optional[str] = None) -> List[str]:
        return [line for m, _, line, _ in self.calls if mode is None or m == mode]

    def run_captured(self, shell, line, *, cwd=None) -> CmdResult:
        self.calls.append(("captured", shell_program(shell), line, cwd))
        code, out, err = self.responses.get(line, (0, "", ""))
        return CmdResult(argv=[shell_program(shell), "-c", line], returncode=code, stdout=out, stderr=err)

    def run_attached(self, shell, line, *, cwd=None) -> int:
        self.calls.append(("attached", shell_program(shell), line, cwd))
        return self.responses.get(line, (0, "", ""))[0]


class CannedPrompt:
    def __init__(self, answers: Optional[Dict[str, str]] = None, confirm: bool = True) -> None:
        self.answers = dict(answers or {})
        self.accept = confirm
        self.asked: List[str] = []
        self.confirmed: List[str] = []

    def ask(self, message: str) -> str:
        self.asked.append(message)
        for name, value in self.answers.items():
            if name in message:
                return value
        return ""

    def confirm(self, message: str) -> bool:
        self.confirmed.append(message)
        return self.accept


def host(dist: Distribution) -> Callable[[], Distribution]:
    return lambda: dist


@pytest.fixture
def spy() -> SpyInvoker:
    return SpyInvoker()


@pytest.fixture
def prompt() -> CannedPrompt:
    return CannedPrompt()


@pytest.fixture
def make_ctx(spy: SpyInvoker, prompt: CannedPrompt):
    def _make(
        *,
        invoker: Optional[ShellInvoker] = None,
        dist: Distribution = Distribution.UBUNTU,
        environ: Optional[Dict[str, str]] = None,
        prompt_provider=None,
    ) -> RunContext:
        return RunContext(
            invoker=invoker or spy,
            identify=host(dist),
            prompt=prompt_provider or prompt,
            environ={} if environ is None else environ,
        )

    return _make


@pytest.fixture
def ctx(make_ctx) -> RunContext:
    return make_ctx()


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_machine_setup_configured", "_machine_setup_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
