from __future__ import annotations

from typing import Protocol


class PromptProvider(Protocol):
    def ask(self, message: str) -> str:
        ...

    def confirm(self, message: str) -> bool:
        ...


class ConsolePrompt:
    """Blocking prompts on standard input. EOF counts as no answer."""

    def ask(self, message: str) -> str:
        try:
            return input(message).strip()
        except EOFError:
            print()
            return ""

    def confirm(self, message: str) -> bool:
        try:
            answer = input(f"{message} [y/N] ").strip().lower()
        except EOFError:
            print()
            return False
        return answer in {"y", "yes"}
