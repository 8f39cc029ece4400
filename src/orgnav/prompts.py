"""Text prompts used by the rename and create-child actions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from rich.console import Console
from rich.prompt import Prompt


class TextPrompt(ABC):
    """Ask the user for a line of text."""

    @abstractmethod
    def ask(self, question: str, default: str = "") -> str | None:
        """Return the entered text, or None when the user gives up."""


class ConsoleTextPrompt(TextPrompt):
    """Prompt on the terminal. A blank answer counts as giving up."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def ask(self, question: str, default: str = "") -> str | None:
        try:
            answer = Prompt.ask(question, console=self.console, default=default or None)
        except EOFError:
            return None
        answer = (answer or "").strip()
        return answer or None


class ScriptedTextPrompt(TextPrompt):
    """Prompt answering from a fixed list; None once the list is exhausted."""

    def __init__(self, answers: Iterable[str | None] = ()) -> None:
        self.answers = list(answers)
        self.questions: list[str] = []

    def ask(self, question: str, default: str = "") -> str | None:
        self.questions.append(question)
        if not self.answers:
            return None
        return self.answers.pop(0)
