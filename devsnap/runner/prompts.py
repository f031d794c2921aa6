"""Interactive questions asked while replaying a snapshot."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

import click


class Prompter(ABC):
    """Asks the user yes/no questions and free-text values."""

    @abstractmethod
    def confirm(self, question: str) -> bool:
        """Return ``True`` if the user agrees."""

    @abstractmethod
    def ask(self, question: str) -> str:
        """Return the user's answer, ``""`` when left blank."""


class ConsolePrompter(Prompter):
    """Prompts on the terminal using click."""

    def confirm(self, question: str) -> bool:
        return click.confirm(question, default=True)

    def ask(self, question: str) -> str:
        return click.prompt(question, default="", show_default=False)


class StaticPrompter(Prompter):
    """
    Answers without user interaction.

    Every confirmation returns *answer*; values come from *values* keyed by
    the exact question text, falling back to ``""``.
    """

    def __init__(self, answer: bool = True, values: Optional[Mapping[str, str]] = None):
        self.answer = answer
        self.values: Dict[str, str] = dict(values or {})
        self.questions = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.answer

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.values.get(question, "")


__all__ = ["Prompter", "ConsolePrompter", "StaticPrompter"]
