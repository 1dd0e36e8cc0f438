"""Operator input: validators and interactive prompts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from .config import ISSUE_URL_PATTERN


@dataclass(frozen=True)
class ValidationResult:
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


Validator = Callable[[Optional[str]], ValidationResult]


def require_value(value: Optional[str]) -> ValidationResult:
    if value is None or not str(value).strip():
        return ValidationResult(error="A value is required!")
    return ValidationResult(value=str(value).strip())


def normalize_issue_id(value: Optional[str]) -> ValidationResult:
    """Accept a numeric issue id or a drupal.org issue URL."""
    if value is not None:
        value = str(value).strip()
        match = ISSUE_URL_PATTERN.match(value)
        if match:
            value = match.group(1)
    if not value or not value.isdigit():
        return ValidationResult(error="The Drupal issue number is required!")
    return ValidationResult(value=int(value))


class Prompter:
    """Interactive prompts rendered on a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def ask(
        self,
        question: str,
        default: Optional[str] = None,
        validator: Validator = require_value,
    ) -> Any:
        while True:
            answer = Prompt.ask(
                f"[bold cyan]{escape(question)}[/bold cyan]",
                console=self.console,
                default=default if default is not None else ...,
            )
            result = validator(answer)
            if result.ok:
                return result.value
            self.console.print(f"[red]{escape(result.error)}[/red]")

    def choice(self, question: str, choices: list[str], default: Optional[str] = None) -> str:
        if not choices:
            raise ValueError(f"No choices available for: {question}")
        self.console.print(f"[bold cyan]{escape(question)}[/bold cyan]")
        for idx, item in enumerate(choices):
            self.console.print(f"  [yellow]{idx}[/yellow] {escape(item)}")
        default_idx = str(choices.index(default)) if default in choices else None
        answer = Prompt.ask(
            "Choice",
            console=self.console,
            choices=[str(i) for i in range(len(choices))],
            default=default_idx if default_idx is not None else ...,
            show_choices=False,
        )
        return choices[int(answer)]

    def confirm(self, question: str, default: bool = False) -> bool:
        return Confirm.ask(question, console=self.console, default=default)
