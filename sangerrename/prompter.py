"""Terminal input/output used by the interactive workflow."""

from abc import ABC, abstractmethod

import click
from rich.console import Console, RenderableType
from rich.markup import escape

from sangerrename.display import printable
from sangerrename.exceptions import WorkflowCancelled


class Prompter(ABC):
    """Base class for the prompts the workflow needs.

    Implementations raise WorkflowCancelled when the user aborts.
    """

    @abstractmethod
    def show(self, renderable: RenderableType) -> None:
        """Display a message, table or other rich renderable."""
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        """Display an inline error the user can correct."""
        pass

    @abstractmethod
    def text(self, prompt: str, default: str = "") -> str:
        """Ask for free text. Pressing enter returns ``default``."""
        pass

    @abstractmethod
    def choice(self, prompt: str, choices: list[str], default: str | None = None) -> str:
        """Ask the user to pick one of ``choices``."""
        pass

    @abstractmethod
    def confirm(self, prompt: str, default: bool = True) -> bool:
        """Ask a yes/no question."""
        pass


class ConsolePrompter(Prompter):
    """Prompter backed by click prompts and a rich console.

    Prompt text and defaults may carry filename parts that are not printable
    as is; they are shown through ``printable`` while the raw default is returned.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show(self, renderable: RenderableType) -> None:
        self.console.print(renderable)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {escape(printable(message))}", highlight=False)

    def text(self, prompt: str, default: str = "") -> str:
        try:
            shown = f"{printable(prompt)} [{printable(default)}]" if default else printable(prompt)
            return click.prompt(shown, default=default, show_default=False, type=str)
        except click.Abort as e:
            raise WorkflowCancelled("Aborted by user") from e

    def choice(self, prompt: str, choices: list[str], default: str | None = None) -> str:
        try:
            return click.prompt(
                printable(prompt),
                type=click.Choice(choices, case_sensitive=False),
                default=default,
                show_choices=True,
            )
        except click.Abort as e:
            raise WorkflowCancelled("Aborted by user") from e

    def confirm(self, prompt: str, default: bool = True) -> bool:
        try:
            return click.confirm(printable(prompt), default=default)
        except click.Abort as e:
            raise WorkflowCancelled("Aborted by user") from e
