"""Rich console utilities for styled terminal output.

This module provides a consistent interface for all CLI output using
the Rich library, so every command reports progress, warnings and
failures the same way.
"""

from collections.abc import Generator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

# Custom theme with consistent colors
_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "highlight": "cyan bold",
        "section": "blue bold",
        "muted": "dim",
    }
)

# Shared console instance
console = Console(theme=_THEME)


def info(message: str) -> None:
    """Print an informational message.

    Args:
        message: The message to display.

    """
    console.print(f"[info]ℹ[/info] {message}")


def success(message: str) -> None:
    """Print a success message.

    Args:
        message: The message to display.

    """
    console.print(f"[success]✓[/success] {message}")


def warning(message: str) -> None:
    """Print a warning message.

    Args:
        message: The message to display.

    """
    console.print(f"[warning]⚠[/warning] {message}")


def error(message: str) -> None:
    """Print an error message.

    Args:
        message: The message to display.

    """
    console.print(f"[error]✗[/error] {message}")


def action(message: str) -> None:
    """Print an action/progress message.

    Args:
        message: The message to display.

    """
    console.print(f"[info]→[/info] {message}")


def step(message: str) -> None:
    """Print a sub-step message.

    Args:
        message: The message to display.

    """
    console.print(f"[muted]•[/muted] {message}")


def plain(message: str = "") -> None:
    """Print a message without any prefix, markup still applies."""
    console.print(message)


def section(title: str) -> None:
    """Print a section header separating pipeline stages.

    Args:
        title: The section title.

    """
    console.print()
    console.print(f"[section]=== {title} ===[/section]")


def highlight(text: str) -> str:
    """Return text wrapped in highlight markup.

    Square brackets in the text are escaped, so user-supplied values
    print literally.

    Args:
        text: The text to highlight.

    Returns:
        Text wrapped in Rich markup for highlighting.

    """
    return f"[highlight]{escape(text)}[/highlight]"


def banner(title: str, subtitle: str | None = None) -> None:
    """Print the boxed banner shown at the start of a command."""
    text = f"[bold]{title}[/bold]"
    if subtitle:
        text = f"{text}\n{subtitle}"
    console.print(Panel(text, border_style="green", expand=True), justify="center")


@contextmanager
def spinner(message: str) -> Generator[None, None, None]:
    """Display a spinner while performing an operation.

    Args:
        message: The status message to display.

    Yields:
        None

    """
    with console.status(f"[info]{message}[/info]", spinner="dots"):
        yield


def summary_panel(title: str, items: dict[str, str]) -> None:
    """Print a summary panel with key-value pairs.

    Args:
        title: Title for the panel.
        items: Dictionary of label -> value pairs to display.

    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="cyan")

    for label, value in items.items():
        table.add_row(f"{label}:", value)

    console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="green"))


def newline() -> None:
    """Print an empty line."""
    console.print()
