"""CLI console helpers backed by Rich.

This module avoids module-level imports of Rich so bootstrap paths
(``--help``, ``--version``) remain functional even when Rich is not
installed; the first actual write raises
:class:`~cmdshell.exceptions.EnvironmentError` instead.
"""

from __future__ import annotations

import sys
from typing import Any

from cmdshell.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console(*, stderr: bool = False) -> Any:
    """Create a Rich console instance targeting stdout (or stderr)."""
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr, highlight=False)


class RichConsoleOutput:
    """:class:`~cmdshell.core.protocols.ConsoleOutput` rendered with Rich.

    Text is never interpreted as Rich markup, so command output containing
    ``[brackets]`` prints verbatim.
    """

    def __init__(self, console: Any | None = None) -> None:
        self._console: Any | None = console

    @property
    def console(self) -> Any:
        if self._console is None:
            self._console = get_rich_console()
        return self._console

    def write(self, text: str, style: str | None = None) -> None:
        self.console.print(text, style=style, end="", markup=False)

    def write_line(self, text: str = "", style: str | None = None) -> None:
        self.console.print(text, style=style, markup=False)

    def write_error(self, text: str) -> None:
        self.write_line(f"Error: {text}", style="bold red")

    def write_warning(self, text: str) -> None:
        self.write_line(f"Warning: {text}", style="yellow")

    def write_success(self, text: str) -> None:
        self.write_line(text, style="green")

    def write_info(self, text: str) -> None:
        self.write_line(text, style="cyan")


class _ConsoleProxy:
    """Minimal ``print``-compatible stderr proxy with Rich fallback.

    Used by the error boundary, which must be able to report even an
    ``EnvironmentError`` about Rich itself.
    """

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console(stderr=True)
        except EnvironmentError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()
