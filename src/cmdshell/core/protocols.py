"""Protocols (interfaces) consumed by the core layer.

These define the contracts that command authors, middleware authors
and the CLI layer must satisfy.  Core code depends ONLY on these
protocols — never on concrete implementations — so the output sink and
the line reader can be replaced by fakes in tests.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cmdshell.core.cancellation import CancellationToken
    from cmdshell.core.pipeline import ExecutionContext


@runtime_checkable
class Command(Protocol):
    """The capability every executable command exposes.

    Any object with ``name``, ``description`` and an async ``execute``
    satisfies this protocol structurally.
    """

    name: str
    description: str

    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        """Run the command with *args* (the tokens after the command name).

        Implementations should poll *cancel* wherever they may suspend.
        Domain failures are reported by raising
        :class:`~cmdshell.exceptions.CommandError`.
        """
        ...  # pragma: no cover


@runtime_checkable
class CommandGroupProtocol(Command, Protocol):
    """A command that routes its first argument to a nested subcommand."""

    @property
    def subcommands(self) -> Mapping[str, Command]:
        ...  # pragma: no cover

    def register_subcommand(self, name: str, command: Command) -> None:
        ...  # pragma: no cover

    def help_text(self) -> str:
        ...  # pragma: no cover


class ConsoleOutput(Protocol):
    """Line-output sink.

    ``style`` is a Rich style string (``"cyan"``, ``"bold red"``);
    implementations without colour support may ignore it.
    """

    def write(self, text: str, style: str | None = None) -> None:
        ...  # pragma: no cover

    def write_line(self, text: str = "", style: str | None = None) -> None:
        ...  # pragma: no cover

    def write_error(self, text: str) -> None:
        ...  # pragma: no cover

    def write_warning(self, text: str) -> None:
        ...  # pragma: no cover

    def write_success(self, text: str) -> None:
        ...  # pragma: no cover

    def write_info(self, text: str) -> None:
        ...  # pragma: no cover


NextStep = Callable[[], Awaitable[None]]
"""Continuation handed to a middleware; awaiting it runs the rest of the chain."""


class Middleware(Protocol):
    """A composable behaviour wrapping command execution.

    A middleware decides whether, when and how many times to await
    *next_step*.  Not awaiting it short-circuits the chain.
    """

    async def invoke(self, context: ExecutionContext, next_step: NextStep) -> None:
        ...  # pragma: no cover


class LineReader(Protocol):
    """Source of interactive input lines."""

    async def read_line(self, prompt: str) -> str | None:
        """Return the next line, or ``None`` at end of input."""
        ...  # pragma: no cover


class ScriptSource(Protocol):
    """Reads the lines of a script file.

    Implementations must map I/O failures to
    :class:`~cmdshell.exceptions.ScriptReadError`.
    """

    def read_lines(self, path: str) -> list[str]:
        ...  # pragma: no cover


CommandFactory = Callable[[type], Command]
"""Builds a live command instance from its registered type."""
