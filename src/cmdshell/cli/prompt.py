"""Line readers for the interactive host.

Two implementations of :class:`~cmdshell.core.protocols.LineReader`:

* :class:`QuestionaryLineReader` — used on a real terminal; gives line
  editing through questionary / prompt_toolkit.
* :class:`ConsoleLineReader` — used when stdin is piped; reads through
  the Rich console on a daemon thread.

Both return ``None`` at end of input (Ctrl+D, closed pipe) and when the
user aborts the prompt with Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import Any

from cmdshell.cli.console import get_rich_console
from cmdshell.core.protocols import LineReader
from cmdshell.exceptions import EnvironmentError

logger = logging.getLogger(__name__)


def _import_questionary() -> Any:
    """Import questionary lazily for interactive input."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


class QuestionaryLineReader:
    """Prompt with ``questionary.text`` on an interactive terminal."""

    async def read_line(self, prompt: str) -> str | None:
        questionary = _import_questionary()
        question = questionary.text(prompt, qmark="")
        try:
            answer: str | None = await question.ask_async()  # None on Ctrl+C
        except EOFError:
            return None
        return answer


class ConsoleLineReader:
    """Read lines through a Rich console; suitable for piped input.

    The blocking read runs on a daemon thread rather than the loop's
    default executor.  ``asyncio.run`` joins executor threads on shutdown,
    so a read abandoned after cancellation would otherwise keep the
    process alive until the next line arrived.
    """

    def __init__(self, console: Any | None = None) -> None:
        self._console: Any | None = console

    async def read_line(self, prompt: str) -> str | None:
        if self._console is None:
            self._console = get_rich_console()
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str | None] = loop.create_future()
        threading.Thread(
            target=self._read_into,
            args=(loop, future, prompt),
            name="cmdshell-stdin",
            daemon=True,
        ).start()
        return await future

    def _read_into(
        self,
        loop: asyncio.AbstractEventLoop,
        future: asyncio.Future[str | None],
        prompt: str,
    ) -> None:
        try:
            line: str | None = self._console.input(prompt, markup=False)
        except EOFError:
            line = None
        except Exception as exc:
            self._settle(loop, future, exc)
            return
        self._settle(loop, future, line)

    @staticmethod
    def _settle(
        loop: asyncio.AbstractEventLoop,
        future: asyncio.Future[str | None],
        outcome: str | None | Exception,
    ) -> None:
        def deliver() -> None:
            if future.done():  # reader abandoned after cancellation
                return
            if isinstance(outcome, Exception):
                future.set_exception(outcome)
            else:
                future.set_result(outcome)

        try:
            loop.call_soon_threadsafe(deliver)
        except RuntimeError:
            logger.debug("Event loop closed before a pending line was delivered")


def create_line_reader(console: Any | None = None) -> LineReader:
    """Pick the reader that fits the current stdin."""
    if sys.stdin is not None and sys.stdin.isatty():
        return QuestionaryLineReader()
    return ConsoleLineReader(console)
