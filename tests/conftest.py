"""Shared pytest fixtures and fakes for the cmdshell test suite.

Guidelines
----------
* Core tests must be pure — output goes to :class:`RecordingOutput`,
  input comes from :class:`ScriptedReader`.
* Async tests run under pytest-asyncio in ``auto`` mode; no markers.
* Tests must not depend on the real terminal or on OS state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

import pytest

from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.metadata import BaseCommand, command
from cmdshell.core.registry import CommandRegistry, ServiceFactory
from cmdshell.exceptions import CommandError


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class RecordingOutput:
    """ConsoleOutput fake that records ``(kind, text)`` tuples."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def write(self, text: str, style: str | None = None) -> None:
        self.records.append(("write", text))

    def write_line(self, text: str = "", style: str | None = None) -> None:
        self.records.append(("line", text))

    def write_error(self, text: str) -> None:
        self.records.append(("error", text))

    def write_warning(self, text: str) -> None:
        self.records.append(("warning", text))

    def write_success(self, text: str) -> None:
        self.records.append(("success", text))

    def write_info(self, text: str) -> None:
        self.records.append(("info", text))

    def texts(self, kind: str) -> list[str]:
        return [text for record_kind, text in self.records if record_kind == kind]

    @property
    def rendered(self) -> str:
        """Everything written, joined the way a terminal would show it."""
        parts: list[str] = []
        for kind, text in self.records:
            parts.append(text if kind == "write" else text + "\n")
        return "".join(parts)


class ScriptedReader:
    """LineReader fake returning queued lines, then ``None`` (end of input)."""

    def __init__(self, lines: Iterable[str | None] = ()) -> None:
        self._lines: list[str | None] = list(lines)
        self.prompts: list[str] = []

    async def read_line(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self._lines:
            return None
        return self._lines.pop(0)


# ---------------------------------------------------------------------------
# Sample commands
# ---------------------------------------------------------------------------

@command("echo", "Echo arguments", aliases=("say",))
class EchoCommand(BaseCommand):
    def __init__(self, output: RecordingOutput) -> None:
        self._output = output

    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        self._output.write_line(" ".join(args))


@command("fail", "Always fails with exit code 3")
class FailCommand(BaseCommand):
    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        raise CommandError(self.name, "it failed", exit_code=3)


@command("boom", "Raises an unexpected error")
class BoomCommand(BaseCommand):
    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        raise RuntimeError("kaboom")


@command("wait", "Stops as soon as its token is cancelled")
class WaitCommand(BaseCommand):
    def __init__(self, output: RecordingOutput) -> None:
        self._output = output

    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        cancel.raise_if_cancelled()
        self._output.write_line("waited")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def output() -> RecordingOutput:
    return RecordingOutput()


@pytest.fixture
def registry(output: RecordingOutput) -> CommandRegistry:
    """Registry with ``echo``, ``fail``, ``boom`` and ``wait`` registered."""
    factory = ServiceFactory({"output": output})
    reg = CommandRegistry(factory)
    factory.add("registry", reg)
    for command_type in (EchoCommand, FailCommand, BoomCommand, WaitCommand):
        reg.register(command_type)
    return reg


@pytest.fixture(autouse=True)
def _restore_cmdshell_logger() -> Iterator[None]:
    """Undo handler/propagation changes made by ``configure_logging``."""
    logger = logging.getLogger("cmdshell")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
