"""Tests for the built-in ``help`` command (cli/help_command.py)."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from conftest import RecordingOutput
from cmdshell.cli.help_command import HelpCommand
from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.discovery import discover
from cmdshell.core.executor import CommandExecutor
from cmdshell.core.group import CommandGroup
from cmdshell.core.metadata import BaseCommand, command, command_group, subcommand
from cmdshell.core.middleware import ExceptionHandlingMiddleware
from cmdshell.core.registry import CommandRegistry, ServiceFactory
from cmdshell.exceptions import CommandError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@command("deploy", "Deploy the app", category="Ops", aliases=("ship",))
class DeployCommand(BaseCommand):
    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        return None


@command("about", "About this shell")
class AboutCommand(BaseCommand):
    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        return None


@command("secret", "Hidden command", hidden=True)
class SecretCommand(BaseCommand):
    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        return None


@command_group("file", "File operations")
class FileGroup(CommandGroup):
    pass


@subcommand("file", "list", "List files")
class FileListCommand(BaseCommand):
    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        return None


def _setup() -> tuple[CommandRegistry, RecordingOutput]:
    output = RecordingOutput()
    factory = ServiceFactory({"output": output})
    registry = CommandRegistry(factory)
    factory.add("registry", registry)
    registry.populate(
        discover([DeployCommand, AboutCommand, SecretCommand, FileGroup, FileListCommand]),
    )
    registry.register(HelpCommand)
    return registry, output


async def _run_help(registry: CommandRegistry, *args: str) -> None:
    resolution = registry.resolve("help")
    await resolution.command.execute(list(args), CancellationToken.none())  # type: ignore[union-attr]


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListing:
    async def test_visible_commands_sorted_and_grouped(self) -> None:
        registry, output = _setup()
        await _run_help(registry)

        names = [text.strip() for text in output.texts("write")]
        assert names == ["about", "file", "help", "deploy"]
        lines = output.texts("line")
        assert lines.index("General:") < lines.index("Ops:")

    async def test_hidden_commands_not_listed(self) -> None:
        registry, output = _setup()
        await _run_help(registry)
        assert "secret" not in output.rendered

    async def test_question_mark_alias(self) -> None:
        registry, _ = _setup()
        assert "?" in registry


# ---------------------------------------------------------------------------
# Single command
# ---------------------------------------------------------------------------

class TestDescribe:
    async def test_describes_command_with_aliases(self) -> None:
        registry, output = _setup()
        await _run_help(registry, "SHIP")

        lines = output.texts("line")
        assert lines[0] == "deploy - Deploy the app"
        assert "Aliases: ship" in lines
        assert "Category: Ops" in lines

    async def test_group_shows_subcommands(self) -> None:
        registry, output = _setup()
        await _run_help(registry, "file")
        assert "  list - List files" in output.rendered

    async def test_unknown_command_raises(self) -> None:
        registry, _ = _setup()
        with pytest.raises(CommandError, match="Command not found: nope"):
            await _run_help(registry, "nope")

    async def test_unknown_command_through_executor(self) -> None:
        registry, _ = _setup()
        executor = CommandExecutor(registry, [ExceptionHandlingMiddleware()])
        result = await executor.execute("help nope")
        assert result.success is False
        assert result.message == "Command not found: nope"
