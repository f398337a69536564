"""Tests for declarative command metadata (core/metadata.py)."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.group import CommandGroup
from cmdshell.core.metadata import (
    METADATA_ATTR,
    BaseCommand,
    command,
    command_group,
    derive_command_name,
    explicit_metadata,
    metadata_for,
    subcommand,
)
from cmdshell.core.models import CommandKind


# ---------------------------------------------------------------------------
# Name derivation
# ---------------------------------------------------------------------------

class TestDeriveCommandName:
    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [
            ("HelpCommand", "help"),
            ("AdminGroup", "admin"),
            ("FileGroupCommand", "file"),
            ("Status", "status"),
            ("Command", ""),
        ],
    )
    def test_suffixes_are_stripped(self, identifier: str, expected: str) -> None:
        assert derive_command_name(identifier) == expected


# ---------------------------------------------------------------------------
# Decorators
# ---------------------------------------------------------------------------

class TestDecorators:
    def test_command_attaches_metadata_and_names_class(self) -> None:
        @command("Greet", "Say hello", aliases=("HI", "hey"), category="Basics")
        class GreetCommand(BaseCommand):
            async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
                return None

        metadata = explicit_metadata(GreetCommand)
        assert metadata is not None
        assert metadata.name == "greet"
        assert metadata.aliases == frozenset({"hi", "hey"})
        assert metadata.category == "Basics"
        assert metadata.kind is CommandKind.STANDALONE
        assert GreetCommand.name == "greet"
        assert GreetCommand.description == "Say hello"

    def test_command_without_name_derives_it(self) -> None:
        @command(description="Show status")
        class StatusCommand(BaseCommand):
            async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
                return None

        assert metadata_for(StatusCommand).name == "status"

    def test_command_group_kind(self) -> None:
        @command_group("file", "File operations")
        class FileGroup(CommandGroup):
            pass

        metadata = metadata_for(FileGroup)
        assert metadata.kind is CommandKind.GROUP
        assert metadata.name == "file"

    def test_subcommand_records_parent(self) -> None:
        @subcommand("File", "list", "List files")
        class FileListCommand(BaseCommand):
            async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
                return None

        metadata = metadata_for(FileListCommand)
        assert metadata.kind is CommandKind.SUBCOMMAND
        assert metadata.parent_group == "file"
        assert FileListCommand.name == "list"

    def test_hidden_flag(self) -> None:
        @command("secret", hidden=True)
        class SecretCommand(BaseCommand):
            async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
                return None

        assert metadata_for(SecretCommand).hidden is True


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class TestMetadataFor:
    def test_undecorated_base_command_uses_derived_name(self) -> None:
        class PingCommand(BaseCommand):
            description = "Reply with pong"

            async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
                return None

        metadata = metadata_for(PingCommand)
        assert metadata.name == "ping"
        assert metadata.description == "Reply with pong"
        assert metadata.kind is CommandKind.STANDALONE

    def test_plain_class_uses_declared_name(self) -> None:
        class Anything:
            name = "Custom"
            description = "A duck-typed command"

            async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
                return None

        assert metadata_for(Anything).name == "custom"

    def test_metadata_is_not_inherited(self) -> None:
        @command("parent")
        class ParentCommand(BaseCommand):
            async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
                return None

        class ChildCommand(ParentCommand):
            pass

        assert explicit_metadata(ChildCommand) is None
        assert METADATA_ATTR not in vars(ChildCommand)


class TestBaseCommand:
    async def test_execute_is_abstract_by_convention(self) -> None:
        class BareCommand(BaseCommand):
            pass

        with pytest.raises(NotImplementedError):
            await BareCommand().execute([], CancellationToken.none())

    def test_subclass_gets_derived_name(self) -> None:
        class ReportCommand(BaseCommand):
            pass

        assert ReportCommand.name == "report"
