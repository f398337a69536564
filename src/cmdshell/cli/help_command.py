"""Built-in ``help`` command.

``help`` lists every visible command grouped by category;
``help <name>`` describes one command, including a group's subcommands.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import groupby

from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.metadata import BaseCommand, command
from cmdshell.core.models import CommandMetadata
from cmdshell.core.protocols import CommandGroupProtocol, ConsoleOutput
from cmdshell.core.registry import CommandRegistry, NotFound
from cmdshell.exceptions import CommandError

DEFAULT_CATEGORY = "General"


def _category(metadata: CommandMetadata) -> str:
    return metadata.category or DEFAULT_CATEGORY


def _sort_key(metadata: CommandMetadata) -> tuple[bool, str, str]:
    category = _category(metadata)
    return (category != DEFAULT_CATEGORY, category.lower(), metadata.name)


@command("help", "Show available commands or details for one command", aliases=("?",))
class HelpCommand(BaseCommand):
    def __init__(self, registry: CommandRegistry, output: ConsoleOutput) -> None:
        self._registry: CommandRegistry = registry
        self._output: ConsoleOutput = output

    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        if args:
            self._describe(args[0])
        else:
            self._list()

    def _list(self) -> None:
        visible = sorted(
            (metadata for metadata in self._registry.entries() if not metadata.hidden),
            key=_sort_key,
        )
        width = max((len(metadata.name) for metadata in visible), default=0) + 2

        self._output.write_line("Available commands:", style="yellow")
        for category, members in groupby(visible, key=_category):
            self._output.write_line()
            self._output.write_line(f"{category}:", style="bold")
            for metadata in members:
                self._output.write(f"  {metadata.name.ljust(width)}", style="green")
                self._output.write_line(metadata.description)

        self._output.write_line()
        self._output.write_line(
            "Type 'help <command>' for details. Type 'exit' to quit.",
            style="dim",
        )

    def _describe(self, name: str) -> None:
        resolution = self._registry.resolve(name)
        if isinstance(resolution, NotFound):
            raise CommandError(self.name, f"Command not found: {name}")

        metadata = resolution.metadata
        target = resolution.command
        if isinstance(target, CommandGroupProtocol):
            # Group help text starts with its own "name - description" header.
            self._output.write(target.help_text())
        else:
            self._output.write_line(f"{metadata.name} - {metadata.description}", style="cyan")

        if metadata.aliases:
            self._output.write_line(f"Aliases: {', '.join(sorted(metadata.aliases))}")
        if metadata.category:
            self._output.write_line(f"Category: {metadata.category}")
