"""Command groups — commands that route to nested subcommands.

A group owns a case-insensitive map of subcommands populated once,
either by :meth:`CommandGroup.register_subcommand` calls in the
subclass constructor or by the registry attaching every subcommand type
discovered with the group's name as parent.

Routing rules for ``execute(args)``:

* no args, or ``args[0] == "help"`` → render help, succeed;
* ``args[0]`` names a subcommand → run it with ``args[1:]``;
* otherwise → report "Unknown subcommand", render help, succeed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.metadata import BaseCommand
from cmdshell.core.protocols import Command, ConsoleOutput
from cmdshell.exceptions import SubcommandConflictError

_HELP_TOKEN = "help"


class CommandGroup(BaseCommand):
    """Base implementation for command groups.

    Usage::

        @command_group("file", "File management operations")
        class FileGroup(CommandGroup):
            def __init__(self, output: ConsoleOutput) -> None:
                super().__init__(output)
                self.register_subcommand("list", FileListCommand(output))
    """

    def __init__(self, output: ConsoleOutput) -> None:
        self._output: ConsoleOutput = output
        self._subcommands: dict[str, Command] = {}

    # ------------------------------------------------------------------
    # Subcommand registry
    # ------------------------------------------------------------------

    @property
    def subcommands(self) -> Mapping[str, Command]:
        return MappingProxyType(self._subcommands)

    def register_subcommand(self, name: str, command: Command) -> None:
        """Add *command* under *name*.

        Raises
        ------
        SubcommandConflictError
            If *name* (case-insensitively) is already taken in this group.
        """
        key = name.lower()
        if key in self._subcommands:
            raise SubcommandConflictError(self.name, key)
        self._subcommands[key] = command

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        if not args or args[0].lower() == _HELP_TOKEN:
            self.show_help()
            return

        subcommand_name = args[0]
        target = self._subcommands.get(subcommand_name.lower())
        if target is not None:
            await target.execute(list(args[1:]), cancel)
            return

        self._output.write_error(f"Unknown subcommand: {subcommand_name}")
        self.show_help()

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def _sorted_subcommands(self) -> list[tuple[str, Command]]:
        return sorted(self._subcommands.items())

    def show_help(self) -> None:
        """Render coloured help through the output sink."""
        self._output.write_line(f"{self.name} - {self.description}", style="cyan")
        self._output.write_line("Available subcommands:", style="yellow")
        self._output.write_line()

        for key, subcommand in self._sorted_subcommands():
            self._output.write(f"  {key}", style="green")
            self._output.write_line(f" - {subcommand.description}")

        self._output.write_line()
        self._output.write_line(
            f"Use '{self.name} <subcommand>' to run a subcommand.",
            style="dim",
        )

    def help_text(self) -> str:
        """Return the help listing as plain text."""
        lines = [f"{self.name} - {self.description}", "", "Available subcommands:", ""]
        lines.extend(
            f"  {key} - {subcommand.description}"
            for key, subcommand in self._sorted_subcommands()
        )
        return "\n".join(lines) + "\n"
