"""Command registry — case-insensitive name/alias → command lookup.

The registry is built once at startup (``register``/``populate``) and is
read-only afterwards.  It is passed explicitly to the executor and the
help command; there is no module-level registry.

Guarantees
----------
* Primary names are unique; a second registration under the same name
  raises :class:`~cmdshell.exceptions.DuplicateCommandError`.
* Alias collisions are logged and skipped, never fatal.
* :meth:`CommandRegistry.resolve` never raises for a broken command
  type: instantiation failures are logged and reported as
  :class:`NotFound`.  The one exception is a subcommand name conflict
  inside a group, which is an authoring error and propagates.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from cmdshell.core.metadata import metadata_for
from cmdshell.core.models import CommandKind, CommandMetadata, DiscoveryResult
from cmdshell.core.protocols import Command, CommandFactory, CommandGroupProtocol
from cmdshell.exceptions import DuplicateCommandError, SubcommandConflictError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resolution results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Resolved:
    """A name that maps to a live command instance."""

    command: Command
    metadata: CommandMetadata


@dataclass(frozen=True, slots=True)
class NotFound:
    """A name with no registry entry (or whose command failed to build)."""

    name: str


Resolution = Union[Resolved, NotFound]


# ---------------------------------------------------------------------------
# Instantiation
# ---------------------------------------------------------------------------

class ServiceFactory:
    """Build command instances, injecting constructor arguments by name.

    Usage::

        factory = ServiceFactory({"output": console_output})
        registry = CommandRegistry(factory)
        factory.add("registry", registry)

    A constructor parameter whose name is a known service receives that
    service; every other parameter must have a default.
    """

    def __init__(self, services: Mapping[str, object] | None = None) -> None:
        self._services: dict[str, object] = dict(services or {})

    def add(self, name: str, service: object) -> None:
        self._services[name] = service

    def __call__(self, command_type: type) -> Command:
        try:
            signature = inspect.signature(command_type)
        except (TypeError, ValueError):
            return command_type()  # type: ignore[no-any-return]
        kwargs = {
            name: self._services[name]
            for name, parameter in signature.parameters.items()
            if name in self._services
            and parameter.kind
            in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
        }
        instance: Command = command_type(**kwargs)
        return instance


@dataclass(frozen=True, slots=True)
class _Entry:
    metadata: CommandMetadata
    command_type: type | None = None
    instance: Command | None = None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class CommandRegistry:
    """Owns the name → command map.

    Parameters
    ----------
    factory:
        Callable turning a registered type into an instance.  Defaults to
        a :class:`ServiceFactory` with no services (``cls()``).
    """

    def __init__(self, factory: CommandFactory | None = None) -> None:
        self._factory: CommandFactory = factory or ServiceFactory()
        self._entries: dict[str, _Entry] = {}
        self._primary: dict[str, _Entry] = {}
        self._subcommand_types: dict[str, list[type]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        command_type: type,
        metadata: CommandMetadata | None = None,
    ) -> CommandMetadata:
        """Register *command_type*; instances are created per resolution.

        Raises
        ------
        DuplicateCommandError
            If the primary name is already present.
        """
        resolved = metadata or metadata_for(command_type)
        self._add(_Entry(metadata=resolved, command_type=command_type))
        logger.debug("Registered command %s -> %s", resolved.name, command_type.__name__)
        return resolved

    def register_instance(
        self,
        command: Command,
        metadata: CommandMetadata | None = None,
    ) -> CommandMetadata:
        """Register a live singleton *command*."""
        resolved = metadata or metadata_for(type(command))
        if metadata is None and command.name:
            resolved = CommandMetadata(
                name=command.name.lower(),
                description=command.description or resolved.description,
                aliases=resolved.aliases,
                hidden=resolved.hidden,
                category=resolved.category,
                kind=resolved.kind,
            )
        self._add(_Entry(metadata=resolved, instance=command))
        logger.debug("Registered command instance %s", resolved.name)
        return resolved

    def _add(self, entry: _Entry) -> None:
        name = entry.metadata.name.lower()
        if name in self._entries:
            raise DuplicateCommandError(
                name,
                hint="Give one of the commands an explicit, distinct name.",
            )
        self._entries[name] = entry
        self._primary[name] = entry

        for alias in sorted(entry.metadata.aliases):
            key = alias.lower()
            if key == name:
                continue
            if key in self._entries:
                logger.warning(
                    "Alias '%s' for command '%s' collides with an existing name; skipped",
                    key,
                    name,
                )
                continue
            self._entries[key] = entry

    def populate(
        self,
        discovery: DiscoveryResult,
        *,
        excluded: Iterable[str] = (),
    ) -> None:
        """Register everything a discovery pass produced.

        Standalone commands and groups become top-level entries; subcommand
        types are remembered per parent group and attached when that group
        is instantiated.

        Raises
        ------
        DuplicateCommandError
            On a top-level name conflict.
        SubcommandConflictError
            When two subcommands of the same group share a name.
        """
        skip = {name.lower() for name in excluded}

        for command_type in discovery.standalone_commands + discovery.groups:
            metadata = metadata_for(command_type)
            if metadata.name in skip:
                logger.info("Command '%s' excluded by configuration", metadata.name)
                continue
            self.register(command_type, metadata)

        names_by_group: dict[str, set[str]] = {}
        for command_type, parent in discovery.subcommands:
            group = parent.lower()
            name = metadata_for(command_type).name
            taken = names_by_group.setdefault(group, set())
            if name in taken:
                raise SubcommandConflictError(group, name)
            taken.add(name)
            self._subcommand_types.setdefault(group, []).append(command_type)
            if group not in self._primary:
                logger.warning(
                    "Subcommand '%s' refers to unknown group '%s'",
                    name,
                    group,
                )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, name: str) -> Resolution:
        """Look *name* up case-insensitively and return a live command."""
        entry = self._entries.get(name.lower())
        if entry is None:
            return NotFound(name)

        command = self._instantiate(entry)
        if command is None:
            return NotFound(name)
        return Resolved(command=command, metadata=entry.metadata)

    def metadata(self, name: str) -> CommandMetadata | None:
        entry = self._entries.get(name.lower())
        return entry.metadata if entry is not None else None

    def entries(self) -> tuple[CommandMetadata, ...]:
        """Metadata of every primary registration, in registration order."""
        return tuple(entry.metadata for entry in self._primary.values())

    def list_all(self) -> tuple[Command, ...]:
        """Instantiate every distinct command once; broken ones are omitted."""
        commands: list[Command] = []
        for entry in self._primary.values():
            command = self._instantiate(entry)
            if command is not None:
                commands.append(command)
        return tuple(commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __len__(self) -> int:
        return len(self._primary)

    # ------------------------------------------------------------------
    # Instantiation
    # ------------------------------------------------------------------

    def _instantiate(self, entry: _Entry) -> Command | None:
        if entry.instance is not None:
            return entry.instance
        if entry.command_type is None:
            return None

        try:
            command = self._factory(entry.command_type)
            if entry.metadata.kind is CommandKind.GROUP or isinstance(command, CommandGroupProtocol):
                self._attach_subcommands(entry.metadata.name, command)
        except SubcommandConflictError:
            logger.error("Subcommand conflict while building group '%s'", entry.metadata.name)
            raise
        except Exception:
            logger.error(
                "Failed to create command instance %s",
                entry.command_type.__name__,
                exc_info=True,
            )
            return None
        return command

    def _attach_subcommands(self, group_name: str, group: Command) -> None:
        subcommand_types = self._subcommand_types.get(group_name, [])
        if not subcommand_types:
            return
        if not isinstance(group, CommandGroupProtocol):
            logger.warning(
                "Command '%s' has discovered subcommands but cannot route them",
                group_name,
            )
            return
        for command_type in subcommand_types:
            metadata = metadata_for(command_type)
            try:
                subcommand = self._factory(command_type)
            except Exception:
                logger.error(
                    "Failed to create subcommand %s for group '%s'",
                    command_type.__name__,
                    group_name,
                    exc_info=True,
                )
                continue
            group.register_subcommand(metadata.name, subcommand)
