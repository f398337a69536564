"""Classify candidate types into standalone commands, groups and subcommands.

Classification precedence, first match wins:

1. Explicit group metadata → ``groups``.
2. Explicit subcommand metadata → ``subcommands`` (with parent name).
3. Explicit standalone metadata → ``standalone_commands``.
4. Naming convention (when enabled): the class name ends with
   ``Command`` and the class is not a group implementation, either a
   :class:`CommandGroup` subclass or a structural group type →
   ``standalone_commands``.

Anything else is skipped.  A type that blows up during classification is
logged and skipped; it never aborts the scan.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

from cmdshell.core.group import CommandGroup
from cmdshell.core.metadata import derive_command_name, explicit_metadata
from cmdshell.core.models import CommandKind, DiscoveryResult

logger = logging.getLogger(__name__)

_CONVENTION_SUFFIX = "Command"
_GROUP_MEMBERS = ("subcommands", "register_subcommand", "help_text")


def discover(
    types: Iterable[type],
    *,
    use_naming_convention: bool = True,
) -> DiscoveryResult:
    """Sort *types* into the three discovery buckets.

    Duplicates in *types* are classified once; input order is preserved
    within each bucket.
    """
    standalone: list[type] = []
    groups: list[type] = []
    subcommands: list[tuple[type, str]] = []
    seen: set[type] = set()

    for candidate in types:
        if candidate in seen:
            continue
        seen.add(candidate)
        try:
            _classify(candidate, standalone, groups, subcommands, use_naming_convention)
        except Exception:
            logger.warning(
                "Skipping command type %r: classification failed",
                candidate,
                exc_info=True,
            )

    logger.info(
        "Discovered %d standalone commands, %d groups, %d subcommands",
        len(standalone),
        len(groups),
        len(subcommands),
    )
    return DiscoveryResult(
        standalone_commands=tuple(standalone),
        groups=tuple(groups),
        subcommands=tuple(subcommands),
    )


def _is_group_type(candidate: type) -> bool:
    """True for :class:`CommandGroup` subclasses and structural group types.

    ``issubclass`` cannot be used against
    :class:`~cmdshell.core.protocols.CommandGroupProtocol` because the
    protocol declares a property, so its members are checked by name.
    """
    if issubclass(candidate, CommandGroup):
        return True
    return all(hasattr(candidate, member) for member in _GROUP_MEMBERS)


def _classify(
    candidate: type,
    standalone: list[type],
    groups: list[type],
    subcommands: list[tuple[type, str]],
    use_naming_convention: bool,
) -> None:
    if not inspect.isclass(candidate) or inspect.isabstract(candidate):
        logger.debug("Skipping %r: not a concrete class", candidate)
        return
    if not callable(getattr(candidate, "execute", None)):
        logger.debug("Skipping %s: no execute method", candidate.__name__)
        return

    metadata = explicit_metadata(candidate)
    if metadata is not None:
        if metadata.kind is CommandKind.GROUP:
            groups.append(candidate)
            logger.debug("Discovered command group: %s -> %s", metadata.name, candidate.__name__)
            return
        if metadata.kind is CommandKind.SUBCOMMAND and metadata.parent_group:
            subcommands.append((candidate, metadata.parent_group))
            logger.debug(
                "Discovered subcommand: %s.%s -> %s",
                metadata.parent_group,
                metadata.name,
                candidate.__name__,
            )
            return
        if metadata.kind is CommandKind.STANDALONE:
            standalone.append(candidate)
            logger.debug("Discovered standalone command: %s -> %s", metadata.name, candidate.__name__)
            return

    if (
        use_naming_convention
        and candidate.__name__.endswith(_CONVENTION_SUFFIX)
        and not _is_group_type(candidate)
    ):
        standalone.append(candidate)
        logger.debug(
            "Auto-discovered command: %s -> %s",
            derive_command_name(candidate.__name__),
            candidate.__name__,
        )
