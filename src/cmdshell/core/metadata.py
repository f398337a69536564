"""Declarative command metadata.

Metadata is attached explicitly at class-definition time by the
:func:`command`, :func:`command_group` and :func:`subcommand`
decorators.  Each decorator stores a frozen
:class:`~cmdshell.core.models.CommandMetadata` on the class and sets
the class's ``name``/``description`` attributes so that instances
report the name they are registered under.

Classes without a decorator can still be picked up by discovery through
the naming convention: ``GreetCommand`` → ``greet``.

Usage::

    @command("greet", "Say hello", aliases=("hi",))
    class GreetCommand(BaseCommand):
        async def execute(self, args, cancel):
            ...

    @command_group("file", "File operations")
    class FileGroup(CommandGroup):
        ...

    @subcommand("file", "list", "List files")
    class FileListCommand(BaseCommand):
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, ClassVar, TypeVar

from cmdshell.core.models import CommandKind, CommandMetadata

if TYPE_CHECKING:
    from cmdshell.core.cancellation import CancellationToken

METADATA_ATTR = "__command_metadata__"

_COMMAND_SUFFIX = "Command"
_GROUP_SUFFIX = "Group"

_T = TypeVar("_T", bound=type)


# ---------------------------------------------------------------------------
# Name derivation
# ---------------------------------------------------------------------------

def derive_command_name(identifier: str) -> str:
    """Strip a trailing ``Command``, then a trailing ``Group``, and lowercase.

    ``HelpCommand`` → ``help``, ``AdminGroup`` → ``admin``,
    ``FileGroupCommand`` → ``file``.
    """
    name = identifier
    if name.endswith(_COMMAND_SUFFIX):
        name = name[: -len(_COMMAND_SUFFIX)]
    if name.endswith(_GROUP_SUFFIX):
        name = name[: -len(_GROUP_SUFFIX)]
    return name.lower()


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def explicit_metadata(cls: type) -> CommandMetadata | None:
    """Return metadata attached directly to *cls* (not inherited), if any."""
    value = vars(cls).get(METADATA_ATTR)
    return value if isinstance(value, CommandMetadata) else None


def metadata_for(cls: type) -> CommandMetadata:
    """Return explicit metadata for *cls* or derive it from the class.

    Derived metadata uses the class's own ``name``/``description``
    attributes when present and falls back to
    :func:`derive_command_name`.
    """
    explicit = explicit_metadata(cls)
    if explicit is not None:
        return explicit

    declared_name = getattr(cls, "name", None)
    name = declared_name if isinstance(declared_name, str) and declared_name else None
    declared_description = getattr(cls, "description", None)
    return CommandMetadata(
        name=(name or derive_command_name(cls.__name__)).lower(),
        description=declared_description if isinstance(declared_description, str) else "",
    )


# ---------------------------------------------------------------------------
# Decorators
# ---------------------------------------------------------------------------

def _attach(cls: _T, metadata: CommandMetadata) -> _T:
    setattr(cls, METADATA_ATTR, metadata)
    cls.name = metadata.name  # type: ignore[attr-defined]
    cls.description = metadata.description  # type: ignore[attr-defined]
    return cls


def _build(
    cls: type,
    name: str | None,
    description: str | None,
    *,
    kind: CommandKind,
    aliases: Iterable[str] = (),
    hidden: bool = False,
    category: str | None = None,
    parent_group: str | None = None,
) -> CommandMetadata:
    base = metadata_for(cls)
    return CommandMetadata(
        name=(name or base.name).lower(),
        description=description if description is not None else base.description,
        aliases=frozenset(alias.lower() for alias in aliases),
        hidden=hidden,
        category=category,
        parent_group=parent_group.lower() if parent_group else None,
        kind=kind,
    )


def command(
    name: str | None = None,
    description: str | None = None,
    *,
    aliases: Sequence[str] = (),
    hidden: bool = False,
    category: str | None = None,
) -> Callable[[_T], _T]:
    """Mark a class as a standalone command."""

    def decorator(cls: _T) -> _T:
        return _attach(
            cls,
            _build(
                cls,
                name,
                description,
                kind=CommandKind.STANDALONE,
                aliases=aliases,
                hidden=hidden,
                category=category,
            ),
        )

    return decorator


def command_group(
    name: str | None = None,
    description: str | None = None,
    *,
    aliases: Sequence[str] = (),
    hidden: bool = False,
    category: str | None = None,
) -> Callable[[_T], _T]:
    """Mark a class as a command group."""

    def decorator(cls: _T) -> _T:
        return _attach(
            cls,
            _build(
                cls,
                name,
                description,
                kind=CommandKind.GROUP,
                aliases=aliases,
                hidden=hidden,
                category=category,
            ),
        )

    return decorator


def subcommand(
    parent_group: str,
    name: str | None = None,
    description: str | None = None,
) -> Callable[[_T], _T]:
    """Mark a class as a subcommand reachable only through *parent_group*."""

    def decorator(cls: _T) -> _T:
        return _attach(
            cls,
            _build(
                cls,
                name,
                description,
                kind=CommandKind.SUBCOMMAND,
                parent_group=parent_group,
            ),
        )

    return decorator


# ---------------------------------------------------------------------------
# Convenience base class
# ---------------------------------------------------------------------------

class BaseCommand:
    """Optional base class for commands.

    Subclasses that declare no ``name`` get one derived from the class
    name, so ``class GreetCommand(BaseCommand)`` reports ``"greet"``.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if not vars(cls).get("name"):
            cls.name = derive_command_name(cls.__name__)

    async def execute(self, args: Sequence[str], cancel: CancellationToken) -> None:
        raise NotImplementedError
