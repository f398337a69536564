"""Domain models for cmdshell.

Results and metadata are **frozen** dataclasses — immutable value
objects with no behaviour beyond data access and a few named
constructors.  The only mutable record in the system is
:class:`~cmdshell.core.pipeline.ExecutionContext`, which lives next to
the pipeline that owns it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Command result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of exactly one command invocation."""

    success: bool
    """Whether the command completed without error."""

    message: str | None = None
    """Optional text rendered to the user."""

    exit_code: int = 0
    """``0`` on success, ``>= 1`` on failure."""

    @classmethod
    def success_result(cls, message: str | None = None) -> CommandResult:
        """Build a successful result with exit code ``0``."""
        return cls(success=True, message=message, exit_code=0)

    @classmethod
    def error_result(cls, message: str, exit_code: int = 1) -> CommandResult:
        """Build a failed result; *exit_code* is clamped to ``>= 1``."""
        return cls(success=False, message=message, exit_code=max(exit_code, 1))


# ---------------------------------------------------------------------------
# Command metadata
# ---------------------------------------------------------------------------

class CommandKind(enum.Enum):
    """Classification assigned to a command type at discovery time."""

    STANDALONE = "standalone"
    GROUP = "group"
    SUBCOMMAND = "subcommand"


@dataclass(frozen=True, slots=True)
class CommandMetadata:
    """Immutable facts attached to a command type.

    Created once when the class is decorated (or derived from the class
    name for convention-discovered commands) and owned by the registry
    afterwards.
    """

    name: str
    """Primary, case-insensitive invocation name."""

    description: str = ""
    """One-line summary shown by help listings."""

    aliases: frozenset[str] = frozenset()
    """Alternative names resolving to the same command."""

    hidden: bool = False
    """Exclude from help listings (still resolvable)."""

    category: str | None = None
    """Optional heading used to group commands in help."""

    parent_group: str | None = None
    """Owning group name; present only for subcommands."""

    kind: CommandKind = CommandKind.STANDALONE


# ---------------------------------------------------------------------------
# Discovery output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DiscoveryResult:
    """Candidate types sorted into standalone, group and subcommand buckets."""

    standalone_commands: tuple[type, ...] = ()
    groups: tuple[type, ...] = ()
    subcommands: tuple[tuple[type, str], ...] = ()
    """``(subcommand type, parent group name)`` pairs."""

    @property
    def all_command_types(self) -> tuple[type, ...]:
        return (
            self.standalone_commands
            + self.groups
            + tuple(cls for cls, _ in self.subcommands)
        )

    def __len__(self) -> int:
        return len(self.standalone_commands) + len(self.groups) + len(self.subcommands)


# ---------------------------------------------------------------------------
# Script results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CommandExecutionResult:
    """Outcome of one script line."""

    command: str
    success: bool
    output: str | None = None
    error: str | None = None
    duration: float = 0.0
    """Wall-clock seconds spent on this line."""


@dataclass(frozen=True, slots=True)
class ScriptResult:
    """Aggregate outcome of a script run.

    ``success`` is ``True`` iff ``failed_commands == 0``.
    """

    success: bool
    executed_commands: int
    failed_commands: int
    total_duration: float
    """Wall-clock seconds for the whole run."""

    command_results: tuple[CommandExecutionResult, ...] = ()


@dataclass(frozen=True, slots=True)
class ScriptValidationResult:
    """Outcome of a syntax-only script pass."""

    is_valid: bool
    errors: tuple[str, ...] = field(default=())
    warnings: tuple[str, ...] = field(default=())
