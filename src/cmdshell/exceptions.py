"""Custom exception hierarchy for cmdshell.

All exceptions that cross layer boundaries must inherit from
:class:`CmdShellError`.  Expected, frequent conditions (an unknown
command name, an unknown subcommand) are *not* exceptions — they are
modelled as results.  What remains here is either a command reporting
its own failure or a programming error in command authoring.

Hierarchy
---------
CmdShellError
├── CommandError
├── OperationCancelledError
├── DuplicateCommandError
│   └── SubcommandConflictError
├── ScriptReadError
├── ConfigurationError
└── EnvironmentError
"""

from __future__ import annotations


class CmdShellError(Exception):
    """Base exception for all cmdshell errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command execution -----------------------------------------------------

class CommandError(CmdShellError):
    """Raised by a command body to report a domain failure.

    The exception-handling middleware converts it into an error result
    carrying :attr:`exit_code`.
    """

    def __init__(
        self,
        command_name: str,
        message: str,
        *,
        exit_code: int = 1,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.command_name: str = command_name
        self.exit_code: int = exit_code if exit_code >= 1 else 1


class OperationCancelledError(CmdShellError):
    """Raised when work stops because its cancellation token fired.

    Containment turns it into an error result like any other failure, so
    a cancelled command still produces a result.
    """

    def __init__(self, message: str = "Operation cancelled") -> None:
        super().__init__(message)


# --- Registration ----------------------------------------------------------

class DuplicateCommandError(CmdShellError):
    """Raised when a command name is registered twice."""

    def __init__(self, name: str, *, hint: str | None = None) -> None:
        super().__init__(f"Command '{name}' is already registered", hint=hint)
        self.name: str = name


class SubcommandConflictError(DuplicateCommandError):
    """Raised when a group receives two subcommands with the same name."""

    def __init__(self, group: str, name: str) -> None:
        CmdShellError.__init__(
            self,
            f"Subcommand '{name}' is already registered in group '{group}'",
        )
        self.name = name
        self.group: str = group


# --- Scripts ---------------------------------------------------------------

class ScriptReadError(CmdShellError):
    """Raised when a script source cannot be read."""


# --- Configuration / environment -------------------------------------------

class ConfigurationError(CmdShellError):
    """Raised when the configuration file is missing or malformed."""


class EnvironmentError(CmdShellError):
    """Raised when a required runtime dependency is not available."""
