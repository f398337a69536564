"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
Commands may report any code ``>= 1`` of their own through
:class:`~cmdshell.exceptions.CommandError`; those pass through unchanged.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — session or command completed without error."""

GENERAL_ERROR: int = 1
"""A known CmdShellError was caught, or a command/script failed."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""
