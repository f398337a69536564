"""Infrastructure layer — filesystem, module import and logging sinks.

Every raw OS or parsing error must be caught here and re-raised as a
:class:`~cmdshell.exceptions.CmdShellError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering) except the
  logging handler installed by :mod:`cmdshell.infra.logging_setup`.
"""

from cmdshell.infra.command_loader import load_command_types
from cmdshell.infra.config import load_options
from cmdshell.infra.logging_setup import configure_logging
from cmdshell.infra.script_source import FileScriptSource

__all__: list[str] = [
    "FileScriptSource",
    "configure_logging",
    "load_command_types",
    "load_options",
]
