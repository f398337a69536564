"""Core / service layer — command resolution and execution.

Rules
-----
* No terminal rendering — output goes through the ``ConsoleOutput`` protocol.
* No filesystem access — script files are read through ``ScriptSource``.
* No imports from ``cli`` or ``infra``.
"""

from cmdshell.core.cancellation import ApplicationLifetime, CancellationToken
from cmdshell.core.discovery import discover
from cmdshell.core.executor import CommandExecutor
from cmdshell.core.group import CommandGroup
from cmdshell.core.metadata import (
    BaseCommand,
    command,
    command_group,
    derive_command_name,
    metadata_for,
    subcommand,
)
from cmdshell.core.middleware import (
    ExceptionHandlingMiddleware,
    LoggingMiddleware,
    TimingMiddleware,
    ValidationMiddleware,
)
from cmdshell.core.models import (
    CommandExecutionResult,
    CommandKind,
    CommandMetadata,
    CommandResult,
    DiscoveryResult,
    ScriptResult,
    ScriptValidationResult,
)
from cmdshell.core.pipeline import ExecutionContext, MiddlewarePipeline
from cmdshell.core.protocols import Command, ConsoleOutput, LineReader, Middleware
from cmdshell.core.registry import CommandRegistry, NotFound, Resolved, ServiceFactory
from cmdshell.core.script_engine import ScriptEngine
from cmdshell.core.tokenizer import tokenize

__all__: list[str] = [
    "ApplicationLifetime",
    "BaseCommand",
    "CancellationToken",
    "Command",
    "CommandExecutionResult",
    "CommandExecutor",
    "CommandGroup",
    "CommandKind",
    "CommandMetadata",
    "CommandRegistry",
    "CommandResult",
    "ConsoleOutput",
    "DiscoveryResult",
    "ExceptionHandlingMiddleware",
    "ExecutionContext",
    "LineReader",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewarePipeline",
    "NotFound",
    "Resolved",
    "ScriptEngine",
    "ScriptResult",
    "ScriptValidationResult",
    "ServiceFactory",
    "TimingMiddleware",
    "ValidationMiddleware",
    "command",
    "command_group",
    "derive_command_name",
    "discover",
    "metadata_for",
    "subcommand",
    "tokenize",
]
