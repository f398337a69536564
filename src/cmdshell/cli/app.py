"""CLI application entry point and command routing for cmdshell.

This module is the **sole error boundary** for the entire application.
It catches :class:`~cmdshell.exceptions.CmdShellError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — this module wires configuration,
  command modules, the registry, the executor and the front ends
  (interactive host, script engine) together.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Sequence

from cmdshell.cli import exit_codes
from cmdshell.cli.console import RichConsoleOutput, console
from cmdshell.cli.help_command import HelpCommand
from cmdshell.cli.host import InteractiveHost
from cmdshell.cli.prompt import create_line_reader
from cmdshell.core.cancellation import ApplicationLifetime
from cmdshell.core.discovery import discover
from cmdshell.core.executor import CommandExecutor
from cmdshell.core.middleware import (
    ExceptionHandlingMiddleware,
    LoggingMiddleware,
    TimingMiddleware,
    ValidationMiddleware,
)
from cmdshell.core.options import AppOptions
from cmdshell.core.protocols import ConsoleOutput, Middleware
from cmdshell.core.registry import CommandRegistry, ServiceFactory
from cmdshell.core.script_engine import ScriptEngine
from cmdshell.exceptions import CmdShellError
from cmdshell.infra.command_loader import load_command_types
from cmdshell.infra.config import load_options
from cmdshell.infra.logging_setup import configure_logging
from cmdshell.infra.script_source import FileScriptSource, resolve_script_path
from cmdshell.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``cmdshell`` / ``cmdshell shell``  — interactive session
    * ``cmdshell run SCRIPT``            — execute a script, fail-fast
    * ``cmdshell validate SCRIPT``       — syntax-only script check
    * ``cmdshell exec LINE...``          — execute a single command line
    """
    parser = argparse.ArgumentParser(
        prog="cmdshell",
        description="Interactive command shell with pluggable commands.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="JSON configuration file (default: $CMDSHELL_CONFIG or ./cmdshell.json).",
    )
    parser.add_argument(
        "-m",
        "--module",
        dest="modules",
        action="append",
        default=[],
        metavar="MODULE",
        help="Import MODULE and register the commands it defines (repeatable).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )
    parser.add_argument(
        "--no-banner",
        action="store_true",
        help="Do not show the welcome banner.",
    )
    parser.add_argument(
        "--exit-on-error",
        action="store_true",
        help="End the interactive session when a command fails.",
    )

    subparsers = parser.add_subparsers(dest="action", metavar="COMMAND")
    subparsers.add_parser("shell", help="Start an interactive session (default).")

    run_parser = subparsers.add_parser("run", help="Execute a script file.")
    run_parser.add_argument("script", help="Path to the script file.")

    validate_parser = subparsers.add_parser("validate", help="Validate a script file.")
    validate_parser.add_argument("script", help="Path to the script file.")

    exec_parser = subparsers.add_parser("exec", help="Execute a single command line.")
    exec_parser.add_argument("line", nargs=argparse.REMAINDER, help="Command and arguments.")
    return parser


def _apply_overrides(options: AppOptions, args: argparse.Namespace) -> AppOptions:
    """Layer command-line flags over file-based options."""
    host = options.host
    if args.no_banner:
        host = host.model_copy(update={"show_welcome_message": False})
    if args.exit_on_error:
        host = host.model_copy(update={"exit_on_nonzero_exit_code": True})

    registration = options.registration
    if args.modules:
        registration = registration.model_copy(
            update={"command_modules": registration.command_modules + tuple(args.modules)},
        )

    logging_options = options.logging
    if args.verbose:
        level = "DEBUG" if args.verbose > 1 else "INFO"
        logging_options = logging_options.model_copy(update={"level": level})

    return options.model_copy(
        update={"host": host, "registration": registration, "logging": logging_options},
    )


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def build_registry(options: AppOptions, output: ConsoleOutput) -> CommandRegistry:
    """Import command modules, classify their classes and register them.

    The built-in ``help`` command is added unless a loaded module already
    registered a command with that name.
    """
    factory = ServiceFactory({"output": output})
    registry = CommandRegistry(factory)
    factory.add("registry", registry)

    registration = options.registration
    command_types = load_command_types(registration.command_modules)
    discovery = discover(command_types, use_naming_convention=registration.use_naming_convention)
    registry.populate(discovery, excluded=registration.excluded_commands)

    if "help" not in registry:
        registry.register(HelpCommand)
    logger.info("Registered %d commands", len(registry))
    return registry


def build_middlewares(options: AppOptions, output: ConsoleOutput) -> list[Middleware]:
    """Standard behaviours, outermost first; containment always wraps the rest."""
    middlewares: list[Middleware] = [ExceptionHandlingMiddleware()]
    if options.logging.log_command_execution:
        middlewares.append(LoggingMiddleware())
    if options.logging.log_performance:
        middlewares.append(TimingMiddleware(output))
    middlewares.append(ValidationMiddleware())
    return middlewares


def _install_signal_handlers(lifetime: ApplicationLifetime) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, lifetime.stop_application)
        except (NotImplementedError, RuntimeError):
            # Event loops without signal support (Windows) keep the
            # default KeyboardInterrupt behaviour.
            logger.debug("Signal handlers not supported by this event loop")
            return


def _join_line(tokens: Sequence[str]) -> str:
    """Rebuild a command line, quoting tokens that contain whitespace."""
    return " ".join(
        f'"{token}"' if not token or any(ch.isspace() for ch in token) else token
        for token in tokens
    )


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

async def _handle_shell(host: InteractiveHost) -> int:
    return await host.run()


async def _handle_run(
    engine: ScriptEngine,
    options: AppOptions,
    lifetime: ApplicationLifetime,
    script: str,
) -> int:
    if not options.scripting.enable_scripting:
        raise CmdShellError(
            "Script execution is disabled.",
            hint="Set scripting.enable_scripting to true in the configuration file.",
        )

    path = resolve_script_path(script, options.scripting.default_script_extension)
    result = await engine.run_file(path, lifetime.stopping)
    if lifetime.stopping.is_cancelled:
        return exit_codes.KEYBOARD_INTERRUPT
    return exit_codes.SUCCESS if result.success else exit_codes.GENERAL_ERROR


def _handle_validate(
    engine: ScriptEngine,
    options: AppOptions,
    output: ConsoleOutput,
    script: str,
) -> int:
    path = resolve_script_path(script, options.scripting.default_script_extension)
    result = engine.validate_file(path)

    for error in result.errors:
        output.write_error(error)
    for warning in result.warnings:
        output.write_warning(warning)

    if not result.is_valid:
        return exit_codes.GENERAL_ERROR
    output.write_success(f"Script is valid: {path}")
    return exit_codes.SUCCESS


async def _dispatch(
    args: argparse.Namespace,
    options: AppOptions,
    output: ConsoleOutput,
) -> int:
    lifetime = ApplicationLifetime()
    _install_signal_handlers(lifetime)

    registry = build_registry(options, output)
    executor = CommandExecutor(
        registry,
        build_middlewares(options, output),
        options.executor,
    )
    engine = ScriptEngine(executor, output, FileScriptSource())

    action = args.action or "shell"
    if action == "run":
        return await _handle_run(engine, options, lifetime, args.script)
    if action == "validate":
        return _handle_validate(engine, options, output, args.script)

    reader = create_line_reader()
    host = InteractiveHost(executor, output, reader, options.host, lifetime)
    if action == "exec":
        if not args.line:
            raise CmdShellError("No command given.", hint="Usage: cmdshell exec COMMAND [ARGS...]")
        return await host.execute_command(_join_line(args.line))
    return await _handle_shell(host)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the cmdshell CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    options = _apply_overrides(load_options(args.config), args)
    configure_logging(options.logging.level)

    output = RichConsoleOutput()
    return asyncio.run(_dispatch(args, options, output))


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except CmdShellError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
