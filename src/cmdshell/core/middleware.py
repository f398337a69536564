"""Standard cross-cutting behaviours for the execution pipeline.

Recommended registration order (outermost first)::

    [ExceptionHandlingMiddleware(), LoggingMiddleware(),
     TimingMiddleware(output), ValidationMiddleware()]

:class:`ExceptionHandlingMiddleware` is the containment point: nothing
raised by a command body or an inner behaviour escapes it.
"""

from __future__ import annotations

import asyncio
import logging
import time

from cmdshell.core.models import CommandResult
from cmdshell.core.pipeline import ExecutionContext
from cmdshell.core.protocols import ConsoleOutput, NextStep
from cmdshell.exceptions import CommandError, OperationCancelledError

logger = logging.getLogger(__name__)

EXECUTION_TIME_KEY = "execution_time"
"""Property-bag key holding the elapsed seconds recorded by :class:`TimingMiddleware`."""

CANCELLED_MESSAGE = "Operation cancelled"


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class LoggingMiddleware:
    """Log the start and end of every command with its duration."""

    async def invoke(self, context: ExecutionContext, next_step: NextStep) -> None:
        started = time.perf_counter()
        logger.info(
            "Executing command: %s with args: %s",
            context.command_name,
            context.arguments,
        )
        try:
            await next_step()
        except Exception:
            logger.error(
                "Command %s failed after %.2fms",
                context.command_name,
                _elapsed_ms(started),
            )
            raise
        logger.info(
            "Command %s completed in %.2fms",
            context.command_name,
            _elapsed_ms(started),
        )


class TimingMiddleware:
    """Record execution time in the property bag and optionally report it."""

    def __init__(self, output: ConsoleOutput | None = None) -> None:
        self._output: ConsoleOutput | None = output

    async def invoke(self, context: ExecutionContext, next_step: NextStep) -> None:
        started = time.perf_counter()
        try:
            await next_step()
        finally:
            elapsed = time.perf_counter() - started
            context.properties[EXECUTION_TIME_KEY] = elapsed
        if self._output is not None:
            self._output.write_info(f"Command completed in {elapsed * 1000:.2f}ms")


class ValidationMiddleware:
    """Reject an empty command name before anything else runs."""

    async def invoke(self, context: ExecutionContext, next_step: NextStep) -> None:
        if not context.command_name.strip():
            context.result = CommandResult.error_result("Command name cannot be empty")
            return
        await next_step()


class ExceptionHandlingMiddleware:
    """Convert every exception raised further in into an error result.

    * :class:`~cmdshell.exceptions.CommandError` → its message and exit code.
    * :class:`~cmdshell.exceptions.OperationCancelledError` → ``"Operation cancelled"``.
    * ``asyncio.CancelledError`` while the context's token is cancelled →
      ``"Operation cancelled"``; any other task cancellation is re-raised.
    * Anything else → ``"Execution failed: ..."`` with exit code ``1``.
    """

    async def invoke(self, context: ExecutionContext, next_step: NextStep) -> None:
        started = time.perf_counter()
        try:
            await next_step()
        except CommandError as exc:
            logger.warning(
                "Command %s reported an error (exit code %d): %s",
                context.command_name,
                exc.exit_code,
                exc,
            )
            context.result = CommandResult.error_result(str(exc), exc.exit_code)
        except OperationCancelledError as exc:
            logger.warning("Command %s was cancelled", context.command_name)
            context.result = CommandResult.error_result(str(exc))
        except asyncio.CancelledError:
            if not context.cancel.is_cancelled:
                raise
            logger.warning("Command %s was cancelled", context.command_name)
            context.result = CommandResult.error_result(CANCELLED_MESSAGE)
        except Exception as exc:
            logger.exception(
                "Unexpected error in command %s with args %s after %.2fms",
                context.command_name,
                context.arguments,
                _elapsed_ms(started),
            )
            context.result = CommandResult.error_result(f"Execution failed: {exc}")
