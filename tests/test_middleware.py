"""Tests for the standard behaviours (core/middleware.py)."""

from __future__ import annotations

import asyncio
import logging

import pytest

from conftest import RecordingOutput
from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.middleware import (
    EXECUTION_TIME_KEY,
    ExceptionHandlingMiddleware,
    LoggingMiddleware,
    TimingMiddleware,
    ValidationMiddleware,
)
from cmdshell.core.models import CommandResult
from cmdshell.core.pipeline import ExecutionContext
from cmdshell.exceptions import CommandError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _context(name: str = "demo", cancel: CancellationToken | None = None) -> ExecutionContext:
    return ExecutionContext(
        command_line=name,
        command_name=name,
        arguments=["a"],
        cancel=cancel or CancellationToken.none(),
    )


def _cancelled_token() -> CancellationToken:
    token = CancellationToken()
    token.cancel()
    return token


def _raising(exc: BaseException):  # type: ignore[no-untyped-def]
    async def next_step() -> None:
        raise exc

    return next_step


async def _noop() -> None:
    return None


# ---------------------------------------------------------------------------
# Exception containment
# ---------------------------------------------------------------------------

class TestExceptionHandling:
    async def test_command_error_keeps_exit_code(self) -> None:
        context = _context()
        await ExceptionHandlingMiddleware().invoke(
            context, _raising(CommandError("demo", "bad thing", exit_code=4)),
        )
        assert context.result == CommandResult(success=False, message="bad thing", exit_code=4)

    async def test_unexpected_error_becomes_generic_failure(self) -> None:
        context = _context()
        await ExceptionHandlingMiddleware().invoke(context, _raising(RuntimeError("oops")))

        assert context.result is not None
        assert context.result.success is False
        assert context.result.exit_code >= 1
        assert context.result.message == "Execution failed: oops"

    async def test_unexpected_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="cmdshell"):
            await ExceptionHandlingMiddleware().invoke(_context(), _raising(KeyError("k")))
        assert "Unexpected error in command demo" in caplog.text

    async def test_cooperative_cancellation_becomes_error_result(self) -> None:
        token = _cancelled_token()
        context = _context(cancel=token)

        async def next_step() -> None:
            token.raise_if_cancelled()

        await ExceptionHandlingMiddleware().invoke(context, next_step)
        assert context.result == CommandResult.error_result("Operation cancelled")

    async def test_task_cancellation_under_cancelled_token_is_contained(self) -> None:
        context = _context(cancel=_cancelled_token())
        await ExceptionHandlingMiddleware().invoke(context, _raising(asyncio.CancelledError()))
        assert context.result == CommandResult.error_result("Operation cancelled")

    async def test_foreign_task_cancellation_propagates(self) -> None:
        with pytest.raises(asyncio.CancelledError):
            await ExceptionHandlingMiddleware().invoke(
                _context(), _raising(asyncio.CancelledError()),
            )

    async def test_success_leaves_result_untouched(self) -> None:
        context = _context()
        await ExceptionHandlingMiddleware().invoke(context, _noop)
        assert context.result is None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_empty_name_short_circuits(self, name: str) -> None:
        called = False

        async def next_step() -> None:
            nonlocal called
            called = True

        context = _context(name)
        await ValidationMiddleware().invoke(context, next_step)

        assert called is False
        assert context.result == CommandResult.error_result("Command name cannot be empty")

    async def test_valid_name_continues(self) -> None:
        called = False

        async def next_step() -> None:
            nonlocal called
            called = True

        await ValidationMiddleware().invoke(_context(), next_step)
        assert called is True


# ---------------------------------------------------------------------------
# Timing and logging
# ---------------------------------------------------------------------------

class TestTiming:
    async def test_records_elapsed_time(self) -> None:
        context = _context()
        await TimingMiddleware().invoke(context, _noop)
        assert context.properties[EXECUTION_TIME_KEY] >= 0

    async def test_reports_through_output(self) -> None:
        output = RecordingOutput()
        await TimingMiddleware(output).invoke(_context(), _noop)

        [message] = output.texts("info")
        assert message.startswith("Command completed in ")
        assert message.endswith("ms")

    async def test_records_time_even_on_failure(self) -> None:
        context = _context()
        with pytest.raises(RuntimeError):
            await TimingMiddleware().invoke(context, _raising(RuntimeError("x")))
        assert EXECUTION_TIME_KEY in context.properties


class TestLogging:
    async def test_logs_start_and_end(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="cmdshell"):
            await LoggingMiddleware().invoke(_context(), _noop)
        assert "Executing command: demo" in caplog.text
        assert "Command demo completed in" in caplog.text

    async def test_reraises_failures(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="cmdshell"):
            with pytest.raises(RuntimeError):
                await LoggingMiddleware().invoke(_context(), _raising(RuntimeError("x")))
        assert "Command demo failed after" in caplog.text
