"""Tests for cooperative cancellation (core/cancellation.py)."""

from __future__ import annotations

import asyncio

import pytest

from cmdshell.core.cancellation import ApplicationLifetime, CancellationToken
from cmdshell.exceptions import CmdShellError, OperationCancelledError


class TestCancellationToken:
    def test_starts_uncancelled(self) -> None:
        token = CancellationToken()
        assert token.is_cancelled is False
        token.raise_if_cancelled()

    def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        token.cancel()
        token.cancel()
        assert token.is_cancelled is True

    def test_raise_if_cancelled(self) -> None:
        token = CancellationToken()
        token.raise_if_cancelled()
        token.cancel()
        with pytest.raises(OperationCancelledError, match="Operation cancelled"):
            token.raise_if_cancelled()

    def test_cancelled_error_is_contained_like_other_failures(self) -> None:
        assert issubclass(OperationCancelledError, CmdShellError)
        assert issubclass(OperationCancelledError, Exception)

    async def test_wait_returns_after_cancel(self) -> None:
        token = CancellationToken()
        waiter = asyncio.create_task(token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        token.cancel()
        await asyncio.wait_for(waiter, timeout=1)

    async def test_wait_on_cancelled_token_returns_immediately(self) -> None:
        token = CancellationToken()
        token.cancel()
        await asyncio.wait_for(token.wait(), timeout=1)

    def test_none_is_fresh(self) -> None:
        assert CancellationToken.none() is not CancellationToken.none()


class TestApplicationLifetime:
    def test_stop_cancels_token(self) -> None:
        lifetime = ApplicationLifetime()
        lifetime.stop_application()
        lifetime.stop_application()
        assert lifetime.stopping.is_cancelled is True
