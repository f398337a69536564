"""Cooperative cancellation primitives.

Cancellation is advisory: a :class:`CancellationToken` is a flag that
commands, the host loop and the script engine poll at the points where
they may suspend.  Nothing here interrupts in-flight work.
"""

from __future__ import annotations

import asyncio
import logging

from cmdshell.exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """A one-way, awaitable cancellation flag.

    Once cancelled a token stays cancelled.  The underlying
    :class:`asyncio.Event` is created lazily so a token can be built
    outside a running event loop.
    """

    def __init__(self) -> None:
        self._cancelled: bool = False
        self._event: asyncio.Event | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Signal cancellation (idempotent)."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise :class:`~cmdshell.exceptions.OperationCancelledError` once cancelled."""
        if self._cancelled:
            raise OperationCancelledError()

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    @classmethod
    def none(cls) -> CancellationToken:
        """Return a fresh token that nobody will cancel."""
        return cls()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


class ApplicationLifetime:
    """Owns the process-wide cancellation token.

    The host loop calls :meth:`stop_application` when it terminates; the
    CLI wires SIGINT/SIGTERM to the same method.
    """

    def __init__(self) -> None:
        self.stopping: CancellationToken = CancellationToken()

    def stop_application(self) -> None:
        if not self.stopping.is_cancelled:
            logger.debug("Application stop requested")
        self.stopping.cancel()
