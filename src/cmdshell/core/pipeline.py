"""Middleware pipeline — ordered, nested composition of behaviours.

The chain is composed once, when :class:`MiddlewarePipeline.build` is
called, into a single ``async (context) -> None`` callable.  Behaviour
``i`` wraps behaviour ``i + 1``: it starts first and finishes last.
The innermost link is a no-op terminal.

The two built-in steps, :class:`ResolutionStep` and
:class:`ExecutionStep`, are ordinary middleware; the executor places
them innermost, after every user-registered behaviour.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.models import CommandResult
from cmdshell.core.protocols import Command, Middleware, NextStep
from cmdshell.core.registry import CommandRegistry, NotFound

logger = logging.getLogger(__name__)

Handler = Callable[["ExecutionContext"], Awaitable[None]]


# ---------------------------------------------------------------------------
# Per-invocation context
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ExecutionContext:
    """Mutable record threaded through one pipeline run.

    Created by the executor per invocation, mutated only by the pipeline
    and discarded afterwards.
    """

    command_line: str
    command_name: str
    arguments: list[str] = field(default_factory=list)
    cancel: CancellationToken = field(default_factory=CancellationToken)
    command: Command | None = None
    """Set by the resolution step once the name resolves."""

    properties: dict[str, Any] = field(default_factory=dict)
    """Free-form bag for inter-middleware communication."""

    handled: bool = False
    """When set before the execution step, the command body is skipped."""

    result: CommandResult | None = None


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

async def _terminal(_context: ExecutionContext) -> None:
    return None


class MiddlewarePipeline:
    """An ordered list of middleware composed into one handler.

    Usage::

        pipeline = MiddlewarePipeline([outer, inner])
        handler = pipeline.build()
        await handler(context)
    """

    def __init__(self, middlewares: Iterable[Middleware] = ()) -> None:
        self._middlewares: list[Middleware] = list(middlewares)

    def use(self, middleware: Middleware) -> MiddlewarePipeline:
        """Append *middleware* as the new innermost behaviour."""
        self._middlewares.append(middleware)
        return self

    def __len__(self) -> int:
        return len(self._middlewares)

    def build(self) -> Handler:
        """Compose the chain; the first middleware becomes the outer layer."""
        handler: Handler = _terminal
        for middleware in reversed(self._middlewares):
            handler = _wrap(middleware, handler)
        return handler


def _wrap(middleware: Middleware, next_handler: Handler) -> Handler:
    async def handler(context: ExecutionContext) -> None:
        async def next_step() -> None:
            await next_handler(context)

        await middleware.invoke(context, next_step)

    return handler


# ---------------------------------------------------------------------------
# Built-in steps
# ---------------------------------------------------------------------------

class ResolutionStep:
    """Resolve ``context.command_name`` through the registry.

    A miss sets an error result and stops the chain.
    """

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry: CommandRegistry = registry

    async def invoke(self, context: ExecutionContext, next_step: NextStep) -> None:
        resolution = self._registry.resolve(context.command_name)
        if isinstance(resolution, NotFound):
            logger.debug("Command not found: %s", context.command_name)
            context.result = CommandResult.error_result(
                f"Command not found: {context.command_name}",
            )
            return

        context.command = resolution.command
        await next_step()


class ExecutionStep:
    """Run the resolved command unless a behaviour marked the context handled."""

    async def invoke(self, context: ExecutionContext, next_step: NextStep) -> None:
        if context.command is not None and not context.handled:
            await context.command.execute(context.arguments, context.cancel)
        await next_step()
