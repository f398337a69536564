"""Command executor — the façade in front of the middleware pipeline.

The executor tokenizes a line, builds a fresh
:class:`~cmdshell.core.pipeline.ExecutionContext`, runs the pipeline
composed at construction time and always returns a
:class:`~cmdshell.core.models.CommandResult`.

Pipeline layout (outermost first)::

    user middleware 0 … user middleware n-1 → ResolutionStep → ExecutionStep → no-op
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence

from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.middleware import CANCELLED_MESSAGE
from cmdshell.core.models import CommandResult
from cmdshell.core.options import ExecutorOptions
from cmdshell.core.pipeline import (
    ExecutionContext,
    ExecutionStep,
    MiddlewarePipeline,
    ResolutionStep,
)
from cmdshell.core.protocols import Middleware
from cmdshell.core.registry import CommandRegistry
from cmdshell.core.tokenizer import tokenize
from cmdshell.exceptions import OperationCancelledError

logger = logging.getLogger(__name__)

EMPTY_LINE_MESSAGE = "Empty command line"
INVALID_FORMAT_MESSAGE = "Invalid command format"


class CommandExecutor:
    """Run command lines through the middleware pipeline.

    Parameters
    ----------
    registry:
        Populated registry used by the resolution step.
    middlewares:
        User behaviours, outermost first.
    options:
        Executor options.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        middlewares: Iterable[Middleware] = (),
        options: ExecutorOptions | None = None,
    ) -> None:
        self._registry: CommandRegistry = registry
        self._options: ExecutorOptions = options or ExecutorOptions()
        if self._options.allow_parallel_execution:
            logger.warning("Parallel execution is not supported; commands run serially")

        pipeline = MiddlewarePipeline(middlewares)
        pipeline.use(ResolutionStep(registry)).use(ExecutionStep())
        self._handler = pipeline.build()

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def execute(
        self,
        line: str,
        cancel: CancellationToken | None = None,
    ) -> CommandResult:
        """Tokenize *line* and execute it.

        Blank input is rejected without entering the pipeline.
        """
        if not line.strip():
            return CommandResult.error_result(EMPTY_LINE_MESSAGE)

        tokens = tokenize(line)
        if not tokens:
            return CommandResult.error_result(INVALID_FORMAT_MESSAGE)

        return await self.execute_command(tokens[0], tokens[1:], cancel, command_line=line)

    async def execute_command(
        self,
        name: str,
        args: Sequence[str] = (),
        cancel: CancellationToken | None = None,
        *,
        command_line: str | None = None,
    ) -> CommandResult:
        """Execute command *name* with pre-split *args*.

        Never raises for a failing or cancelled command: an exception that
        escapes the pipeline is logged and converted into an error result.
        Task cancellation is converted only when *cancel* has fired.
        """
        arguments = list(args)
        context = ExecutionContext(
            command_line=command_line if command_line is not None else " ".join([name, *arguments]),
            command_name=name,
            arguments=arguments,
            cancel=cancel or CancellationToken.none(),
        )

        try:
            await self._handler(context)
        except OperationCancelledError as exc:
            logger.warning("Command %s was cancelled", name)
            return CommandResult.error_result(str(exc))
        except asyncio.CancelledError:
            if not context.cancel.is_cancelled:
                raise
            logger.warning("Command %s was cancelled", name)
            return CommandResult.error_result(CANCELLED_MESSAGE)
        except Exception as exc:
            logger.error("Error executing command %s", name, exc_info=True)
            return CommandResult.error_result(f"Execution error: {exc}")

        if context.result is not None:
            return context.result
        return CommandResult.success_result()
