"""Interactive host loop (REPL).

States: idle → awaiting input → dispatching → awaiting input … → terminated.

* blank input re-prompts without dispatching;
* ``exit`` (any case), end of input, or cancellation terminates, even
  when the cancellation surfaces from inside a dispatched command;
* every other line goes through the executor and its result is rendered;
* with ``exit_on_nonzero_exit_code`` a failing command ends the session
  and its exit code becomes the loop's return value;
* an exception raised while dispatching one line is logged and reported,
  and the loop carries on.

On termination the host always asks the application lifetime to stop.
"""

from __future__ import annotations

import asyncio
import logging

from cmdshell.cli import exit_codes
from cmdshell.core.cancellation import ApplicationLifetime, CancellationToken
from cmdshell.core.executor import CommandExecutor
from cmdshell.core.models import CommandResult
from cmdshell.core.options import HostOptions
from cmdshell.core.protocols import ConsoleOutput, LineReader
from cmdshell.exceptions import OperationCancelledError

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
HELP_HINT = "Type 'help' to see available commands."


class InteractiveHost:
    """Drive the executor from a line reader until the session ends.

    Parameters
    ----------
    executor:
        Executor every entered line is submitted to.
    output:
        Sink for the banner and rendered results.
    reader:
        Source of input lines.
    options:
        Prompt, banner and exit behaviour.
    lifetime:
        Application lifetime; stopped when the loop terminates.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        output: ConsoleOutput,
        reader: LineReader,
        options: HostOptions | None = None,
        lifetime: ApplicationLifetime | None = None,
    ) -> None:
        self._executor: CommandExecutor = executor
        self._output: ConsoleOutput = output
        self._reader: LineReader = reader
        self._options: HostOptions = options or HostOptions()
        self._lifetime: ApplicationLifetime = lifetime or ApplicationLifetime()

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def run(self, cancel: CancellationToken | None = None) -> int:
        """Run the read-dispatch loop and return the session exit code."""
        token = cancel or self._lifetime.stopping
        exit_code = exit_codes.SUCCESS

        try:
            if self._options.show_welcome_message:
                self._show_welcome()

            while not token.is_cancelled:
                line = await self._read_line(token)
                if line is None:
                    logger.debug("Input closed; leaving interactive session")
                    break

                line = line.strip()
                if not line:
                    continue
                if line.lower() == EXIT_COMMAND:
                    break

                try:
                    result = await self._executor.execute(line, token)
                except OperationCancelledError:
                    logger.debug("Command cancelled; leaving interactive session")
                    break
                except asyncio.CancelledError:
                    if not token.is_cancelled:
                        raise
                    break
                except Exception as exc:
                    logger.error("Unhandled error while executing '%s'", line, exc_info=True)
                    self._output.write_error(f"Unexpected error: {exc}")
                    continue

                self._render(result)
                if result.exit_code != 0 and self._options.exit_on_nonzero_exit_code:
                    exit_code = result.exit_code
                    break
        finally:
            self._lifetime.stop_application()

        return exit_code

    async def execute_command(
        self,
        line: str,
        cancel: CancellationToken | None = None,
    ) -> int:
        """Execute a single *line*, render its result and return its exit code."""
        result = await self._executor.execute(line, cancel or self._lifetime.stopping)
        self._render(result)
        return result.exit_code

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _show_welcome(self) -> None:
        self._output.write_line(f"Welcome to {self._options.welcome_message}!", style="bold cyan")
        self._output.write_line(HELP_HINT, style="dim")
        self._output.write_line()

    async def _read_line(self, token: CancellationToken) -> str | None:
        """Read one line, giving up as soon as *token* is cancelled."""
        read_task = asyncio.ensure_future(self._reader.read_line(self._options.prompt))
        cancel_task = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({read_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()

        if token.is_cancelled:
            read_task.cancel()
            return None
        return read_task.result()

    def _render(self, result: CommandResult) -> None:
        if not result.message:
            return
        if result.success:
            self._output.write_success(result.message)
        else:
            self._output.write_error(result.message)
