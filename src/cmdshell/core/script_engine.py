"""Script engine — sequential, fail-fast execution of command lines.

For each line, in order:

* blank lines and ``#`` comments are skipped without a result entry;
* anything else goes through the executor and produces one
  :class:`~cmdshell.core.models.CommandExecutionResult`;
* the first failure (error result or raised exception) stops the run;
* cancellation is checked before each line; a cancelled run records
  nothing for lines not yet started, and a line interrupted by
  cancellation counts as the failure that stops the run.

Guarantees
----------
* ``executed_commands`` counts successes, ``failed_commands`` is 0 or 1.
* The returned :class:`~cmdshell.core.models.ScriptResult` is immutable.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from cmdshell.core.cancellation import CancellationToken
from cmdshell.core.executor import CommandExecutor
from cmdshell.core.middleware import CANCELLED_MESSAGE
from cmdshell.core.models import (
    CommandExecutionResult,
    CommandResult,
    ScriptResult,
    ScriptValidationResult,
)
from cmdshell.core.protocols import ConsoleOutput, ScriptSource
from cmdshell.exceptions import ScriptReadError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


class ScriptEngine:
    """Runs and validates command scripts.

    Parameters
    ----------
    executor:
        Executor every line is submitted to.
    output:
        Sink for progress and summary lines.
    source:
        Reader used by :meth:`run_file` and :meth:`validate_file`.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        output: ConsoleOutput,
        source: ScriptSource | None = None,
    ) -> None:
        self._executor: CommandExecutor = executor
        self._output: ConsoleOutput = output
        self._source: ScriptSource | None = source

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run_file(
        self,
        path: str,
        cancel: CancellationToken | None = None,
    ) -> ScriptResult:
        """Read *path* and run its lines.

        Raises
        ------
        ScriptReadError
            If the file cannot be read.
        """
        return await self.run(self._read(path), cancel)

    async def run(
        self,
        lines: Sequence[str],
        cancel: CancellationToken | None = None,
    ) -> ScriptResult:
        """Execute *lines* sequentially, stopping at the first failure."""
        token = cancel or CancellationToken.none()
        results: list[CommandExecutionResult] = []
        executed = 0
        failed = 0
        started = time.perf_counter()

        self._output.write_info(f"Executing script with {len(lines)} lines...")
        logger.info("Starting script execution with %d lines", len(lines))

        for index, raw_line in enumerate(lines, start=1):
            if token.is_cancelled:
                self._output.write_warning("Script execution cancelled")
                logger.warning("Script execution cancelled before line %d", index)
                break

            line = raw_line.strip()
            if not line or line.startswith(COMMENT_PREFIX):
                continue

            self._output.write_info(f"[{index}] Executing: {line}")
            logger.debug("Executing line %d: %s", index, line)
            line_started = time.perf_counter()

            try:
                outcome = await self._executor.execute(line, token)
            except asyncio.CancelledError:
                if not token.is_cancelled:
                    raise
                outcome = CommandResult.error_result(CANCELLED_MESSAGE)
            except Exception as exc:
                failed += 1
                results.append(
                    CommandExecutionResult(
                        command=line,
                        success=False,
                        error=str(exc),
                        duration=time.perf_counter() - line_started,
                    )
                )
                self._output.write_error(f"[{index}] Command error: {exc}")
                logger.error("Execution error at line %d: %s", index, line, exc_info=True)
                break

            duration = time.perf_counter() - line_started
            if outcome.success:
                executed += 1
                results.append(
                    CommandExecutionResult(
                        command=line,
                        success=True,
                        output=outcome.message,
                        duration=duration,
                    )
                )
                self._output.write_success(f"[{index}] Executed successfully: {line}")
                continue

            failed += 1
            results.append(
                CommandExecutionResult(
                    command=line,
                    success=False,
                    output=outcome.message,
                    error=outcome.message,
                    duration=duration,
                )
            )
            self._output.write_error(f"[{index}] Failed: {outcome.message}")
            logger.error("Line %d failed: %s - %s", index, line, outcome.message)
            if token.is_cancelled:
                self._output.write_warning("Script execution cancelled")
            break

        total = time.perf_counter() - started
        result = ScriptResult(
            success=failed == 0,
            executed_commands=executed,
            failed_commands=failed,
            total_duration=total,
            command_results=tuple(results),
        )
        self._report(result)
        return result

    def _report(self, result: ScriptResult) -> None:
        self._output.write_line()
        self._output.write_info("Script execution completed:")
        self._output.write_info(
            f"Total commands: {result.executed_commands + result.failed_commands}",
        )
        self._output.write_info(f"  Successful: {result.executed_commands}")
        self._output.write_info(f"  Failed: {result.failed_commands}")
        self._output.write_info(f"  Duration: {result.total_duration:.2f}s")
        logger.info(
            "Script execution completed - success=%s executed=%d failed=%d duration=%.3fs",
            result.success,
            result.executed_commands,
            result.failed_commands,
            result.total_duration,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_file(self, path: str) -> ScriptValidationResult:
        """Read *path* and validate it.

        Raises
        ------
        ScriptReadError
            If the file cannot be read.
        """
        return self.validate(self._read(path))

    def validate(self, lines: Sequence[str]) -> ScriptValidationResult:
        """Syntax-only pass; nothing is executed."""
        errors: list[str] = []
        warnings: list[str] = []

        for index, raw_line in enumerate(lines, start=1):
            if not raw_line.strip():
                warnings.append(f"Line {index}: Empty command")

        logger.info(
            "Script validation completed - errors=%d warnings=%d",
            len(errors),
            len(warnings),
        )
        return ScriptValidationResult(
            is_valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    # ------------------------------------------------------------------
    # Source access
    # ------------------------------------------------------------------

    def _read(self, path: str) -> list[str]:
        if self._source is None:
            raise ScriptReadError(f"Cannot read script {path}: no script source configured")
        return self._source.read_lines(path)
