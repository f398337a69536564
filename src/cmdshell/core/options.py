"""Configuration records for every layer.

All options are frozen pydantic models with safe defaults so that the
whole application runs without a configuration file.  Unknown keys are
forbidden and scalar values are strict: ``"yes"`` is not a boolean and
``5`` is not a prompt.  Loading from disk lives in
:mod:`cmdshell.infra.config`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class _Options(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class HostOptions(_Options):
    """Interactive host loop behaviour."""

    show_welcome_message: StrictBool = True
    welcome_message: StrictStr = "cmdshell"
    """Title rendered in the welcome banner."""

    prompt: StrictStr = "> "
    exit_on_nonzero_exit_code: StrictBool = False
    """Terminate the loop with the command's exit code on failure."""


class ExecutorOptions(_Options):
    """Command executor behaviour."""

    allow_parallel_execution: StrictBool = False
    """Declared only; execution is always serial."""


class RegistrationOptions(_Options):
    """Where commands come from and how they are classified."""

    use_naming_convention: StrictBool = True
    command_modules: tuple[StrictStr, ...] = ()
    """Importable module names scanned for command classes."""

    excluded_commands: tuple[StrictStr, ...] = ()


class LoggingOptions(_Options):
    """Logging sink and pipeline logging behaviour."""

    level: StrictStr = "WARNING"
    log_command_execution: StrictBool = True
    """Add the logging middleware to the pipeline."""

    log_performance: StrictBool = False
    """Add the timing middleware to the pipeline."""


class ScriptingOptions(_Options):
    """Script runner behaviour."""

    enable_scripting: StrictBool = True
    default_script_extension: StrictStr = ".cmds"


class AppOptions(_Options):
    """Root configuration record; one field per JSON section."""

    host: HostOptions = Field(default_factory=HostOptions)
    executor: ExecutorOptions = Field(default_factory=ExecutorOptions)
    registration: RegistrationOptions = Field(default_factory=RegistrationOptions)
    logging: LoggingOptions = Field(default_factory=LoggingOptions)
    scripting: ScriptingOptions = Field(default_factory=ScriptingOptions)
