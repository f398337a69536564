"""Infrastructure: load :class:`~cmdshell.core.options.AppOptions` from JSON.

File layout::

    {
      "host": {"prompt": "$ ", "exit_on_nonzero_exit_code": true},
      "registration": {"command_modules": ["myapp.commands"]},
      "logging": {"level": "INFO", "log_performance": true},
      "scripting": {"default_script_extension": ".cmds"}
    }

Every section and key is optional.  The document is validated by the
pydantic models in :mod:`cmdshell.core.options`; unknown sections or
keys and values of the wrong type surface as :class:`ConfigurationError`
rather than being silently ignored.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cmdshell.core.options import AppOptions
from cmdshell.exceptions import ConfigurationError

CONFIG_ENV_VAR = "CMDSHELL_CONFIG"
"""Environment variable naming the default configuration file."""

DEFAULT_CONFIG_FILE = "cmdshell.json"


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def load_options(path: str | None = None) -> AppOptions:
    """Load options from *path*, ``$CMDSHELL_CONFIG`` or ``./cmdshell.json``.

    An explicitly named file (argument or environment variable) must
    exist; the implicit default file is optional.

    Raises
    ------
    ConfigurationError
        On a missing explicit file, malformed JSON, or invalid content.
    """
    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    config_path = Path(explicit) if explicit else Path(DEFAULT_CONFIG_FILE)

    if not config_path.is_file():
        if explicit:
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                hint=f"Pass an existing file with --config or unset {CONFIG_ENV_VAR}.",
            )
        return AppOptions()

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Invalid JSON in {config_path}: {exc.msg} (line {exc.lineno})",
        ) from exc

    return options_from_mapping(raw)


def options_from_mapping(raw: object) -> AppOptions:
    """Build :class:`AppOptions` from an already-parsed JSON object.

    Raises
    ------
    ConfigurationError
        If *raw* is not an object, names an unknown section or key, or
        holds a value of the wrong type.
    """
    try:
        return AppOptions.model_validate(raw)
    except ValidationError as exc:
        problems = "; ".join(_describe(error) for error in exc.errors())
        raise ConfigurationError(
            f"Invalid configuration: {problems}",
            hint=f"Valid sections: {', '.join(AppOptions.model_fields)}",
        ) from exc


def _describe(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "root"
    return f"{location}: {error['msg']}"
