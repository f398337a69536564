"""Infrastructure: read script files from disk.

Script files are plain UTF-8 text read once per run.  All OS errors are
mapped to :class:`~cmdshell.exceptions.ScriptReadError`.
"""

from __future__ import annotations

from pathlib import Path

from cmdshell.exceptions import ScriptReadError


class FileScriptSource:
    """Concrete :class:`~cmdshell.core.protocols.ScriptSource` backed by the filesystem."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding: str = encoding

    def read_lines(self, path: str) -> list[str]:
        """Return the lines of *path* without line terminators.

        Raises
        ------
        ScriptReadError
            When the file is missing or unreadable.
        """
        script = Path(path)
        if not script.is_file():
            raise ScriptReadError(
                f"Script file not found: {path}",
                hint="Check the path, or pass the file name with its extension.",
            )
        try:
            return script.read_text(encoding=self._encoding).splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise ScriptReadError(f"Failed to read script {path}: {exc}") from exc


def resolve_script_path(path: str, default_extension: str) -> str:
    """Append *default_extension* when *path* does not exist but the extended one does."""
    if Path(path).exists() or not default_extension:
        return path
    candidate = f"{path}{default_extension}"
    if Path(candidate).is_file():
        return candidate
    return path
