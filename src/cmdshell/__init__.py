"""cmdshell — interactive command shell and script runner.

Commands are plain classes registered through explicit metadata and run
through an ordered middleware pipeline.
"""

from cmdshell.version import __version__

__all__: list[str] = ["__version__"]
