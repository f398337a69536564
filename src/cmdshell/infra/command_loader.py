"""Infrastructure: import command modules and collect candidate classes.

A command module is any importable module.  Every class *defined* in it
(not merely imported into it) that exposes an ``execute`` attribute is a
discovery candidate; classification happens in
:func:`cmdshell.core.discovery.discover`.

A module that fails to import is logged and skipped so one broken
module cannot prevent the shell from starting.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def collect_command_types(module: object) -> list[type]:
    """Return candidate command classes defined in *module*, sorted by class name."""
    module_name = getattr(module, "__name__", None)
    return [
        member
        for _, member in inspect.getmembers(module, inspect.isclass)
        if member.__module__ == module_name and hasattr(member, "execute")
    ]


def load_command_types(module_names: Iterable[str]) -> list[type]:
    """Import each module in *module_names* and gather its command classes."""
    types: list[type] = []
    for module_name in module_names:
        try:
            module = importlib.import_module(module_name)
        except Exception:
            logger.warning("Failed to import command module %s", module_name, exc_info=True)
            continue
        found = collect_command_types(module)
        logger.debug("Found %d command types in module %s", len(found), module_name)
        types.extend(found)
    return types
