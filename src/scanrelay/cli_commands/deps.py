"""Late binding of the objects that job and worker commands build on.

Commands look up ``load_settings``, ``JobStore`` and ``SqlmapApiClient`` on
the ``scanrelay.cli`` module each time they run, so a test can swap in a
temporary store or a fake sqlmap client there.
"""

from importlib import import_module
from types import ModuleType


def cli_module() -> ModuleType:
    """Return ``scanrelay.cli`` as currently loaded."""
    return import_module("scanrelay.cli")
