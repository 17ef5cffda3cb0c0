"""RCON Bridge: voice requests to game-server console commands.

Turns a spoken or typed request into a short batch of administrative
commands, validates any referenced items against a known catalog, and
executes the batch over a remote console (RCON) session.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
``api/server.py`` and the root endpoint import ``__version__`` from here.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ---------------------------------------------------------------------------
# Package version, read from pyproject.toml via importlib.metadata.
#
# Falls back to the literal below when the package is imported without
# being installed (for example straight from a source checkout).
# ---------------------------------------------------------------------------
try:
    __version__: str = version("rcon_bridge")
except PackageNotFoundError:
    __version__ = "0.1.0"
