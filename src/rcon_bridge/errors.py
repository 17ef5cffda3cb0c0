"""Typed exceptions for the RCON bridge.

A small, explicit hierarchy so each stage of the command pipeline can
signal *system* faults without collapsing them into boolean return values.

Design intent:
    - User-correctable outcomes (unknown item names, out-of-range
      quantities, a single command the server rejects) are represented
      as data in the result types, never raised.
    - Infrastructure faults (missing credential, unreadable catalog,
      unreachable console) raise typed exceptions so the stage that owns
      them can turn them into a structured unsuccessful result.
"""

from __future__ import annotations


class BridgeError(RuntimeError):
    """Base exception for all bridge failures."""


class ConfigurationError(BridgeError):
    """Required configuration is missing or invalid.

    Raised at construction time only (for example a console session built
    without a credential).  Never retried.
    """


# ── Catalog ───────────────────────────────────────────────────────────────────


class CatalogError(BridgeError):
    """Base exception for item catalog failures."""


class CatalogLoadError(CatalogError):
    """The catalog source could not be read."""


class NotLoadedError(CatalogError):
    """A catalog lookup was attempted before ``load()`` succeeded."""


# ── Remote console ────────────────────────────────────────────────────────────


class ConsoleError(BridgeError):
    """Base exception for remote console (RCON) failures."""


class ConnectError(ConsoleError):
    """Transport failure or timeout while opening the console connection."""


class AuthenticationError(ConsoleError):
    """The console server rejected the configured credential."""


class NotConnectedError(ConsoleError):
    """A command was sent on a session that is not connected."""


class CommandError(ConsoleError):
    """Transport failure during a single command exchange."""


# ── Command generation ────────────────────────────────────────────────────────


class GenerationError(BridgeError):
    """The natural-language command generator failed or returned garbage."""
