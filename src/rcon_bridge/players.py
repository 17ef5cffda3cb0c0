"""Caller identity to in-game username resolution.

Voice devices identify their speaker with a short device-user name
(``"eisley"``); commands must target the matching in-game username
(``"Eisley42"``).  :class:`PlayerResolver` is a static lookup built from the
``[players]`` configuration section and consulted once per request, before
command generation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from rcon_bridge.config import PlayerSettings
from rcon_bridge.errors import ConfigurationError

logger = logging.getLogger(__name__)


class PlayerResolver:
    """Maps device users to in-game usernames with a configured default."""

    def __init__(self, *, default_player: str, device_users: Mapping[str, str] | None = None):
        if not default_player:
            raise ConfigurationError("DEFAULT_PLAYER environment variable is required")
        self.default_player = default_player
        self._device_users = {key.lower(): value for key, value in (device_users or {}).items()}

    @classmethod
    def from_settings(cls, settings: PlayerSettings) -> PlayerResolver:
        return cls(default_player=settings.default_player, device_users=settings.device_users)

    @property
    def device_users(self) -> dict[str, str]:
        return dict(self._device_users)

    def resolve(self, device_user: str | None = None) -> str:
        """Return the username for ``device_user``, or the default.

        Matching is case-insensitive.  Absent or unknown identities fall
        back to the default player.
        """
        if not device_user:
            return self.default_player
        username = self._device_users.get(device_user.strip().lower())
        if username:
            return username
        logger.info("Unknown device user %r; using default player", device_user)
        return self.default_player
