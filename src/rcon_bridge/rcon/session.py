"""Stateful remote-console (RCON) client.

``ConsoleSession`` owns at most one authenticated TCP connection to a
game server's RCON port and exposes four operations:

- ``connect()``   : open and authenticate; no-op when already connected.
- ``send(cmd)``   : run one command and return its textual reply.
- ``disconnect()``: close; no-op when already disconnected, never raises.
- context-manager support (``with session:``) pairing the two.

State machine
-------------
``Disconnected → Connected → Disconnected``.  The only state is whether
``_sock`` holds a live socket.

Sessions are cheap and short-lived.  :class:`~rcon_bridge.rcon.executor.CommandExecutor`
builds a fresh one for every batch, so nothing leaks between unrelated
requests.  A session is not safe to share across threads.

Timeouts
--------
The configured timeout applies to the TCP connect and to every blocking
read and write.  There are no retries: a timed-out operation surfaces
immediately as :class:`ConnectError` (during ``connect``) or
:class:`CommandError` (during ``send``).
"""

from __future__ import annotations

import functools
import itertools
import logging
import socket
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rcon_bridge.errors import (
    AuthenticationError,
    CommandError,
    ConfigurationError,
    ConnectError,
    ConsoleError,
    NotConnectedError,
)
from rcon_bridge.rcon.protocol import (
    AUTH_FAILURE_ID,
    MAX_REQUEST_BODY,
    SERVERDATA_AUTH,
    SERVERDATA_AUTH_RESPONSE,
    SERVERDATA_EXECCOMMAND,
    Packet,
    ProtocolError,
    encode_packet,
    read_packet,
)

if TYPE_CHECKING:
    from rcon_bridge.config import RconSettings

logger = logging.getLogger(__name__)

_MISSING_PASSWORD = "RCON password is required (set RCON_PASSWORD environment variable)"

DEFAULT_TIMEOUT_SECONDS = 5.0


class ConsoleSession:
    """Minimal synchronous RCON client.

    Configuration is fixed at construction.  A missing credential fails
    immediately with :class:`ConfigurationError`; a session can never
    exist without one.

    Attributes:
        host:            Server hostname or IP.
        port:            RCON TCP port.
        timeout_seconds: Connect/read/write timeout.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        password: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if not password:
            raise ConfigurationError(_MISSING_PASSWORD)
        self.host = host
        self.port = port
        self.timeout_seconds = timeout_seconds
        self._password = password
        self._sock: socket.socket | None = None
        self._ids = itertools.count(1)

    @classmethod
    def from_settings(cls, settings: RconSettings) -> ConsoleSession:
        """Build a session from the ``[rcon]`` configuration section."""
        return cls(
            host=settings.host,
            port=settings.port,
            password=settings.password,
            timeout_seconds=settings.timeout_seconds,
        )

    def __repr__(self) -> str:
        state = "connected" if self.is_connected else "disconnected"
        return f"<ConsoleSession {self.host}:{self.port} {state}>"

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def connect(self) -> None:
        """Open the transport and authenticate.

        Raises:
            ConnectError:        Transport failure or timeout.
            AuthenticationError: The server rejected the password.
        """
        if self._sock is not None:
            return

        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.timeout_seconds)
        except OSError as exc:
            raise ConnectError(f"cannot reach {self.host}:{self.port}: {exc}") from exc

        try:
            self._authenticate(sock)
        except AuthenticationError:
            sock.close()
            raise
        except (OSError, ProtocolError) as exc:
            sock.close()
            raise ConnectError(f"handshake with {self.host}:{self.port} failed: {exc}") from exc

        self._sock = sock
        logger.debug("RCON session connected to %s:%d", self.host, self.port)

    def disconnect(self) -> None:
        """Close the connection.  Best-effort: close errors are logged, not raised."""
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError:
            logger.warning(
                "Error closing RCON connection to %s:%d", self.host, self.port, exc_info=True
            )
        else:
            logger.debug("RCON session to %s:%d closed", self.host, self.port)

    def __enter__(self) -> ConsoleSession:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
        return None

    # ── Commands ──────────────────────────────────────────────────────────────

    def send(self, command: str) -> str:
        """Run ``command`` and return the server's reply text.

        Replies carrying a different request id (for example a late answer
        to an earlier, timed-out command) are discarded.

        Raises:
            NotConnectedError: ``connect()`` has not succeeded.
            CommandError:      Transport failure or timeout mid-exchange, or a
                               command the server cannot accept (too long,
                               or not encodable as UTF-8).
        """
        sock = self._sock
        if sock is None:
            raise NotConnectedError("RCON not connected. Call connect() first.")

        try:
            body = command.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise CommandError(f"command is not encodable as UTF-8: {exc.reason}") from exc
        if len(body) > MAX_REQUEST_BODY:
            raise CommandError(f"command exceeds {MAX_REQUEST_BODY} bytes")

        request_id = next(self._ids)
        try:
            sock.sendall(encode_packet(Packet(request_id, SERVERDATA_EXECCOMMAND, command)))
            while True:
                packet = read_packet(sock)
                if packet.request_id == request_id:
                    return packet.body
                logger.debug("Discarding RCON reply for stale request id %d", packet.request_id)
        except (OSError, ProtocolError) as exc:
            raise CommandError(str(exc) or exc.__class__.__name__) from exc

    def _authenticate(self, sock: socket.socket) -> None:
        request_id = next(self._ids)
        sock.sendall(encode_packet(Packet(request_id, SERVERDATA_AUTH, self._password)))
        while True:
            packet = read_packet(sock)
            if packet.packet_type != SERVERDATA_AUTH_RESPONSE:
                continue
            if packet.request_id == AUTH_FAILURE_ID:
                raise AuthenticationError(f"RCON authentication to {self.host}:{self.port} failed")
            if packet.request_id == request_id:
                return

    # ── Diagnostics ───────────────────────────────────────────────────────────

    def test_connection(self) -> bool:
        """Return ``True`` if the server accepts a login and a ``list`` command."""
        try:
            with self:
                self.send("list")
            return True
        except ConsoleError as exc:
            logger.warning("RCON connection test failed: %s", exc)
            return False

    def server_info(self) -> dict[str, Any]:
        """Return ``{"online": bool, "players": str}`` from the ``list`` command."""
        try:
            with self:
                players = self.send("list")
        except ConsoleError:
            return {"online": False}
        return {"online": True, "players": players}


def make_session_factory(settings: RconSettings) -> Callable[[], ConsoleSession]:
    """Return a callable producing a fresh :class:`ConsoleSession` per call.

    Raises:
        ConfigurationError: If ``settings`` carries no password.  Checked
            here so a misconfigured process fails at startup rather than on
            the first request.
    """
    if not settings.password:
        raise ConfigurationError(_MISSING_PASSWORD)
    return functools.partial(ConsoleSession.from_settings, settings)
