"""Unit tests for ConsoleSession against an in-memory RCON server."""

import socket
from unittest.mock import MagicMock, patch

import pytest

from rcon_bridge.config import RconSettings
from rcon_bridge.errors import (
    AuthenticationError,
    CommandError,
    ConfigurationError,
    ConnectError,
    NotConnectedError,
)
from rcon_bridge.rcon import ConsoleSession, make_session_factory
from rcon_bridge.rcon.protocol import MAX_REQUEST_BODY, SERVERDATA_AUTH, Packet, encode_packet
from tests.constants import TEST_PASSWORD
from tests.fakes import FakeRconSocket


def _session(**overrides) -> ConsoleSession:
    params = {"host": "mc.local", "port": 25575, "password": TEST_PASSWORD, "timeout_seconds": 2.0}
    params.update(overrides)
    return ConsoleSession(**params)


# ============================================================================
# CONSTRUCTION
# ============================================================================


@pytest.mark.unit
class TestConstruction:
    def test_empty_password_rejected(self):
        with pytest.raises(ConfigurationError, match="RCON_PASSWORD"):
            _session(password="")

    def test_starts_disconnected(self):
        assert not _session().is_connected

    def test_repr_hides_password(self):
        assert TEST_PASSWORD not in repr(_session())

    def test_from_settings(self):
        settings = RconSettings(host="10.0.0.5", port=27015, password="pw", timeout_seconds=1.5)
        session = ConsoleSession.from_settings(settings)
        assert (session.host, session.port, session.timeout_seconds) == ("10.0.0.5", 27015, 1.5)

    def test_factory_requires_password(self):
        with pytest.raises(ConfigurationError):
            make_session_factory(RconSettings(password=""))

    def test_factory_builds_fresh_sessions(self):
        factory = make_session_factory(RconSettings(password="pw"))
        first, second = factory(), factory()
        assert isinstance(first, ConsoleSession)
        assert first is not second


# ============================================================================
# CONNECT
# ============================================================================


@pytest.mark.unit
class TestConnect:
    def test_authenticates_with_password(self, fake_rcon_socket):
        session = _session()
        with patch("socket.create_connection", return_value=fake_rcon_socket) as mock_conn:
            session.connect()

        assert session.is_connected
        mock_conn.assert_called_once_with(("mc.local", 25575), timeout=2.0)
        auth = fake_rcon_socket.received[0]
        assert auth.packet_type == SERVERDATA_AUTH
        assert auth.body == TEST_PASSWORD

    def test_connect_is_idempotent(self, fake_rcon_socket):
        session = _session()
        with patch("socket.create_connection", return_value=fake_rcon_socket) as mock_conn:
            session.connect()
            session.connect()

        assert mock_conn.call_count == 1
        assert len(fake_rcon_socket.received) == 1

    def test_wrong_password_raises_and_closes(self):
        sock = FakeRconSocket(password="something-else")
        session = _session()
        with patch("socket.create_connection", return_value=sock):
            with pytest.raises(AuthenticationError):
                session.connect()

        assert sock.closed
        assert not session.is_connected

    def test_unreachable_host_raises_connect_error(self):
        session = _session()
        with patch("socket.create_connection", side_effect=ConnectionRefusedError("refused")):
            with pytest.raises(ConnectError, match="mc.local:25575"):
                session.connect()
        assert not session.is_connected

    def test_handshake_timeout_raises_connect_error(self):
        sock = MagicMock()
        sock.recv.side_effect = socket.timeout("timed out")
        session = _session()
        with patch("socket.create_connection", return_value=sock):
            with pytest.raises(ConnectError, match="handshake"):
                session.connect()

        sock.close.assert_called_once()
        assert not session.is_connected


# ============================================================================
# SEND
# ============================================================================


@pytest.fixture
def connected(fake_rcon_socket):
    session = _session()
    with patch("socket.create_connection", return_value=fake_rcon_socket):
        session.connect()
    return session


@pytest.mark.unit
class TestSend:
    def test_send_requires_connection(self):
        with pytest.raises(NotConnectedError, match="Call connect\\(\\) first"):
            _session().send("list")

    def test_returns_reply_body(self, connected, fake_rcon_socket):
        assert connected.send("give alice bread 5") == "ran give alice bread 5"
        assert fake_rcon_socket.commands == ["give alice bread 5"]

    def test_reassembles_fragmented_reply(self):
        sock = FakeRconSocket(chunk_size=3, handler=lambda command: "x" * 200)
        session = _session()
        with patch("socket.create_connection", return_value=sock):
            session.connect()

        assert session.send("list") == "x" * 200

    def test_commands_run_in_order(self, connected, fake_rcon_socket):
        replies = [connected.send(cmd) for cmd in ("god alice", "fly alice", "list")]

        assert replies == ["ran god alice", "ran fly alice", "ran list"]
        assert fake_rcon_socket.commands == ["god alice", "fly alice", "list"]

    def test_stale_reply_is_discarded(self, connected, fake_rcon_socket):
        fake_rcon_socket.queue_raw(encode_packet(Packet(999, 0, "late answer")))
        assert connected.send("list") == "ran list"

    def test_no_reply_raises_command_error(self):
        sock = FakeRconSocket(silent_commands={"save-all"})
        session = _session()
        with patch("socket.create_connection", return_value=sock):
            session.connect()

        with pytest.raises(CommandError):
            session.send("save-all")

    def test_overlong_command_rejected_before_sending(self, connected, fake_rcon_socket):
        with pytest.raises(CommandError, match=str(MAX_REQUEST_BODY)):
            connected.send("say " + "a" * MAX_REQUEST_BODY)
        assert fake_rcon_socket.commands == []

    def test_unencodable_command_rejected_before_sending(self, connected, fake_rcon_socket):
        with pytest.raises(CommandError, match="UTF-8"):
            connected.send("say \ud800")
        assert fake_rcon_socket.commands == []
        assert connected.send("list") == "ran list"

    def test_closed_transport_raises_command_error(self, connected, fake_rcon_socket):
        fake_rcon_socket.closed = True
        with pytest.raises(CommandError):
            connected.send("list")


# ============================================================================
# DISCONNECT
# ============================================================================


@pytest.mark.unit
class TestDisconnect:
    def test_disconnect_closes_socket(self, connected, fake_rcon_socket):
        connected.disconnect()
        assert fake_rcon_socket.closed
        assert not connected.is_connected

    def test_disconnect_when_disconnected_is_noop(self):
        _session().disconnect()

    def test_close_error_is_logged_not_raised(self, connected, fake_rcon_socket, caplog):
        fake_rcon_socket.close_error = OSError("reset by peer")

        connected.disconnect()

        assert not connected.is_connected
        assert "Error closing RCON connection" in caplog.text

    def test_send_after_disconnect_raises(self, connected):
        connected.disconnect()
        with pytest.raises(NotConnectedError):
            connected.send("list")

    def test_context_manager_pairs_connect_and_disconnect(self, fake_rcon_socket):
        session = _session()
        with patch("socket.create_connection", return_value=fake_rcon_socket):
            with session as active:
                assert active.send("list") == "ran list"

        assert fake_rcon_socket.closed
        assert not session.is_connected


# ============================================================================
# DIAGNOSTICS
# ============================================================================


@pytest.mark.unit
class TestDiagnostics:
    def test_test_connection_success(self, fake_rcon_socket):
        with patch("socket.create_connection", return_value=fake_rcon_socket):
            assert _session().test_connection() is True
        assert fake_rcon_socket.commands == ["list"]

    def test_test_connection_failure(self):
        with patch("socket.create_connection", side_effect=OSError("no route")):
            assert _session().test_connection() is False

    def test_server_info_online(self):
        sock = FakeRconSocket(handler=lambda command: "There are 1 of a max of 20 players online")
        with patch("socket.create_connection", return_value=sock):
            info = _session().server_info()
        assert info == {"online": True, "players": "There are 1 of a max of 20 players online"}

    def test_server_info_offline(self):
        with patch("socket.create_connection", side_effect=OSError("no route")):
            assert _session().server_info() == {"online": False}
