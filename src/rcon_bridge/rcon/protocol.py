"""Source RCON packet codec.

Minecraft (and every Source-engine server) speaks the same small binary
protocol on its RCON port.  Each packet on the wire is::

    int32 size      little-endian, byte count of everything after this field
    int32 id        client-chosen request id, echoed back in the reply
    int32 type      see the SERVERDATA_* constants below
    bytes body      UTF-8 text
    b"\\x00\\x00"     body terminator + empty string terminator

``size`` therefore equals ``len(body) + 10``.

Authentication
--------------
The client sends ``SERVERDATA_AUTH`` with the password as body.  The
server answers with ``SERVERDATA_AUTH_RESPONSE`` carrying the same id on
success, or id ``-1`` on a bad password.  Source servers also send an
empty ``SERVERDATA_RESPONSE_VALUE`` first; readers skip it.

Note that ``SERVERDATA_EXECCOMMAND`` and ``SERVERDATA_AUTH_RESPONSE`` share
the value ``2``; direction disambiguates them.
"""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass

SERVERDATA_AUTH = 3
SERVERDATA_AUTH_RESPONSE = 2
SERVERDATA_EXECCOMMAND = 2
SERVERDATA_RESPONSE_VALUE = 0

# Request id the server uses to signal a rejected password.
AUTH_FAILURE_ID = -1

# id + type + two terminating NULs.
_HEADER = struct.Struct("<ii")
_SIZE = struct.Struct("<i")
_MIN_PACKET_SIZE = _HEADER.size + 2

# Minecraft drops client packets whose body exceeds this many bytes.
MAX_REQUEST_BODY = 1446

# Upper bound accepted from the server (4096 body bytes + header).
MAX_RESPONSE_SIZE = 4096 + _MIN_PACKET_SIZE


class ProtocolError(ValueError):
    """A frame on the wire does not follow the RCON packet layout."""


@dataclass(frozen=True)
class Packet:
    """One decoded RCON packet.

    Attributes:
        request_id:  Correlation id chosen by the client.
        packet_type: One of the ``SERVERDATA_*`` constants.
        body:        Decoded text payload (may be empty).
    """

    request_id: int
    packet_type: int
    body: str = ""


def encode_packet(packet: Packet) -> bytes:
    """Serialise ``packet`` including its size prefix."""
    body = packet.body.encode("utf-8")
    payload = _HEADER.pack(packet.request_id, packet.packet_type) + body + b"\x00\x00"
    return _SIZE.pack(len(payload)) + payload


def decode_packet(payload: bytes) -> Packet:
    """Decode one packet from ``payload`` (the bytes *after* the size field)."""
    if len(payload) < _MIN_PACKET_SIZE:
        raise ProtocolError(f"RCON packet too short ({len(payload)} bytes)")
    if not payload.endswith(b"\x00\x00"):
        raise ProtocolError("RCON packet is missing its NUL terminators")
    request_id, packet_type = _HEADER.unpack_from(payload)
    body = payload[_HEADER.size : -2].decode("utf-8", errors="replace")
    return Packet(request_id=request_id, packet_type=packet_type, body=body)


def _recv_exact(sock: socket.socket, count: int) -> bytes:
    """Read exactly ``count`` bytes, reassembling fragmented TCP reads."""
    chunks: list[bytes] = []
    remaining = count
    while remaining:
        chunk = sock.recv(remaining)
        if not chunk:
            raise ConnectionError("RCON connection closed by server")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_packet(sock: socket.socket) -> Packet:
    """Block until one full packet has arrived on ``sock`` and decode it."""
    (size,) = _SIZE.unpack(_recv_exact(sock, _SIZE.size))
    if not _MIN_PACKET_SIZE <= size <= MAX_RESPONSE_SIZE:
        raise ProtocolError(f"RCON packet size {size} out of range")
    return decode_packet(_recv_exact(sock, size))
