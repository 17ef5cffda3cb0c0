"""Remote console (RCON) client layer.

protocol.py  Packet codec for the Source RCON wire format.
session.py   ConsoleSession : one authenticated connection; connect, send,
             disconnect.
executor.py  CommandExecutor: runs a batch over a fresh session and always
             disconnects afterwards.
"""

from rcon_bridge.rcon.executor import CommandExecutor
from rcon_bridge.rcon.session import ConsoleSession, make_session_factory

__all__ = ["CommandExecutor", "ConsoleSession", "make_session_factory"]
