"""Batch command executor.

``CommandExecutor.execute_all`` drives one :class:`ConsoleSession` through
an ordered list of commands and reports a single
:class:`~rcon_bridge.types.ExecutionOutcome`.

Guarantees
----------
- Exactly one fresh session per call, built by the injected factory.
  Sessions are never reused across calls.
- A failed ``connect`` yields ``success=False``, no responses, and one
  error; no command is sent.
- A failed command records one error and the batch moves on.
- ``disconnect`` runs exactly once on every exit path, including an
  unexpected exception escaping the loop.
- Responses and errors are recorded strictly in input order; commands are
  never dispatched in parallel.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from rcon_bridge.errors import ConsoleError
from rcon_bridge.rcon.session import ConsoleSession
from rcon_bridge.types import ExecutionOutcome

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ConsoleSession]


class CommandExecutor:
    """Runs command batches against fresh console sessions."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def execute_all(self, commands: Iterable[str]) -> ExecutionOutcome:
        """Execute ``commands`` in order over one connect/disconnect cycle."""
        session = self._session_factory()
        responses: list[str] = []
        errors: list[str] = []

        try:
            try:
                session.connect()
            except ConsoleError as exc:
                logger.warning("RCON connection failed: %s", exc)
                return ExecutionOutcome(errors=(f"RCON connection failed: {exc}",))

            for command in commands:
                try:
                    responses.append(session.send(command))
                except ConsoleError as exc:
                    logger.warning("RCON command %r failed: %s", command, exc)
                    errors.append(f'Command "{command}" failed: {exc}')
        finally:
            session.disconnect()

        return ExecutionOutcome(responses=tuple(responses), errors=tuple(errors))
