"""Voice command service.

``VoiceCommandService`` is the single public entry-point used by the HTTP
routes and the CLI.  It orchestrates the collaborators for one utterance:

1. :class:`~rcon_bridge.players.PlayerResolver` maps the caller to a username.
2. :class:`~rcon_bridge.nlp.generator.OllamaCommandGenerator` turns the
   utterance into commands and requested items.
3. :class:`~rcon_bridge.pipeline.CommandPipeline` validates and executes.

Caller contract
---------------
:meth:`VoiceCommandService.handle` always returns a
:class:`~rcon_bridge.types.PipelineResult`.  A generator failure becomes
``success=False`` with message ``"Voice pipeline failed"`` and the reason
in ``error``; it never propagates.

Startup
-------
:func:`build_service` wires everything from a :class:`~rcon_bridge.config.BridgeConfig`.
It is the one place allowed to fail the process: a missing RCON password or
default player raises :class:`~rcon_bridge.errors.ConfigurationError`, and an
unreadable catalog raises :class:`~rcon_bridge.errors.CatalogLoadError`.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from rcon_bridge.catalog import ItemCatalog, ItemValidator
from rcon_bridge.config import BridgeConfig
from rcon_bridge.errors import ConsoleError, GenerationError
from rcon_bridge.nlp import OllamaCommandGenerator
from rcon_bridge.pipeline import CommandPipeline
from rcon_bridge.players import PlayerResolver
from rcon_bridge.rcon import CommandExecutor, make_session_factory
from rcon_bridge.rcon.executor import SessionFactory
from rcon_bridge.types import GeneratedCommands, PipelineResult

logger = logging.getLogger(__name__)


class CommandGenerator(Protocol):
    def generate(self, utterance: str, target_player: str) -> GeneratedCommands: ...


class VoiceCommandService:
    """Handles one utterance end to end.

    Attributes:
        catalog:   The shared, read-only item catalog.
        resolver:  Device user to username lookup.
        generator: Natural-language command generator.
        pipeline:  Validation and execution pipeline.
    """

    def __init__(
        self,
        *,
        catalog: ItemCatalog,
        resolver: PlayerResolver,
        generator: CommandGenerator,
        pipeline: CommandPipeline,
        session_factory: SessionFactory,
    ) -> None:
        self.catalog = catalog
        self.resolver = resolver
        self.generator = generator
        self.pipeline = pipeline
        self._session_factory = session_factory

    def handle(
        self,
        utterance: str,
        device_user: str | None = None,
        *,
        dry_run: bool | None = None,
    ) -> PipelineResult:
        """Resolve, generate, validate, and (unless dry-run) execute."""
        is_dry_run = self.pipeline.dry_run if dry_run is None else dry_run
        target_player = self.resolver.resolve(device_user)
        logger.info(
            "Voice request: %r (device user %r -> %s, dry_run=%s)",
            utterance,
            device_user,
            target_player,
            is_dry_run,
        )

        try:
            generated = self.generator.generate(utterance, target_player)
        except GenerationError as exc:
            logger.error("Voice pipeline failed: %s", exc)
            return PipelineResult(
                success=False,
                message="Voice pipeline failed",
                dry_run=is_dry_run,
                target_player=target_player,
                error=str(exc),
            )

        result = self.pipeline.run(generated, dry_run=is_dry_run, target_player=target_player)
        logger.info("Voice request finished: success=%s message=%r", result.success, result.message)
        return result

    def check_rcon(self, command: str = "list") -> dict[str, Any]:
        """Connect, run one command, and report the reply or the failure."""
        session = self._session_factory()
        try:
            session.connect()
            response = session.send(command)
        except ConsoleError as exc:
            return {"success": False, "command": command, "error": str(exc)}
        finally:
            session.disconnect()
        return {"success": True, "command": command, "response": response}


def build_service(cfg: BridgeConfig) -> VoiceCommandService:
    """Construct a fully wired service from configuration.

    Raises:
        ConfigurationError: RCON password or default player missing.
        CatalogLoadError:   The item catalog file cannot be read.
    """
    session_factory = make_session_factory(cfg.rcon)
    resolver = PlayerResolver.from_settings(cfg.players)

    catalog = ItemCatalog()
    catalog.load(cfg.catalog.absolute_path)

    pipeline = CommandPipeline(
        validator=ItemValidator(catalog),
        executor=CommandExecutor(session_factory),
        dry_run=cfg.pipeline.dry_run,
    )
    return VoiceCommandService(
        catalog=catalog,
        resolver=resolver,
        generator=OllamaCommandGenerator.from_settings(cfg.nlp),
        pipeline=pipeline,
        session_factory=session_factory,
    )
