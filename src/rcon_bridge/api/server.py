"""
FastAPI backend server for the RCON bridge.

This module builds the FastAPI application that voice devices call. It:
- Wires the VoiceCommandService (catalog, player resolver, generator,
  pipeline) from configuration
- Registers all API route endpoints

The app is built by a factory rather than at import time, because building
the service loads the item catalog and requires an RCON password. Tests pass
their own service; ``start_server`` builds one from ``rcon_bridge.config``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from rcon_bridge import __version__
from rcon_bridge.api.routes import register_routes
from rcon_bridge.config import BridgeConfig
from rcon_bridge.service import VoiceCommandService, build_service

logger = logging.getLogger(__name__)


def create_app(service: VoiceCommandService) -> FastAPI:
    """Create the FastAPI app around an already-built service."""
    app = FastAPI(title="RCON Bridge", version=__version__)
    app.state.service = service
    register_routes(app, service)
    return app


def start_server(cfg: BridgeConfig, host: str | None = None, port: int | None = None) -> None:
    """Build the service from ``cfg`` and serve it with uvicorn.

    Raises:
        ConfigurationError: RCON password or default player missing.
        CatalogLoadError:   The item catalog cannot be read.
    """
    import uvicorn

    service = build_service(cfg)
    app = create_app(service)

    bind_host = host or cfg.server.host
    bind_port = port or cfg.server.port
    logger.info(
        "Starting RCON bridge on %s:%d (rcon=%s:%d, dry_run=%s)",
        bind_host,
        bind_port,
        cfg.rcon.host,
        cfg.rcon.port,
        cfg.pipeline.dry_run,
    )
    uvicorn.run(app, host=bind_host, port=bind_port, log_config=None)
