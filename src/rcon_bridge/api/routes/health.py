"""Health and root endpoints.

Provides the root ``/`` endpoint (API identity and version) and the
``/healthz`` endpoint (liveness check with the catalog size).
"""

import time

from fastapi import APIRouter

from rcon_bridge import __version__
from rcon_bridge.api.models import HealthResponse
from rcon_bridge.service import VoiceCommandService


def router(service: VoiceCommandService) -> APIRouter:
    """Build the health router."""
    api = APIRouter()

    @api.get("/")
    async def root():
        """Root endpoint showing API identity and current version."""
        return {"message": "RCON Bridge API", "version": __version__}

    @api.get("/healthz", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            ok=True,
            ts=int(time.time() * 1000),
            items_loaded=len(service.catalog) if service.catalog.is_loaded else 0,
        )

    return api
