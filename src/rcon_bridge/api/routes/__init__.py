"""API route registration.

Each module exposes ``router(service) -> APIRouter``; :func:`register_routes`
mounts them all on the app.
"""

from fastapi import FastAPI

from rcon_bridge.api.routes import health, items, rcon, voice
from rcon_bridge.service import VoiceCommandService


def register_routes(app: FastAPI, service: VoiceCommandService) -> None:
    """Register all API routes with the FastAPI app."""
    app.include_router(health.router(service))
    app.include_router(voice.router(service))
    app.include_router(items.router(service))
    app.include_router(rcon.router(service))
