"""Remote console diagnostics endpoint."""

from fastapi import APIRouter

from rcon_bridge.api.models import RconCheckResponse
from rcon_bridge.service import VoiceCommandService

# Read-only probe; this endpoint never runs caller-supplied commands.
PROBE_COMMAND = "list"


def router(service: VoiceCommandService) -> APIRouter:
    """Build the RCON diagnostics router."""
    api = APIRouter()

    @api.get("/rcon/check", response_model=RconCheckResponse)
    def check():
        """Connect to the console, run ``list``, and disconnect."""
        return RconCheckResponse(**service.check_rcon(PROBE_COMMAND))

    return api
