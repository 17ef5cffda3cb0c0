"""Voice command endpoint."""

import logging

from fastapi import APIRouter, HTTPException

from rcon_bridge.api.models import VoiceRequest
from rcon_bridge.service import VoiceCommandService

logger = logging.getLogger(__name__)


def router(service: VoiceCommandService) -> APIRouter:
    """Build the voice router."""
    api = APIRouter()

    @api.post("/voice")
    def voice(request: VoiceRequest):
        """
        Turn an utterance into console commands and run them.

        Always answers 200 with a PipelineResult body, including for
        validation and execution failures; only an empty utterance is
        rejected with 400. Declared sync so the blocking generator and
        console calls run in the threadpool.
        """
        utterance = request.utterance.strip()
        if not utterance:
            raise HTTPException(status_code=400, detail="utterance is required")

        logger.info("Voice request received (device user %r)", request.device_user)
        result = service.handle(utterance, request.device_user, dry_run=request.dry_run)
        return result.to_dict()

    return api
