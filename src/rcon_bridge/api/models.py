"""
Pydantic models for API requests and responses.

Request bodies use the camelCase keys voice devices already send
(``deviceUser``, ``dryRun``); snake_case names are accepted as well.
``POST /voice`` returns :meth:`PipelineResult.to_dict` directly, so it has
no response model here.
"""

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# REQUEST MODELS (Client → Server)
# ============================================================================


class VoiceRequest(BaseModel):
    """
    A spoken or typed request from a voice device.

    Attributes:
        utterance: The transcribed request, e.g. "give me 5 bread"
        device_user: (Optional) Speaker identity reported by the device;
            unknown or missing identities target the default player
        dry_run: (Optional) Override the configured dry-run mode for this
            request only
    """

    model_config = ConfigDict(populate_by_name=True)

    utterance: str = ""
    device_user: str | None = Field(default=None, alias="deviceUser")
    dry_run: bool | None = Field(default=None, alias="dryRun")


# ============================================================================
# RESPONSE MODELS (Server → Client)
# ============================================================================


class HealthResponse(BaseModel):
    """Liveness check with the server timestamp in epoch milliseconds."""

    ok: bool
    ts: int
    items_loaded: int


class ItemsResponse(BaseModel):
    """Catalog lookup result."""

    query: str | None = None
    items: list[str]
    total: int


class RconCheckResponse(BaseModel):
    """Outcome of a connectivity probe."""

    success: bool
    command: str
    response: str | None = None
    error: str | None = None
