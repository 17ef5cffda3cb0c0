"""Item catalog lookup endpoint."""

from fastapi import APIRouter, Query

from rcon_bridge.api.models import ItemsResponse
from rcon_bridge.service import VoiceCommandService


def router(service: VoiceCommandService) -> APIRouter:
    """Build the catalog router."""
    api = APIRouter()

    @api.get("/items", response_model=ItemsResponse)
    async def list_items(
        q: str | None = Query(default=None, description="Name to look up"),
        limit: int = Query(default=20, ge=1, le=500),
    ):
        """
        Look up catalog entries.

        With ``q``: the exact entry if it exists, otherwise suggestions.
        Without ``q``: the first ``limit`` entries in sorted order.
        """
        catalog = service.catalog
        if q:
            items = [q.lower()] if catalog.contains(q) else catalog.suggest(q, limit)
        else:
            items = catalog.items()[:limit]
        return ItemsResponse(query=q, items=items, total=len(catalog))

    return api
