"""Mock facilities API: Porto Velho health units filtered by neighborhood.

Example: ``GET /postos-saude?bairro=centro``
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from saude_bot.facilities.directory import HealthUnit, units_in_neighborhood

router = APIRouter()


@router.get("/postos-saude", response_model=list[HealthUnit])
async def list_health_units(
    bairro: str | None = Query(None, description="Neighborhood to filter by"),
):
    """All units, or only those in ``bairro`` (case and accent insensitive)."""
    return units_in_neighborhood(bairro)
