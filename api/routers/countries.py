"""
Countries router — GET /countries
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from api.schemas import CountriesResponse, SelectOption

router = APIRouter(prefix="/countries", tags=["countries"])


@router.get("", response_model=CountriesResponse)
async def get_countries(request: Request) -> CountriesResponse:
    registry = request.app.state.services.registry
    return CountriesResponse(
        supported=registry.supported_countries(),
        options=[SelectOption(label=label, value=value) for label, value in registry.select_options()],
    )
