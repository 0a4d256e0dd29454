"""
Banks router — GET /banks?country_code=us
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from api.request_info import remote_ip, request_id
from api.schemas import BankCheckResponse

router = APIRouter(prefix="/banks", tags=["banks"])


@router.get("", response_model=BankCheckResponse)
async def get_bank_status(
    request: Request,
    country_code: str | None = Query(default=None, pattern=r"^\s*([A-Za-z]{2})?\s*$"),
) -> BankCheckResponse:
    orchestrator = request.app.state.services.orchestrator
    result = await orchestrator.handle(
        country_code,
        remote_ip(request),
        correlation_id=request_id(request),
    )
    return BankCheckResponse.from_result(result)
