from __future__ import annotations

import re
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from roblox_visits.dependencies import get_roblox_client, get_visit_cache
from roblox_visits.integrations.roblox import RobloxClient
from roblox_visits.obs import log_event
from roblox_visits.schemas.visits import FailureBody, ValidationErrorBody, VisitsEnvelope, VisitSummary
from roblox_visits.services.aggregator import aggregate_visits
from roblox_visits.utils.cache import MemoCache

router = APIRouter(prefix="/api", tags=["visits"])

USAGE = "GET /api/get-visits?userId=123456"
_NUMERIC = re.compile(r"[0-9]+")


def cache_key(user_id: str) -> str:
    return f"visits_{user_id}"


def _bad_request(error: str, usage: Optional[str] = None) -> JSONResponse:
    body = ValidationErrorBody(error=error, usage=usage)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


@router.get(
    "/get-visits",
    response_model=VisitsEnvelope,
    responses={400: {"model": ValidationErrorBody}, 500: {"model": FailureBody}},
)
@router.get("/visits", response_model=VisitsEnvelope, include_in_schema=False)
async def get_visits(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    cache: MemoCache[VisitSummary] = Depends(get_visit_cache),
    client: RobloxClient = Depends(get_roblox_client),
) -> Union[VisitsEnvelope, JSONResponse]:
    """Total place visits for a user's own games plus their developer groups' games."""
    if not user_id:
        return _bad_request("Missing userId parameter", usage=USAGE)
    if not _NUMERIC.fullmatch(user_id):
        return _bad_request("Invalid userId - must be numeric")

    key = cache_key(user_id)
    cached = cache.get(key)
    if cached is not None:
        log_event("visits.cache_hit", user_id=user_id)
        return VisitsEnvelope.from_summary(cached)

    try:
        summary = await aggregate_visits(client, user_id)
    except Exception as e:
        log_event("visits.fatal", level="error", user_id=user_id, error=type(e).__name__, detail=str(e))
        body = FailureBody(error="Failed to fetch visit data", details=str(e), user_id=user_id)
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))

    evicted = cache.put(key, summary)
    if evicted:
        log_event("visits.cache_evict", key=evicted)
    return VisitsEnvelope.from_summary(summary)
