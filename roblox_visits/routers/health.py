from fastapi import APIRouter, Depends

from roblox_visits.core.settings import HealthStatus
from roblox_visits.dependencies import get_visit_cache
from roblox_visits.schemas.visits import VisitSummary
from roblox_visits.utils.cache import MemoCache

router = APIRouter()


@router.get("/healthz", response_model=HealthStatus)
def healthz(cache: MemoCache[VisitSummary] = Depends(get_visit_cache)) -> HealthStatus:
    return HealthStatus(status="ok", cache_entries=len(cache))
