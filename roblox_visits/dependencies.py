from fastapi import Request

from roblox_visits.integrations.roblox import RobloxClient
from roblox_visits.schemas.visits import VisitSummary
from roblox_visits.utils.cache import MemoCache


def get_visit_cache(request: Request) -> MemoCache[VisitSummary]:
    """The app-scoped memo cache created by ``create_app``."""
    return request.app.state.visit_cache


def get_roblox_client(request: Request) -> RobloxClient:
    return request.app.state.roblox_client
