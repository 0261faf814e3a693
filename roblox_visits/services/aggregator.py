"""Visit aggregation across a user's own games and their developer groups.

Each upstream branch fails open: a failed call is logged and contributes
nothing, the remaining branches still run. Only errors outside the guarded
fetches (for example a membership row without a role) escape to the caller.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from roblox_visits.core.settings import settings
from roblox_visits.obs import log_event
from roblox_visits.schemas.visits import GroupMembership, VisitSummary
from roblox_visits.services.roles import developer_memberships


class VisitsSource(Protocol):
    async def user_games(self, user_id: str) -> List[Dict[str, Any]]: ...

    async def user_group_roles(self, user_id: str) -> List[Dict[str, Any]]: ...

    async def group_games(self, group_id: int) -> List[Dict[str, Any]]: ...


def fold_visits(games: Iterable[Dict[str, Any]]) -> Tuple[int, int]:
    """Return ``(visits, game_count)``; a missing ``placeVisits`` counts as 0."""
    visits = 0
    count = 0
    for game in games:
        visits += int(game.get("placeVisits") or 0)
        count += 1
    return visits, count


async def _personal_totals(source: VisitsSource, user_id: str) -> Tuple[int, int]:
    try:
        games = await source.user_games(user_id)
        totals = fold_visits(games)
    except Exception as e:
        log_event("visits.personal_games_failed", level="warning", user_id=user_id, error=str(e))
        return 0, 0
    log_event("visits.personal_games", user_id=user_id, games=totals[1])
    return totals


async def _group_rows(source: VisitsSource, user_id: str) -> List[Dict[str, Any]]:
    try:
        rows = await source.user_group_roles(user_id)
    except Exception as e:
        log_event("visits.groups_failed", level="warning", user_id=user_id, error=str(e))
        return []
    log_event("visits.groups", user_id=user_id, groups=len(rows))
    return rows


async def _group_totals(source: VisitsSource, membership: GroupMembership, sem: asyncio.Semaphore) -> Tuple[int, int]:
    log_event(
        "visits.developer_role",
        group_id=membership.group_id,
        group_name=membership.group_name,
        role=membership.role_name,
    )
    async with sem:
        try:
            games = await source.group_games(membership.group_id)
            totals = fold_visits(games)
        except Exception as e:
            log_event("visits.group_games_failed", level="warning", group_id=membership.group_id, error=str(e))
            return 0, 0
    log_event("visits.group_games", group_id=membership.group_id, games=totals[1])
    return totals


async def aggregate_visits(
    source: VisitsSource,
    user_id: str,
    *,
    concurrency: Optional[int] = None,
) -> VisitSummary:
    """Sum place visits over the user's games and their developer groups' games.

    Group game listings are fetched concurrently, at most ``concurrency`` at a
    time (``GROUP_FETCH_CONCURRENCY`` by default).
    """
    log_event("visits.fetch", user_id=user_id)

    personal_visits, personal_games = await _personal_totals(source, user_id)

    rows = await _group_rows(source, user_id)
    qualifying = developer_memberships(rows)

    limit = concurrency if concurrency is not None else settings.GROUP_FETCH_CONCURRENCY
    sem = asyncio.Semaphore(max(1, limit))
    per_group = await asyncio.gather(*(_group_totals(source, m, sem) for m in qualifying))

    group_visits = sum(visits for visits, _ in per_group)
    group_games = sum(count for _, count in per_group)

    summary = VisitSummary.build(
        personal_visits=personal_visits,
        group_visits=group_visits,
        personal_game_count=personal_games,
        group_game_count=group_games,
    )
    log_event(
        "visits.total",
        user_id=user_id,
        total_visits=summary.total_visits,
        total_games=summary.total_games,
        developer_groups=len(qualifying),
    )
    return summary
