from __future__ import annotations

from typing import Any, Dict, Iterable, List

from roblox_visits.schemas.visits import GroupMembership

# Substrings of a lowercased group role name that mark it as developer tier.
DEVELOPER_ROLES = (
    "developer",
    "builder",
    "scripter",
    "programmer",
    "lead developer",
    "co-owner",
    "owner",
    "dev",
    "game developer",
    "lead scripter",
    "head developer",
)


def is_developer_role(role_name: str | None) -> bool:
    """Case-insensitive substring match against ``DEVELOPER_ROLES``."""
    lower = (role_name or "").lower()
    return any(role in lower for role in DEVELOPER_ROLES)


def developer_memberships(rows: Iterable[Dict[str, Any]]) -> List[GroupMembership]:
    """Parse the developer-tier rows of a ``/groups/roles`` listing.

    Only ``role.name`` is read before filtering, so a broken ``group`` on a
    skipped row is ignored. A row without a role raises ``KeyError``/``TypeError``.
    """
    out: List[GroupMembership] = []
    for row in rows:
        if not is_developer_role(row["role"]["name"]):
            continue
        out.append(GroupMembership.from_api(row))
    return out
