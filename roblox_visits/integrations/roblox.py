import time
from typing import Any, Dict, List, Optional
from uuid import uuid4

import httpx

from roblox_visits.core.settings import settings
from roblox_visits.obs import log_event

GAMES_PAGE_LIMIT = 50
# Roblox games API access filters
ACCESS_FILTER_PUBLIC = 1
ACCESS_FILTER_OWNED = 2


class RobloxError(RuntimeError):
    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code}")


def _log(event: str, detail: Dict[str, Any]) -> None:
    log_event(f"roblox.{event}", **detail)


class RobloxClient:
    """Read-only client for the public Roblox games and groups APIs.

    One instance is shared for the lifetime of the app; the underlying
    ``httpx.AsyncClient`` is created on first use and released by ``close``.
    """

    def __init__(
        self,
        games_base: Optional[str] = None,
        groups_base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.games_base = (games_base or settings.games_base_url).rstrip("/")
        self.groups_base = (groups_base or settings.groups_base_url).rstrip("/")
        self.timeout = settings.ROBLOX_TIMEOUT_SEC if timeout is None else timeout
        self.headers = {
            "User-Agent": settings.ROBLOX_USER_AGENT,
            "Accept": "application/json",
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.request_count = 0

    async def _session(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            _log("closed", {"requests": self.request_count})

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        cid = str(uuid4())
        s = await self._session()
        _log("request", {"cid": cid, "method": "GET", "url": url, "params": params})
        start = time.perf_counter()
        self.request_count += 1
        r = await s.get(url, params=params)
        _log(
            "response",
            {"cid": cid, "status": r.status_code, "url": url, "dur_ms": int((time.perf_counter() - start) * 1000)},
        )
        if r.status_code >= 400:
            raise RobloxError(r.status_code, url)
        return r.json()

    # ---------- Games ----------
    async def user_games(self, user_id: str) -> List[Dict[str, Any]]:
        # GET /v2/users/{userId}/games
        js = await self._get_json(
            f"{self.games_base}/v2/users/{user_id}/games",
            {"accessFilter": ACCESS_FILTER_OWNED, "limit": GAMES_PAGE_LIMIT, "sortOrder": "Desc"},
        )
        return js.get("data") or []

    async def group_games(self, group_id: int) -> List[Dict[str, Any]]:
        # GET /v2/groups/{groupId}/games
        js = await self._get_json(
            f"{self.games_base}/v2/groups/{group_id}/games",
            {"accessFilter": ACCESS_FILTER_PUBLIC, "limit": GAMES_PAGE_LIMIT, "sortOrder": "Desc"},
        )
        return js.get("data") or []

    # ---------- Groups ----------
    async def user_group_roles(self, user_id: str) -> List[Dict[str, Any]]:
        """Group memberships with the role the user holds in each.

        Rows look like ``{"group": {"id", "name"}, "role": {"name", ...}}``.
        """
        js = await self._get_json(f"{self.groups_base}/v2/users/{user_id}/groups/roles")
        return js.get("data") or []
