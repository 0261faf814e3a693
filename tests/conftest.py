import os
import sys
from typing import Any, Dict, List, Tuple, Union

import httpx
import pytest

# Ensure repository root is on sys.path so `import roblox_visits` works under pytest
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from roblox_visits.integrations.roblox import RobloxClient  # noqa: E402


class FakeRoblox:
    """Canned Roblox API keyed by URL path, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: Dict[str, Union[Tuple[int, Any], Exception]] = {}
        self.calls: List[httpx.Request] = []

    def games(self, path: str, visits: List[Any], status: int = 200) -> None:
        self.routes[path] = (status, {"data": [{"placeVisits": v} for v in visits]})

    def respond(self, path: str, body: Any, status: int = 200) -> None:
        self.routes[path] = (status, body)

    def fail(self, path: str, exc: Exception) -> None:
        self.routes[path] = exc

    def paths(self) -> List[str]:
        return [r.url.path for r in self.calls]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"errors": [{"code": 0, "message": "NotFound"}]})
        if isinstance(route, Exception):
            raise route
        status, body = route
        return httpx.Response(status, json=body)

    def client(self) -> RobloxClient:
        return RobloxClient(
            games_base="https://games.roblox.com",
            groups_base="https://groups.roblox.com",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def upstream() -> FakeRoblox:
    return FakeRoblox()
