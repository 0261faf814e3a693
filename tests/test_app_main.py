import pytest
from fastapi.testclient import TestClient

from roblox_visits.dependencies import get_roblox_client
from roblox_visits.main import app, create_app
from roblox_visits.utils.cache import MemoCache


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_health_mounted(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_metrics_exposed(client):
    r = client.get("/metrics")
    assert r.status_code == 200


def test_default_cache_from_settings():
    cache = app.state.visit_cache
    assert isinstance(cache, MemoCache)
    assert cache.ttl == 300
    assert cache.max_entries == 100


def test_apps_get_isolated_caches():
    a = create_app(metrics=False)
    b = create_app(metrics=False)
    assert a.state.visit_cache is not b.state.visit_cache


def test_unhandled_error_has_cors_headers():
    test_app = create_app(metrics=False)

    def broken_client():
        raise RuntimeError("client unavailable")

    test_app.dependency_overrides[get_roblox_client] = broken_client
    with TestClient(test_app, raise_server_exceptions=False) as c:
        r = c.get("/api/get-visits?userId=1")

    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "RuntimeError", "details": "client unavailable"}
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.headers["access-control-allow-methods"] == "GET, OPTIONS"
    assert r.headers["access-control-allow-headers"] == "Content-Type"


def test_unknown_route_has_cors_headers(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.headers["access-control-allow-origin"] == "*"
