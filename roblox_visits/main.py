from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from roblox_visits.core.settings import settings
from roblox_visits.integrations.roblox import RobloxClient
from roblox_visits.middleware.cors import CORS_HEADERS, OpenCorsMiddleware
from roblox_visits.middleware.logging import RequestLogMiddleware
from roblox_visits.obs import configure_logging, log_event
from roblox_visits.routers.health import router as health_router
from roblox_visits.routers.visits import router as visits_router
from roblox_visits.schemas.visits import VisitSummary
from roblox_visits.utils.cache import MemoCache


def create_app(
    cache: Optional[MemoCache[VisitSummary]] = None,
    client: Optional[RobloxClient] = None,
    metrics: Optional[bool] = None,
) -> FastAPI:
    """Build the API with its own cache and upstream client.

    Tests pass their own ``cache``/``client`` to get isolated instances.
    """
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)
    app.state.visit_cache = cache if cache is not None else MemoCache(
        ttl=settings.VISITS_CACHE_TTL_SEC,
        max_entries=settings.VISITS_CACHE_MAX,
    )
    app.state.roblox_client = client if client is not None else RobloxClient()

    @app.exception_handler(Exception)
    async def all_exception_handler(request: Request, exc: Exception):
        log_event("app.unhandled", level="error", path=request.url.path, error=type(exc).__name__, detail=str(exc))
        # Served outside the middleware stack, so the CORS headers are set here
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": type(exc).__name__, "details": str(exc)},
            headers=CORS_HEADERS,
        )

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await app.state.roblox_client.close()

    # Last added runs first: request ids are assigned before CORS short-circuits preflights
    app.add_middleware(OpenCorsMiddleware)
    app.add_middleware(RequestLogMiddleware)

    app.include_router(health_router)
    app.include_router(visits_router)

    if metrics is None:
        metrics = settings.METRICS_ENABLED
    # Expose /metrics for Prometheus
    if metrics:
        Instrumentator().instrument(app).expose(app)

    return app


app = create_app()
