import os

from pydantic import BaseModel


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    # Core
    APP_NAME: str = os.getenv("APP_NAME", "Roblox Visits API")
    APP_ENV: str = os.getenv("APP_ENV", "prod")  # prod|dev|test
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Upstream Roblox web APIs (public, no key required)
    ROBLOX_GAMES_BASE: str = os.getenv("ROBLOX_GAMES_BASE", "https://games.roblox.com")
    ROBLOX_GROUPS_BASE: str = os.getenv("ROBLOX_GROUPS_BASE", "https://groups.roblox.com")
    ROBLOX_TIMEOUT_SEC: float = float(os.getenv("ROBLOX_TIMEOUT_SEC", "10"))
    ROBLOX_USER_AGENT: str = os.getenv(
        "ROBLOX_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )

    # Memo cache
    VISITS_CACHE_TTL_SEC: float = float(os.getenv("VISITS_CACHE_TTL_SEC", "300"))
    VISITS_CACHE_MAX: int = int(os.getenv("VISITS_CACHE_MAX", "100"))

    # Aggregation
    GROUP_FETCH_CONCURRENCY: int = int(os.getenv("GROUP_FETCH_CONCURRENCY", "4"))

    # Observability
    METRICS_ENABLED: bool = _env_bool("METRICS_ENABLED", "true")

    @property
    def games_base_url(self) -> str:
        """Games API host without a trailing slash."""
        return self.ROBLOX_GAMES_BASE.rstrip("/")

    @property
    def groups_base_url(self) -> str:
        return self.ROBLOX_GROUPS_BASE.rstrip("/")


settings = Settings()


class HealthStatus(BaseModel):
    status: str
    cache_entries: int
