from __future__ import annotations

import datetime as dt
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

VISITS_NOTE = "Using placeVisits from games API. For exact universe visits, add Roblox Cloud API key."


class GroupMembership(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: int
    group_name: str
    role_name: str

    @classmethod
    def from_api(cls, row: Dict[str, Any]) -> "GroupMembership":
        """Build from a ``/v2/users/{id}/groups/roles`` row.

        Raises ``KeyError``/``TypeError`` when ``group`` or ``role`` is absent.
        """
        group = row["group"]
        return cls(group_id=group["id"], group_name=group.get("name") or "", role_name=row["role"]["name"])


class VisitSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    personal_visits: int = 0
    group_visits: int = 0
    personal_game_count: int = 0
    group_game_count: int = 0
    total_visits: int = 0
    timestamp: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    @model_validator(mode="after")
    def _check_total(self) -> "VisitSummary":
        if self.total_visits != self.personal_visits + self.group_visits:
            raise ValueError("total_visits must equal personal_visits + group_visits")
        return self

    @classmethod
    def build(
        cls,
        personal_visits: int,
        group_visits: int,
        personal_game_count: int,
        group_game_count: int,
    ) -> "VisitSummary":
        return cls(
            personal_visits=personal_visits,
            group_visits=group_visits,
            personal_game_count=personal_game_count,
            group_game_count=group_game_count,
            total_visits=personal_visits + group_visits,
        )

    @property
    def total_games(self) -> int:
        return self.personal_game_count + self.group_game_count

    @property
    def iso_timestamp(self) -> str:
        # 2024-01-02T03:04:05.678Z, matching JavaScript's Date.toISOString
        return self.timestamp.astimezone(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VisitBreakdown(_CamelModel):
    personal_visits: int
    group_visits: int
    total_games: int
    personal_games: int
    group_games: int


class VisitsEnvelope(_CamelModel):
    success: bool = True
    total_visits: int
    breakdown: VisitBreakdown
    note: str = VISITS_NOTE
    timestamp: str

    @classmethod
    def from_summary(cls, summary: VisitSummary) -> "VisitsEnvelope":
        return cls(
            total_visits=summary.total_visits,
            breakdown=VisitBreakdown(
                personal_visits=summary.personal_visits,
                group_visits=summary.group_visits,
                total_games=summary.total_games,
                personal_games=summary.personal_game_count,
                group_games=summary.group_game_count,
            ),
            timestamp=summary.iso_timestamp,
        )


class ValidationErrorBody(BaseModel):
    error: str
    usage: str | None = None


class FailureBody(_CamelModel):
    success: bool = False
    error: str
    details: str
    user_id: str
