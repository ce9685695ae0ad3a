from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...core.models import Seat

__all__ = [
    "EndResult",
    "PlayerPayload",
    "QueueRequest",
    "RotationPayload",
    "ScoreRequest",
    "ScoreResult",
    "SeatPayload",
    "SeatRequest",
    "SessionPayload",
    "StartRequest",
    "CreatePlayerRequest",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PlayerPayload(_APIModel):
    id: str
    name: str
    total_score: int
    games_played: int


class SeatPayload(_APIModel):
    player_id: str
    name: str
    score: int = 0
    sitting_out: bool = False


class SessionPayload(_APIModel):
    id: str
    mode: str
    is_complete: bool
    policy: str
    box: SeatPayload | None = None
    captain: SeatPayload | None = None
    queue: list[SeatPayload] = Field(default_factory=list)
    participants: list[str] = Field(default_factory=list)
    scores: dict[str, int] = Field(default_factory=dict)


class RotationPayload(_APIModel):
    outcome: str
    box_player_id: str
    captain_player_id: str
    queue: list[str]


class ScoreResult(_APIModel):
    applied: dict[str, int]
    rotation: RotationPayload
    session: SessionPayload


class EndResult(_APIModel):
    final_scores: dict[str, int]
    session: SessionPayload


class SeatRequest(_APIModel):
    seat: Seat
    player_id: str | None = None


class QueueRequest(_APIModel):
    player_ids: list[str]


class StartRequest(_APIModel):
    box_player_id: str | None = None
    captain_player_id: str | None = None
    queue_player_ids: list[str] | None = None


class ScoreRequest(_APIModel):
    scores: dict[str, int]


class CreatePlayerRequest(_APIModel):
    name: str
