"""Persisted layouts for the session and roster records."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ..core.models import GameSeating, Player, Session, SessionMode, SetupSeating, utcnow


class _RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SessionRecord(_RecordModel):
    id: str
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    mode: SessionMode = Field(SessionMode.SETUP, validation_alias=AliasChoices("mode", "gameMode"))
    is_complete: bool = Field(False, alias="isComplete")
    box_player_id: str | None = Field(None, alias="boxPlayerId")
    captain_player_id: str | None = Field(
        None,
        alias="captainPlayerId",
        validation_alias=AliasChoices("captainPlayerId", "teamCaptainPlayerId"),
    )
    queue_player_ids: list[str] = Field(
        default_factory=list,
        alias="queuePlayerIds",
        validation_alias=AliasChoices("queuePlayerIds", "teamPlayerIds"),
    )
    current_scores: dict[str, int] = Field(default_factory=dict, alias="currentChouetteScores")
    sitting_out: dict[str, bool] = Field(default_factory=dict, alias="playersSittingOut")

    @model_validator(mode="after")
    def _check_seating(self) -> SessionRecord:
        seats = [pid for pid in (self.box_player_id, self.captain_player_id) if pid is not None]
        seated = seats + self.queue_player_ids
        if len(set(seated)) != len(seated):
            raise ValueError("a player occupies more than one seat")
        if self.mode is SessionMode.GAME and len(seats) != 2:
            raise ValueError("a game record needs both a Box and a Captain")
        return self

    @classmethod
    def from_session(cls, session: Session) -> SessionRecord:
        return cls(
            id=session.id,
            created_at=session.created_at,
            mode=session.mode,
            is_complete=session.is_complete,
            box_player_id=session.box_player_id,
            captain_player_id=session.captain_player_id,
            queue_player_ids=list(session.queue),
            current_scores=session.current_scores,
            sitting_out=session.sitting_out,
        )

    def to_session(self) -> Session:
        queue = tuple(self.queue_player_ids)
        if self.mode is SessionMode.GAME:
            assert self.box_player_id is not None and self.captain_player_id is not None
            seated = (self.box_player_id, self.captain_player_id, *queue)
            seating: SetupSeating | GameSeating = GameSeating(
                box_player_id=self.box_player_id,
                captain_player_id=self.captain_player_id,
                queue=queue,
                scores={pid: self.current_scores.get(pid, 0) for pid in seated},
                sitting_out={pid: self.sitting_out.get(pid, False) for pid in seated},
            )
        else:
            seating = SetupSeating(
                box_player_id=self.box_player_id,
                captain_player_id=self.captain_player_id,
                queue=queue,
            )
        return Session(id=self.id, created_at=self.created_at, seating=seating, is_complete=self.is_complete)


class PlayerRecord(_RecordModel):
    id: str
    name: str
    total_score: int = Field(0, alias="totalScore")
    games_played: int = Field(0, alias="gamesPlayed")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    @classmethod
    def from_player(cls, player: Player) -> PlayerRecord:
        return cls(
            id=player.id,
            name=player.name,
            total_score=player.total_score,
            games_played=player.games_played,
            created_at=player.created_at,
        )

    def to_player(self) -> Player:
        return Player(
            id=self.id,
            name=self.name,
            total_score=self.total_score,
            games_played=self.games_played,
            created_at=self.created_at,
        )
