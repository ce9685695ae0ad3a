from __future__ import annotations

import secrets
import string
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType


class Seat(str, Enum):
    BOX = "box"
    CAPTAIN = "captain"


class SessionMode(str, Enum):
    SETUP = "setup"
    GAME = "game"


def _frozen_map(values: Mapping[str, object] | None) -> Mapping:
    return MappingProxyType(dict(values or {}))


def generate_id(prefix: str) -> str:
    """Return ``<prefix>_<epoch millis>_<9 base36 chars>``."""

    alphabet = string.ascii_lowercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Player:
    id: str
    name: str
    total_score: int = 0
    games_played: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class SetupSeating:
    """Seat assignment while the chouette is still being set up."""

    box_player_id: str | None = None
    captain_player_id: str | None = None
    queue: tuple[str, ...] = ()

    @property
    def mode(self) -> SessionMode:
        return SessionMode.SETUP

    @property
    def seated_ids(self) -> tuple[str, ...]:
        seats = (self.box_player_id, self.captain_player_id)
        return tuple(pid for pid in seats if pid is not None) + self.queue


@dataclass(frozen=True)
class GameSeating:
    """Seating of a running chouette; Box and Captain are always filled.

    ``scores`` and ``sitting_out`` are keyed by player id and hold exactly one
    entry per seated player.
    """

    box_player_id: str
    captain_player_id: str
    queue: tuple[str, ...] = ()
    scores: Mapping[str, int] = field(default_factory=dict)
    sitting_out: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "queue", tuple(self.queue))
        object.__setattr__(self, "scores", _frozen_map(self.scores))
        object.__setattr__(self, "sitting_out", _frozen_map(self.sitting_out))

    @property
    def mode(self) -> SessionMode:
        return SessionMode.GAME

    @property
    def seated_ids(self) -> tuple[str, ...]:
        return (self.box_player_id, self.captain_player_id) + self.queue

    def is_sitting_out(self, player_id: str) -> bool:
        return bool(self.sitting_out.get(player_id, False))

    def active_queue(self) -> tuple[str, ...]:
        return tuple(pid for pid in self.queue if not self.is_sitting_out(pid))

    def inactive_queue(self) -> tuple[str, ...]:
        return tuple(pid for pid in self.queue if self.is_sitting_out(pid))


Seating = SetupSeating | GameSeating


@dataclass(frozen=True)
class Session:
    id: str
    created_at: datetime
    seating: Seating = field(default_factory=SetupSeating)
    is_complete: bool = False

    @property
    def mode(self) -> SessionMode:
        return self.seating.mode

    @property
    def box_player_id(self) -> str | None:
        return self.seating.box_player_id

    @property
    def captain_player_id(self) -> str | None:
        return self.seating.captain_player_id

    @property
    def queue(self) -> tuple[str, ...]:
        return self.seating.queue

    @property
    def seated_ids(self) -> tuple[str, ...]:
        return self.seating.seated_ids

    @property
    def current_scores(self) -> dict[str, int]:
        if isinstance(self.seating, GameSeating):
            return dict(self.seating.scores)
        return {}

    @property
    def sitting_out(self) -> dict[str, bool]:
        if isinstance(self.seating, GameSeating):
            return dict(self.seating.sitting_out)
        return {}

    def is_seated(self, player_id: str) -> bool:
        return player_id in self.seated_ids


def zeroed(player_ids: Iterable[str]) -> tuple[dict[str, int], dict[str, bool]]:
    """Fresh score and sitting-out maps for ``player_ids``."""

    ids = list(player_ids)
    return {pid: 0 for pid in ids}, {pid: False for pid in ids}
