from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import InvalidScoreError, InvalidStateError, NotSeatedError, UnbalancedScoreError
from .models import GameSeating

# Doubling cube progression including gammons (2x) and backgammons (3x).
CUBE_VALUES: tuple[int, ...] = (
    -192, -128, -96, -64, -48, -32, -24, -16, -12, -8, -6, -4, -3, -2, -1,
    1, 2, 3, 4, 6, 8, 12, 16, 24, 32, 48, 64, 96, 128, 192,
)
DEFAULT_CUBE_VALUE = 1


class PolicyName(str, Enum):
    ZERO_SUM = "zero_sum"
    CUBE = "cube"


def cube_step_up(value: int) -> int:
    if value not in CUBE_VALUES:
        return DEFAULT_CUBE_VALUE
    index = CUBE_VALUES.index(value)
    return CUBE_VALUES[min(index + 1, len(CUBE_VALUES) - 1)]


def cube_step_down(value: int) -> int:
    if value not in CUBE_VALUES:
        return DEFAULT_CUBE_VALUE
    index = CUBE_VALUES.index(value)
    return CUBE_VALUES[max(index - 1, 0)]


def participants(seating: GameSeating) -> list[str]:
    """Team members eligible for the next score entry: Captain first, then queue order."""

    team = [seating.captain_player_id, *seating.queue]
    return [pid for pid in team if not seating.is_sitting_out(pid)]


def _check_entries(seating: GameSeating, entries: Mapping[str, int]) -> None:
    seated = set(seating.seated_ids)
    for player_id, value in entries.items():
        if player_id not in seated:
            raise NotSeatedError(f"player '{player_id}' is not seated")
        if seating.is_sitting_out(player_id):
            raise InvalidStateError(f"player '{player_id}' is sitting out")
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidScoreError(f"score for '{player_id}' must be an integer")


class ScorePolicy(Protocol):
    name: PolicyName

    def resolve(self, seating: GameSeating, entries: Mapping[str, int]) -> dict[str, int]:
        """Validate ``entries`` and return the per-player scores to accumulate."""
        ...


class ZeroSumPolicy:
    """Plain entry: every score is typed in and the round must balance."""

    name = PolicyName.ZERO_SUM

    def resolve(self, seating: GameSeating, entries: Mapping[str, int]) -> dict[str, int]:
        _check_entries(seating, entries)
        if not entries:
            raise UnbalancedScoreError("no scores entered")
        total = sum(entries.values())
        if total != 0:
            raise UnbalancedScoreError(f"scores must sum to zero (got {total:+d})")
        return dict(entries)


class CubePolicy:
    """Cube entry: Team members enter cube values, Box takes the negated sum."""

    name = PolicyName.CUBE

    def box_score(self, entries: Mapping[str, int]) -> int:
        return -sum(entries.values())

    def resolve(self, seating: GameSeating, entries: Mapping[str, int]) -> dict[str, int]:
        box = seating.box_player_id
        if box in entries:
            raise InvalidStateError("the Box score is derived and cannot be entered")
        if seating.is_sitting_out(box):
            raise InvalidStateError("the Box player is sitting out")
        _check_entries(seating, entries)
        team = participants(seating)
        if not team:
            raise InvalidStateError("no active team players to score")
        for player_id, value in entries.items():
            if value not in CUBE_VALUES:
                raise InvalidScoreError(f"{value} is not a cube value (player '{player_id}')")
        # every active team member plays the game, so every one needs a value
        missing = [pid for pid in team if pid not in entries]
        if missing:
            raise UnbalancedScoreError(f"missing scores for: {', '.join(missing)}")
        resolved = dict(entries)
        resolved[box] = self.box_score(entries)
        return resolved


def make_policy(name: PolicyName | str) -> ScorePolicy:
    key = PolicyName(name)
    if key is PolicyName.ZERO_SUM:
        return ZeroSumPolicy()
    return CubePolicy()


@dataclass(frozen=True)
class ScoreSummary:
    total: int
    leader: str | None
    players: tuple[tuple[str, int], ...]


def summarize_scores(scores: Mapping[str, int], order: Sequence[str] | None = None) -> ScoreSummary:
    """Collate running scores for display; ``leader`` is None on an all-zero board."""

    ids = list(order) if order is not None else list(scores)
    players = tuple((pid, int(scores.get(pid, 0))) for pid in ids)
    leader: str | None = None
    if players:
        best_id, best = max(players, key=lambda item: item[1])
        if best > 0:
            leader = best_id
    return ScoreSummary(total=sum(value for _, value in players), leader=leader, players=players)
