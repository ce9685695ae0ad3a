"""Post-game seat rotation.

Box keeps the seat while winning. When Box wins, the Captain goes to the back
of the active queue; when the Captain wins, the Captain takes the Box and the
old Box goes to the back instead. Either way the first active queue member
becomes the new Captain. Sitting-out queue members never rotate in and stay
behind the active members in their original relative order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models import GameSeating


class RotationOutcome(str, Enum):
    BOX_WON = "box_won"
    TEAM_WON = "team_won"
    NO_ROTATION = "no_rotation"


@dataclass(frozen=True)
class RotationResult:
    box_player_id: str
    captain_player_id: str
    queue: tuple[str, ...]
    outcome: RotationOutcome

    @property
    def rotated(self) -> bool:
        return self.outcome is not RotationOutcome.NO_ROTATION


def rotate(seating: GameSeating, box_score: int, captain_score: int) -> RotationResult:
    active = seating.active_queue()
    inactive = seating.inactive_queue()
    box = seating.box_player_id
    captain = seating.captain_player_id

    if box_score > 0:
        outcome = RotationOutcome.BOX_WON
    elif captain_score > 0:
        outcome = RotationOutcome.TEAM_WON
    else:
        outcome = RotationOutcome.NO_ROTATION

    if outcome is RotationOutcome.NO_ROTATION or not active:
        return RotationResult(box, captain, seating.queue, RotationOutcome.NO_ROTATION)

    next_captain, remaining = active[0], active[1:]
    if outcome is RotationOutcome.BOX_WON:
        return RotationResult(box, next_captain, remaining + (captain,) + inactive, outcome)
    return RotationResult(captain, next_captain, remaining + (box,) + inactive, outcome)
