"""Session engine primitives.

Every operation takes a :class:`~chouette.core.models.Session` value and
returns a new one; nothing is mutated in place, so a rejected operation leaves
the caller's session exactly as it was. Persistence lives in the service
layer, which keeps the engine testable without a storage backend.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from ..core.errors import (
    DuplicateSeatError,
    InvalidSeatingError,
    InvalidStateError,
    NotSeatedError,
)
from ..core.models import GameSeating, Seat, Session, SessionMode, SetupSeating, generate_id, utcnow, zeroed
from ..core.rotation import RotationResult, rotate
from ..core.scoring import ScorePolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitResult:
    session: Session
    applied: dict[str, int]
    rotation: RotationResult


def _require_unique(ids: Iterable[str], *, taken: Iterable[str | None] = ()) -> tuple[str, ...]:
    blocked = {pid for pid in taken if pid is not None}
    seen: set[str] = set()
    ordered: list[str] = []
    for pid in ids:
        if pid in seen:
            raise DuplicateSeatError(f"player '{pid}' appears in the queue more than once")
        if pid in blocked:
            raise DuplicateSeatError(f"player '{pid}' already occupies the Box or Captain seat")
        seen.add(pid)
        ordered.append(pid)
    return tuple(ordered)


class SessionEngine:
    """Seat assignment, score submission and rotation for one chouette."""

    def __init__(self, policy: ScorePolicy, *, max_queue: int = 12) -> None:
        self.policy = policy
        self.max_queue = max_queue

    # ------------------------------------------------------------------ lifecycle
    def create_session(self) -> Session:
        return Session(id=generate_id("session"), created_at=utcnow(), seating=SetupSeating())

    def assign_seat(self, session: Session, seat: Seat, player_id: str | None) -> Session:
        seating = session.seating
        if not isinstance(seating, SetupSeating):
            raise InvalidStateError("seats can only be assigned during setup")
        other = seating.captain_player_id if seat is Seat.BOX else seating.box_player_id
        if player_id is not None and (player_id == other or player_id in seating.queue):
            raise DuplicateSeatError(f"player '{player_id}' is already seated")
        if seat is Seat.BOX:
            updated = replace(seating, box_player_id=player_id)
        else:
            updated = replace(seating, captain_player_id=player_id)
        return replace(session, seating=updated)

    def set_queue(self, session: Session, player_ids: Iterable[str]) -> Session:
        seating = session.seating
        queue = _require_unique(player_ids, taken=(seating.box_player_id, seating.captain_player_id))
        if len(queue) > self.max_queue:
            raise InvalidSeatingError(f"the queue holds at most {self.max_queue} players")
        if isinstance(seating, SetupSeating):
            return replace(session, seating=replace(seating, queue=queue))

        dropped = [pid for pid in seating.queue if pid not in queue]
        if dropped:
            raise InvalidSeatingError(f"cannot remove seated players during a game: {', '.join(dropped)}")
        scores = dict(seating.scores)
        sitting_out = dict(seating.sitting_out)
        for pid in queue:
            scores.setdefault(pid, 0)
            sitting_out.setdefault(pid, False)
        updated = replace(seating, queue=queue, scores=scores, sitting_out=sitting_out)
        return replace(session, seating=updated)

    def start_game(
        self,
        session: Session,
        box_id: str | None,
        captain_id: str | None,
        queue_ids: Iterable[str] = (),
    ) -> Session:
        if session.mode is SessionMode.GAME:
            raise InvalidStateError("the game has already started")
        if not box_id or not captain_id:
            raise InvalidSeatingError("both Box and Captain must be seated to start")
        if box_id == captain_id:
            raise InvalidSeatingError("Box and Captain must be different players")
        try:
            queue = _require_unique(queue_ids, taken=(box_id, captain_id))
        except DuplicateSeatError as exc:
            raise InvalidSeatingError(str(exc)) from exc
        if len(queue) > self.max_queue:
            raise InvalidSeatingError(f"the queue holds at most {self.max_queue} players")
        scores, sitting_out = zeroed((box_id, captain_id, *queue))
        seating = GameSeating(
            box_player_id=box_id,
            captain_player_id=captain_id,
            queue=queue,
            scores=scores,
            sitting_out=sitting_out,
        )
        logger.debug("chouette started", extra={"session_id": session.id, "players": len(scores)})
        return replace(session, seating=seating)

    def toggle_sitting_out(self, session: Session, player_id: str) -> Session:
        seating = session.seating
        if not session.is_seated(player_id):
            raise NotSeatedError(f"player '{player_id}' is not seated")
        if not isinstance(seating, GameSeating):
            raise InvalidStateError("sitting out can only be toggled during a game")
        flags = dict(seating.sitting_out)
        flags[player_id] = not flags.get(player_id, False)
        return replace(session, seating=replace(seating, sitting_out=flags))

    def end_chouette(self, session: Session) -> tuple[dict[str, int], Session]:
        final_scores = session.current_scores
        logger.debug("chouette ended", extra={"session_id": session.id, "final_scores": final_scores})
        return final_scores, self.create_session()

    # ------------------------------------------------------------------ scoring
    def submit_scores(self, session: Session, entries: Mapping[str, int]) -> SubmitResult:
        seating = session.seating
        if not isinstance(seating, GameSeating):
            raise InvalidStateError("scores can only be submitted during a game")
        applied = self.policy.resolve(seating, entries)

        scores = dict(seating.scores)
        for pid, value in applied.items():
            scores[pid] = scores.get(pid, 0) + value

        result = rotate(
            seating,
            applied.get(seating.box_player_id, 0),
            applied.get(seating.captain_player_id, 0),
        )
        updated = replace(
            seating,
            box_player_id=result.box_player_id,
            captain_player_id=result.captain_player_id,
            queue=result.queue,
            scores=scores,
        )
        logger.debug(
            "scores submitted",
            extra={
                "session_id": session.id,
                "outcome": result.outcome.value,
                "box": result.box_player_id,
                "captain": result.captain_player_id,
            },
        )
        return SubmitResult(session=replace(session, seating=updated), applied=applied, rotation=result)
