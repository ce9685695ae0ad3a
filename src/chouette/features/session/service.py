from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping

from ...application.session_engine import SessionEngine, SubmitResult
from ...core.errors import InvalidStateError, StorageFailure
from ...core.models import GameSeating, Player, Seat, Session
from ...core.scoring import participants
from ...storage.roster import RosterStore
from ...storage.session_store import SessionStore
from .schemas import EndResult, PlayerPayload, RotationPayload, ScoreResult, SeatPayload, SessionPayload

__all__ = ["SessionManager", "player_payload"]

logger = logging.getLogger(__name__)


def player_payload(player: Player) -> PlayerPayload:
    return PlayerPayload(
        id=player.id,
        name=player.name,
        total_score=player.total_score,
        games_played=player.games_played,
    )


class SessionManager:
    """Owns the active chouette and keeps its durable copy in step."""

    def __init__(self, engine: SessionEngine, sessions: SessionStore, roster: RosterStore) -> None:
        self.engine = engine
        self.sessions = sessions
        self.roster = roster
        self._lock = threading.Lock()
        self._session = self._load_or_create()

    # ------------------------------------------------------------------ helpers
    def _load_or_create(self) -> Session:
        try:
            session = self.sessions.load()
        except StorageFailure as exc:
            logger.warning("stored session unreadable; starting fresh", extra={"error": str(exc)})
            session = None
        if session is not None:
            return session
        session = self.engine.create_session()
        self._save(session)
        return session

    def _save(self, session: Session) -> None:
        try:
            self.sessions.save(session)
        except StorageFailure:
            logger.error("failed to persist session", extra={"session_id": session.id})
            raise

    def _commit(self, session: Session) -> Session:
        self._session = session
        self._save(session)
        return session

    def _apply(self, op: Callable[[Session], Session]) -> Session:
        with self._lock:
            return self._commit(op(self._session))

    # ------------------------------------------------------------------ actions
    @property
    def session(self) -> Session:
        return self._session

    def assign_seat(self, seat: Seat, player_id: str | None) -> Session:
        return self._apply(lambda s: self.engine.assign_seat(s, seat, player_id))

    def set_queue(self, player_ids: Iterable[str]) -> Session:
        ids = list(player_ids)
        return self._apply(lambda s: self.engine.set_queue(s, ids))

    def add_to_queue(self, player_id: str) -> Session:
        return self._apply(lambda s: self.engine.set_queue(s, [*s.queue, player_id]))

    def start_game(
        self,
        box_id: str | None = None,
        captain_id: str | None = None,
        queue_ids: Iterable[str] | None = None,
    ) -> Session:
        def _start(s: Session) -> Session:
            return self.engine.start_game(
                s,
                box_id if box_id is not None else s.box_player_id,
                captain_id if captain_id is not None else s.captain_player_id,
                list(queue_ids) if queue_ids is not None else s.queue,
            )

        return self._apply(_start)

    def toggle_sitting_out(self, player_id: str) -> Session:
        return self._apply(lambda s: self.engine.toggle_sitting_out(s, player_id))

    def submit_scores(self, entries: Mapping[str, int]) -> SubmitResult:
        with self._lock:
            result = self.engine.submit_scores(self._session, entries)
            self._commit(result.session)
        return result

    def end_chouette(self) -> tuple[dict[str, int], Session]:
        with self._lock:
            final_scores, new_session = self.engine.end_chouette(self._session)
            self.roster.update_player_scores(final_scores)
            self._commit(new_session)
        logger.info("chouette finalized", extra={"players": len(final_scores)})
        return final_scores, new_session

    def remove_player(self, player_id: str) -> None:
        """Delete a player from the roster; seated players must leave the session first."""

        with self._lock:
            if self._session.is_seated(player_id):
                raise InvalidStateError(f"player '{player_id}' is seated in the current session")
            self.roster.delete_player(player_id)
        logger.info("player removed", extra={"player_id": player_id})

    def clear_session(self) -> Session:
        with self._lock:
            self.sessions.clear()
            return self._commit(self.engine.create_session())

    # ------------------------------------------------------------------ views
    def snapshot(self) -> SessionPayload:
        session = self._session
        seating = session.seating
        names = {player.id: player.name for player in self.roster.get_players_by_ids(session.seated_ids)}
        scores = session.current_scores
        flags = session.sitting_out

        def seat(player_id: str | None) -> SeatPayload | None:
            if player_id is None:
                return None
            return SeatPayload(
                player_id=player_id,
                name=names.get(player_id, player_id),
                score=scores.get(player_id, 0),
                sitting_out=flags.get(player_id, False),
            )

        return SessionPayload(
            id=session.id,
            mode=session.mode.value,
            is_complete=session.is_complete,
            policy=self.engine.policy.name.value,
            box=seat(session.box_player_id),
            captain=seat(session.captain_player_id),
            queue=[seat(pid) for pid in session.queue],
            participants=participants(seating) if isinstance(seating, GameSeating) else [],
            scores=scores,
        )

    def score_result(self, result: SubmitResult) -> ScoreResult:
        rotation = result.rotation
        return ScoreResult(
            applied=result.applied,
            rotation=RotationPayload(
                outcome=rotation.outcome.value,
                box_player_id=rotation.box_player_id,
                captain_player_id=rotation.captain_player_id,
                queue=list(rotation.queue),
            ),
            session=self.snapshot(),
        )

    def end_result(self, final_scores: Mapping[str, int]) -> EndResult:
        return EndResult(final_scores=dict(final_scores), session=self.snapshot())

    def players(self) -> list[PlayerPayload]:
        return [player_payload(player) for player in self.roster.get_all_players()]
