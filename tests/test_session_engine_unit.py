from __future__ import annotations

import pytest

from chouette.application.session_engine import SessionEngine
from chouette.core.errors import (
    DuplicateSeatError,
    InvalidSeatingError,
    InvalidStateError,
    NotSeatedError,
    UnbalancedScoreError,
)
from chouette.core.models import Seat, SessionMode
from chouette.core.rotation import RotationOutcome


def _started(engine: SessionEngine, queue=("q1", "q2", "q3")):
    return engine.start_game(engine.create_session(), "b", "c", list(queue))


def test_create_session_starts_empty_in_setup(zero_sum_engine):
    session = zero_sum_engine.create_session()

    assert session.mode is SessionMode.SETUP
    assert session.id.startswith("session_")
    assert session.box_player_id is None and session.captain_player_id is None
    assert session.queue == ()
    assert session.current_scores == {} and session.sitting_out == {}
    assert session.is_complete is False


def test_assign_seat_sets_and_clears(zero_sum_engine):
    session = zero_sum_engine.create_session()
    session = zero_sum_engine.assign_seat(session, Seat.BOX, "b")
    session = zero_sum_engine.assign_seat(session, Seat.CAPTAIN, "c")
    assert (session.box_player_id, session.captain_player_id) == ("b", "c")

    cleared = zero_sum_engine.assign_seat(session, Seat.BOX, None)
    assert cleared.box_player_id is None
    assert session.box_player_id == "b"


def test_assign_seat_rejects_player_in_other_seat(zero_sum_engine):
    session = zero_sum_engine.assign_seat(zero_sum_engine.create_session(), Seat.BOX, "b")
    with pytest.raises(DuplicateSeatError):
        zero_sum_engine.assign_seat(session, Seat.CAPTAIN, "b")


def test_assign_seat_rejected_during_game(zero_sum_engine):
    session = _started(zero_sum_engine)
    with pytest.raises(InvalidStateError):
        zero_sum_engine.assign_seat(session, Seat.BOX, "q1")


def test_set_queue_rejects_duplicates_and_seated_players(zero_sum_engine):
    session = zero_sum_engine.assign_seat(zero_sum_engine.create_session(), Seat.BOX, "b")
    with pytest.raises(DuplicateSeatError):
        zero_sum_engine.set_queue(session, ["q1", "q1"])
    with pytest.raises(DuplicateSeatError):
        zero_sum_engine.set_queue(session, ["q1", "b"])
    assert zero_sum_engine.set_queue(session, ["q2", "q1"]).queue == ("q2", "q1")


def test_set_queue_enforces_capacity():
    engine = SessionEngine(policy=None, max_queue=2)  # type: ignore[arg-type]
    with pytest.raises(InvalidSeatingError):
        engine.set_queue(engine.create_session(), ["a", "b", "c"])


def test_set_queue_during_game_adds_players_with_fresh_entries(zero_sum_engine):
    session = _started(zero_sum_engine, queue=("q1",))
    session = zero_sum_engine.set_queue(session, ["q2", "q1"])

    assert session.queue == ("q2", "q1")
    assert session.current_scores["q2"] == 0
    assert session.sitting_out["q2"] is False
    assert set(session.current_scores) == {"b", "c", "q1", "q2"}


def test_set_queue_during_game_cannot_drop_players(zero_sum_engine):
    session = _started(zero_sum_engine)
    with pytest.raises(InvalidSeatingError):
        zero_sum_engine.set_queue(session, ["q1", "q2"])


def test_start_game_initializes_every_seated_player(zero_sum_engine):
    session = _started(zero_sum_engine)

    assert session.mode is SessionMode.GAME
    assert session.current_scores == {"b": 0, "c": 0, "q1": 0, "q2": 0, "q3": 0}
    assert session.sitting_out == {"b": False, "c": False, "q1": False, "q2": False, "q3": False}


@pytest.mark.parametrize(
    ("box", "captain", "queue"),
    [
        (None, "c", []),
        ("b", None, []),
        ("b", "b", []),
        ("b", "c", ["q1", "q1"]),
        ("b", "c", ["c"]),
    ],
)
def test_start_game_rejects_invalid_seating(zero_sum_engine, box, captain, queue):
    session = zero_sum_engine.create_session()
    with pytest.raises(InvalidSeatingError):
        zero_sum_engine.start_game(session, box, captain, queue)
    assert session.mode is SessionMode.SETUP


def test_start_game_twice_is_rejected(zero_sum_engine):
    with pytest.raises(InvalidStateError):
        zero_sum_engine.start_game(_started(zero_sum_engine), "b", "c", [])


def test_toggle_sitting_out_twice_restores_session(zero_sum_engine):
    session = _started(zero_sum_engine)
    once = zero_sum_engine.toggle_sitting_out(session, "q2")
    assert once.sitting_out["q2"] is True
    assert once.current_scores == session.current_scores

    assert zero_sum_engine.toggle_sitting_out(once, "q2") == session


def test_toggle_sitting_out_requires_seated_player(zero_sum_engine):
    with pytest.raises(NotSeatedError):
        zero_sum_engine.toggle_sitting_out(_started(zero_sum_engine), "ghost")


def test_toggle_sitting_out_rejected_during_setup(zero_sum_engine):
    session = zero_sum_engine.assign_seat(zero_sum_engine.create_session(), Seat.BOX, "b")
    with pytest.raises(InvalidStateError):
        zero_sum_engine.toggle_sitting_out(session, "b")


def test_submit_scores_box_win(zero_sum_engine):
    session = _started(zero_sum_engine)

    result = zero_sum_engine.submit_scores(session, {"b": 4, "c": -2, "q1": -1, "q2": -1})

    after = result.session
    assert result.rotation.outcome is RotationOutcome.BOX_WON
    assert (after.box_player_id, after.captain_player_id, after.queue) == ("b", "q1", ("q2", "q3", "c"))
    assert after.current_scores == {"b": 4, "c": -2, "q1": -1, "q2": -1, "q3": 0}


def test_submit_scores_captain_win(zero_sum_engine):
    session = _started(zero_sum_engine)

    after = zero_sum_engine.submit_scores(session, {"b": -4, "c": 4}).session

    assert (after.box_player_id, after.captain_player_id, after.queue) == ("c", "q1", ("q2", "q3", "b"))
    assert after.current_scores["c"] == 4


def test_scores_follow_players_across_seats(zero_sum_engine):
    session = _started(zero_sum_engine)
    session = zero_sum_engine.submit_scores(session, {"b": -2, "c": 2}).session
    session = zero_sum_engine.submit_scores(session, {"c": 3, "q1": -3}).session

    assert session.box_player_id == "c"
    assert session.current_scores["c"] == 5
    assert session.current_scores["q1"] == -3
    assert session.current_scores["b"] == -2


def test_all_sitting_out_accumulates_without_rotation(zero_sum_engine):
    session = _started(zero_sum_engine)
    for pid in ("q1", "q2", "q3"):
        session = zero_sum_engine.toggle_sitting_out(session, pid)

    result = zero_sum_engine.submit_scores(session, {"b": 2, "c": -2})

    after = result.session
    assert result.rotation.outcome is RotationOutcome.NO_ROTATION
    assert (after.box_player_id, after.captain_player_id, after.queue) == ("b", "c", ("q1", "q2", "q3"))
    assert after.current_scores["b"] == 2


def test_unbalanced_submission_leaves_session_untouched(zero_sum_engine):
    session = _started(zero_sum_engine)
    scores_before = dict(session.current_scores)
    with pytest.raises(UnbalancedScoreError):
        zero_sum_engine.submit_scores(session, {"b": 4, "c": -1})
    assert session.current_scores == scores_before
    assert (session.box_player_id, session.captain_player_id) == ("b", "c")


def test_submit_scores_rejected_during_setup(zero_sum_engine):
    with pytest.raises(InvalidStateError):
        zero_sum_engine.submit_scores(zero_sum_engine.create_session(), {})


def test_cube_submission_derives_box_score(cube_engine):
    session = _started(cube_engine)

    result = cube_engine.submit_scores(session, {"c": 2, "q1": 2, "q2": 2, "q3": 2})

    assert result.applied["b"] == -8
    assert result.rotation.outcome is RotationOutcome.TEAM_WON
    assert result.session.box_player_id == "c"


def test_cube_submission_without_captain_changes_nothing(cube_engine):
    session = _started(cube_engine)

    with pytest.raises(UnbalancedScoreError):
        cube_engine.submit_scores(session, {"q2": 2})
    with pytest.raises(UnbalancedScoreError):
        cube_engine.submit_scores(session, {})

    assert session.current_scores == {"b": 0, "c": 0, "q1": 0, "q2": 0, "q3": 0}
    assert (session.box_player_id, session.captain_player_id) == ("b", "c")


def test_end_chouette_returns_scores_and_fresh_session(zero_sum_engine):
    session = _started(zero_sum_engine)
    session = zero_sum_engine.submit_scores(session, {"b": 4, "c": -4}).session
    before = dict(session.current_scores)

    final_scores, fresh = zero_sum_engine.end_chouette(session)

    assert final_scores == before
    assert final_scores == {"b": 4, "c": -4, "q1": 0, "q2": 0, "q3": 0}
    assert fresh.mode is SessionMode.SETUP
    assert fresh.is_complete is False
    assert fresh.id != session.id
    assert session.current_scores == before
