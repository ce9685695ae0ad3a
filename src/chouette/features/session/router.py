from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from ...core.errors import (
    ChouetteError,
    InvalidScoreError,
    InvalidSeatingError,
    InvalidStateError,
    NotSeatedError,
    PlayerNameError,
    PlayerNotFoundError,
    StorageFailure,
    UnbalancedScoreError,
)
from .schemas import CreatePlayerRequest, QueueRequest, ScoreRequest, SeatRequest, StartRequest
from .service import SessionManager, player_payload

__all__ = ["create_session_routers", "status_for"]

_STATUS: tuple[tuple[type[ChouetteError], int], ...] = (
    (InvalidStateError, 409),
    (InvalidSeatingError, 400),
    (UnbalancedScoreError, 400),
    (InvalidScoreError, 400),
    (PlayerNameError, 400),
    (NotSeatedError, 404),
    (PlayerNotFoundError, 404),
    (StorageFailure, 503),
)


def status_for(exc: ChouetteError) -> int:
    for kind, status in _STATUS:
        if isinstance(exc, kind):
            return status
    return 400


def _http_error(exc: ChouetteError) -> HTTPException:
    return HTTPException(status_for(exc), str(exc))


class _SessionController:
    def __init__(self, manager: SessionManager) -> None:
        self.manager = manager

    def _session_response(self) -> JSONResponse:
        return JSONResponse(self.manager.snapshot().to_dict())

    # ------------------------------------------------------------------ actions
    def show(self) -> JSONResponse:
        return self._session_response()

    def seat(self, body: SeatRequest) -> JSONResponse:
        try:
            self.manager.assign_seat(body.seat, body.player_id)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return self._session_response()

    def queue(self, body: QueueRequest) -> JSONResponse:
        try:
            self.manager.set_queue(body.player_ids)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return self._session_response()

    def enqueue(self, player_id: str) -> JSONResponse:
        try:
            self.manager.add_to_queue(player_id)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return self._session_response()

    def start(self, body: StartRequest) -> JSONResponse:
        try:
            self.manager.start_game(body.box_player_id, body.captain_player_id, body.queue_player_ids)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return self._session_response()

    def scores(self, body: ScoreRequest) -> JSONResponse:
        try:
            result = self.manager.submit_scores(body.scores)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(self.manager.score_result(result).to_dict())

    def sitting_out(self, player_id: str) -> JSONResponse:
        try:
            self.manager.toggle_sitting_out(player_id)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return self._session_response()

    def end(self) -> JSONResponse:
        try:
            final_scores, _ = self.manager.end_chouette()
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(self.manager.end_result(final_scores).to_dict())

    def clear(self) -> JSONResponse:
        try:
            self.manager.clear_session()
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return self._session_response()

    def players(self) -> JSONResponse:
        return JSONResponse({"players": [player.to_dict() for player in self.manager.players()]})

    def create_player(self, body: CreatePlayerRequest) -> JSONResponse:
        try:
            player = self.manager.roster.create_player(body.name)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(player_payload(player).to_dict(), status_code=201)

    def remove_player(self, player_id: str) -> JSONResponse:
        try:
            self.manager.remove_player(player_id)
        except ChouetteError as exc:
            raise _http_error(exc) from exc
        return self.players()


def create_session_routers(manager: SessionManager) -> APIRouter:
    controller = _SessionController(manager)
    router = APIRouter(prefix="/api/v1/chouette", tags=["chouette"])

    @router.get("")
    def get_session() -> JSONResponse:
        return controller.show()

    @router.delete("")
    def clear_session() -> JSONResponse:
        return controller.clear()

    @router.post("/seat")
    def post_seat(body: SeatRequest) -> JSONResponse:
        return controller.seat(body)

    @router.put("/queue")
    def put_queue(body: QueueRequest) -> JSONResponse:
        return controller.queue(body)

    @router.post("/queue/{player_id}")
    def post_queue_player(player_id: str) -> JSONResponse:
        return controller.enqueue(player_id)

    @router.post("/start")
    def post_start(body: StartRequest) -> JSONResponse:
        return controller.start(body)

    @router.post("/scores")
    def post_scores(body: ScoreRequest) -> JSONResponse:
        return controller.scores(body)

    @router.post("/sitting-out/{player_id}")
    def post_sitting_out(player_id: str) -> JSONResponse:
        return controller.sitting_out(player_id)

    @router.post("/end")
    def post_end() -> JSONResponse:
        return controller.end()

    @router.get("/players")
    def get_players() -> JSONResponse:
        return controller.players()

    @router.post("/players")
    def post_player(body: CreatePlayerRequest) -> JSONResponse:
        return controller.create_player(body)

    @router.delete("/players/{player_id}")
    def delete_player(player_id: str) -> JSONResponse:
        return controller.remove_player(player_id)

    return router
