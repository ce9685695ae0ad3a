"""Session feature: service layer, schemas, and API router."""

from .router import create_session_routers
from .schemas import (
    EndResult,
    PlayerPayload,
    RotationPayload,
    ScoreResult,
    SeatPayload,
    SessionPayload,
)
from .service import SessionManager

__all__ = [
    "EndResult",
    "PlayerPayload",
    "RotationPayload",
    "ScoreResult",
    "SeatPayload",
    "SessionManager",
    "SessionPayload",
    "create_session_routers",
]
