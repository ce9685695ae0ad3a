"""Application-layer wiring for the chouette session flow."""

from __future__ import annotations

from ..core.config import Settings, load_settings
from ..core.scoring import make_policy
from .session_engine import SessionEngine, SubmitResult

__all__ = ["SessionEngine", "SubmitResult", "build_engine", "build_manager"]


def build_engine(settings: Settings) -> SessionEngine:
    return SessionEngine(make_policy(settings.score_policy), max_queue=settings.max_queue)


def build_manager(settings: Settings | None = None):
    """Wire the engine to JSON stores under ``settings.data_dir``."""

    from ..features.session.service import SessionManager
    from ..storage.roster import JsonRosterStore
    from ..storage.session_store import JsonSessionStore

    settings = settings or load_settings()
    return SessionManager(
        build_engine(settings),
        JsonSessionStore(settings.data_dir),
        JsonRosterStore(settings.data_dir),
    )
