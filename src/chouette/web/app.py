from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from ..application import build_manager
from ..core.config import Settings
from ..features.session import SessionManager, create_session_routers

logger = logging.getLogger(__name__)


def create_app(manager: SessionManager | None = None, *, settings: Settings | None = None) -> FastAPI:
    manager = manager or build_manager(settings)
    app = FastAPI(title="Chouette Scoreboard")
    app.state.manager = manager

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(create_session_routers(manager))
    return app


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    host = os.environ.get("BIND", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(create_app(), host=host, port=port, factory=False)


if __name__ == "__main__":  # pragma: no cover
    main()
