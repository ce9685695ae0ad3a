from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from ..core.errors import StorageFailure
from ..core.models import Session
from .records import SessionRecord

__all__ = [
    "JsonSessionStore",
    "MemorySessionStore",
    "SESSION_KEY",
    "SessionStore",
    "read_json",
    "write_json_atomic",
]

SESSION_KEY = "chouette_session"

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def load(self) -> Session | None: ...

    def save(self, session: Session) -> None: ...

    def clear(self) -> None: ...


def write_json_atomic(path: Path, payload: Any) -> None:
    """Overwrite ``path`` with ``payload`` so readers never observe a partial file."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as exc:
        raise StorageFailure(f"failed to write {path}: {exc}") from exc


def read_json(path: Path) -> Any | None:
    """Return the decoded document at ``path`` or None when it does not exist."""

    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        raise StorageFailure(f"failed to read {path}: {exc}") from exc


class JsonSessionStore:
    """Keeps the active session as a single JSON record under ``directory``."""

    def __init__(self, directory: Path, key: str = SESSION_KEY) -> None:
        self.path = Path(directory) / f"{key}.json"

    def load(self) -> Session | None:
        data = read_json(self.path)
        if data is None:
            return None
        try:
            return SessionRecord.model_validate(data).to_session()
        except ValidationError as exc:
            raise StorageFailure(f"stored session at {self.path} is malformed") from exc

    def save(self, session: Session) -> None:
        write_json_atomic(self.path, SessionRecord.from_session(session).to_dict())
        logger.debug("session saved", extra={"session_id": session.id, "path": str(self.path)})

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageFailure(f"failed to remove {self.path}: {exc}") from exc


class MemorySessionStore:
    """Holds the serialized record in memory; handy for tests and embedding."""

    def __init__(self) -> None:
        self.record: dict[str, Any] | None = None
        self.saves = 0

    def load(self) -> Session | None:
        if self.record is None:
            return None
        try:
            return SessionRecord.model_validate(self.record).to_session()
        except ValidationError as exc:
            raise StorageFailure("stored session is malformed") from exc

    def save(self, session: Session) -> None:
        self.record = SessionRecord.from_session(session).to_dict()
        self.saves += 1

    def clear(self) -> None:
        self.record = None
