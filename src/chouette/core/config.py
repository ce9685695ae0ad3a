"""Environment-driven settings.

Deployments pick the score-entry policy and where state is kept through
environment variables::

    CHOUETTE_DATA_DIR=/var/lib/chouette
    CHOUETTE_SCORE_POLICY=zero_sum   # or "cube" (default)
    CHOUETTE_MAX_QUEUE=12

Tests can layer temporary values on top with :func:`override`.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .scoring import PolicyName

DATA_DIR_ENV: Final = "CHOUETTE_DATA_DIR"
POLICY_ENV: Final = "CHOUETTE_SCORE_POLICY"
MAX_QUEUE_ENV: Final = "CHOUETTE_MAX_QUEUE"

DEFAULT_POLICY: Final = PolicyName.CUBE
DEFAULT_MAX_QUEUE: Final = 12

logger = logging.getLogger(__name__)

_OVERRIDE_STACK: list[dict[str, str]] = []


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    score_policy: PolicyName = DEFAULT_POLICY
    max_queue: int = DEFAULT_MAX_QUEUE


def _lookup(name: str) -> str | None:
    for layer in reversed(_OVERRIDE_STACK):
        if name in layer:
            return layer[name]
    return os.getenv(name)


def _parse_policy(raw: str | None) -> PolicyName:
    if not raw:
        return DEFAULT_POLICY
    try:
        return PolicyName(raw.strip().lower())
    except ValueError:
        logger.warning("Unknown score policy; using default", extra={"policy": raw, "default": DEFAULT_POLICY.value})
        return DEFAULT_POLICY


def _parse_max_queue(raw: str | None) -> int:
    if not raw:
        return DEFAULT_MAX_QUEUE
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_MAX_QUEUE
    return value if value > 0 else DEFAULT_MAX_QUEUE


def load_settings() -> Settings:
    raw_dir = _lookup(DATA_DIR_ENV)
    data_dir = Path(raw_dir).expanduser() if raw_dir else Path.home() / ".chouette"
    return Settings(
        data_dir=data_dir,
        score_policy=_parse_policy(_lookup(POLICY_ENV)),
        max_queue=_parse_max_queue(_lookup(MAX_QUEUE_ENV)),
    )


@contextmanager
def override(**values: str):
    """Temporarily override settings by environment variable name."""

    _OVERRIDE_STACK.append(dict(values))
    try:
        yield
    finally:
        _OVERRIDE_STACK.pop()
