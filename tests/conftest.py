from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from chouette.application.session_engine import SessionEngine  # noqa: E402
from chouette.core.models import Player  # noqa: E402
from chouette.core.scoring import CubePolicy, ZeroSumPolicy  # noqa: E402
from chouette.features.session import SessionManager  # noqa: E402
from chouette.storage import MemoryRosterStore, MemorySessionStore  # noqa: E402

NAMES = ("Box", "Cap", "Q1", "Q2", "Q3")


@pytest.fixture
def zero_sum_engine() -> SessionEngine:
    return SessionEngine(ZeroSumPolicy())


@pytest.fixture
def cube_engine() -> SessionEngine:
    return SessionEngine(CubePolicy())


@pytest.fixture
def roster() -> MemoryRosterStore:
    return MemoryRosterStore(Player(id=name.lower(), name=name) for name in NAMES)


@pytest.fixture
def manager(cube_engine: SessionEngine, roster: MemoryRosterStore) -> SessionManager:
    return SessionManager(cube_engine, MemorySessionStore(), roster)
