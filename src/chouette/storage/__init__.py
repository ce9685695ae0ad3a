"""Persistence for the active session and the player roster."""

from .roster import JsonRosterStore, MemoryRosterStore, RosterStore
from .session_store import JsonSessionStore, MemorySessionStore, SessionStore

__all__ = [
    "JsonRosterStore",
    "JsonSessionStore",
    "MemoryRosterStore",
    "MemorySessionStore",
    "RosterStore",
    "SessionStore",
]
