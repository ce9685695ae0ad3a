"""Player roster: durable list of known players and their lifetime totals."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from ..core.errors import PlayerNameError, PlayerNotFoundError, StorageFailure
from ..core.models import Player, generate_id
from .records import PlayerRecord
from .session_store import read_json, write_json_atomic

__all__ = ["JsonRosterStore", "MemoryRosterStore", "PLAYERS_KEY", "RosterStore"]

PLAYERS_KEY = "chouette_players"

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[PlayerRecord])


class RosterStore(Protocol):
    def get_all_players(self) -> list[Player]: ...

    def get_player_by_id(self, player_id: str) -> Player | None: ...

    def get_players_by_ids(self, player_ids: Iterable[str]) -> list[Player]: ...

    def update_player_scores(self, deltas: Mapping[str, int]) -> None: ...

    def create_player(self, name: str) -> Player: ...

    def delete_player(self, player_id: str) -> None: ...


class _BaseRoster:
    def _read(self) -> list[Player]:
        raise NotImplementedError

    def _write(self, players: list[Player]) -> None:
        raise NotImplementedError

    def get_all_players(self) -> list[Player]:
        return self._read()

    def get_player_by_id(self, player_id: str) -> Player | None:
        return next((player for player in self._read() if player.id == player_id), None)

    def get_players_by_ids(self, player_ids: Iterable[str]) -> list[Player]:
        by_id = {player.id: player for player in self._read()}
        return [by_id[pid] for pid in player_ids if pid in by_id]

    def is_name_taken(self, name: str) -> bool:
        needle = name.strip().lower()
        return any(player.name.lower() == needle for player in self._read())

    def create_player(self, name: str) -> Player:
        trimmed = (name or "").strip()
        if not trimmed:
            raise PlayerNameError("player name cannot be empty")
        if self.is_name_taken(trimmed):
            raise PlayerNameError(f"player name '{trimmed}' already exists")
        players = self._read()
        player = Player(id=generate_id("player"), name=trimmed)
        players.append(player)
        self._write(players)
        return player

    def delete_player(self, player_id: str) -> None:
        players = self._read()
        remaining = [player for player in players if player.id != player_id]
        if len(remaining) == len(players):
            raise PlayerNotFoundError(f"player '{player_id}' not found")
        self._write(remaining)

    def update_player_scores(self, deltas: Mapping[str, int]) -> None:
        players = self._read()
        by_id = {player.id: player for player in players}
        changed = False
        for player_id, delta in deltas.items():
            player = by_id.get(player_id)
            if player is None:
                logger.warning("score delta for unknown player dropped", extra={"player_id": player_id})
                continue
            if delta == 0:
                continue
            player.total_score += delta
            player.games_played += 1
            changed = True
        if changed:
            self._write(players)


class JsonRosterStore(_BaseRoster):
    def __init__(self, directory: Path, key: str = PLAYERS_KEY) -> None:
        self.path = Path(directory) / f"{key}.json"

    def _read(self) -> list[Player]:
        data = read_json(self.path)
        if data is None:
            return []
        try:
            return [record.to_player() for record in _RECORDS.validate_python(data)]
        except ValidationError as exc:
            raise StorageFailure(f"stored roster at {self.path} is malformed") from exc

    def _write(self, players: list[Player]) -> None:
        write_json_atomic(self.path, [PlayerRecord.from_player(player).to_dict() for player in players])


class MemoryRosterStore(_BaseRoster):
    def __init__(self, players: Iterable[Player] = ()) -> None:
        self._players = [PlayerRecord.from_player(player) for player in players]

    def _read(self) -> list[Player]:
        return [record.to_player() for record in self._players]

    def _write(self, players: list[Player]) -> None:
        self._players = [PlayerRecord.from_player(player) for player in players]
