"""Chouette scoreboard: seating rotation and running scores for a Box-versus-Team session."""

from __future__ import annotations

__all__: list[str] = []
