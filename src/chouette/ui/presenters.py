from __future__ import annotations

from collections.abc import Mapping

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.scoring import summarize_scores
from ..features.session.schemas import PlayerPayload, ScoreResult, SeatPayload, SessionPayload

_OUTCOME_TEXT = {
    "box_won": "Box wins and keeps the seat",
    "team_won": "Team wins; Captain takes the Box",
    "no_rotation": "No rotation",
}


def _score_markup(score: int) -> str:
    if score > 0:
        return f"[green]+{score}[/]"
    if score < 0:
        return f"[red]{score}[/]"
    return "[dim]0[/]"


class RichPresenter:
    def __init__(self, *, no_color: bool = False, console: Console | None = None):
        if console is not None:
            self.console = console
        elif no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console()

    def _seat_row(self, table: Table, role: str, seat: SeatPayload | None, game: bool) -> None:
        if seat is None:
            table.add_row(role, "[dim]empty[/]", "", "")
            return
        status = "[yellow]sitting out[/]" if seat.sitting_out else ""
        table.add_row(role, seat.name, _score_markup(seat.score) if game else "", status)

    def show_session(self, payload: SessionPayload) -> None:
        game = payload.mode == "game"
        table = Table(box=box.SIMPLE_HEAVY, show_header=True, header_style="bold cyan")
        table.add_column("Seat", justify="right")
        table.add_column("Player")
        table.add_column("Score", justify="right")
        table.add_column("Status")
        self._seat_row(table, "Box", payload.box, game)
        self._seat_row(table, "Captain", payload.captain, game)
        for position, seat in enumerate(payload.queue, start=1):
            self._seat_row(table, f"Team #{position}", seat, game)

        title = f"Chouette ({payload.mode})"
        self.console.print(Panel(table, title=title, border_style="bold cyan", expand=False))
        if game:
            summary = summarize_scores(payload.scores)
            if summary.leader is not None:
                leader = next(
                    (s.name for s in (payload.box, payload.captain, *payload.queue) if s and s.player_id == summary.leader),
                    summary.leader,
                )
                self.console.print(f"Leader: [bold]{leader}[/]")

    def show_score_result(self, result: ScoreResult) -> None:
        text = _OUTCOME_TEXT.get(result.rotation.outcome, result.rotation.outcome)
        self.console.print(f"[bold]{text}[/]")
        self.show_session(result.session)

    def show_final_scores(self, final_scores: Mapping[str, int], names: Mapping[str, str]) -> None:
        table = Table(title="Final scores", box=box.SIMPLE)
        table.add_column("Player")
        table.add_column("Score", justify="right")
        for player_id, score in sorted(final_scores.items(), key=lambda item: -item[1]):
            table.add_row(names.get(player_id, player_id), _score_markup(score))
        self.console.print(table)

    def show_players(self, players: list[PlayerPayload]) -> None:
        if not players:
            self.console.print("[dim]No players yet.[/]")
            return
        table = Table(box=box.SIMPLE)
        table.add_column("Id", style="dim")
        table.add_column("Name")
        table.add_column("Total", justify="right")
        table.add_column("Games", justify="right")
        for player in players:
            table.add_row(player.id, player.name, _score_markup(player.total_score), str(player.games_played))
        self.console.print(table)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/] {message}")
