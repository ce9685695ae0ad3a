from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .application import build_manager
from .core.config import load_settings
from .core.errors import ChouetteError, PlayerNotFoundError
from .core.models import Seat
from .core.scoring import PolicyName
from .features.session import SessionManager
from .ui.presenters import RichPresenter


def _resolve(manager: SessionManager, ref: str) -> str:
    """Map a player name (case-insensitive) or id to a player id."""

    players = manager.roster.get_all_players()
    for player in players:
        if player.id == ref:
            return player.id
    needle = ref.strip().lower()
    for player in players:
        if player.name.lower() == needle:
            return player.id
    raise PlayerNotFoundError(f"unknown player '{ref}'")


def _parse_score(token: str) -> tuple[str, int]:
    name, sep, value = token.rpartition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=SCORE, got '{token}'")
    try:
        return name, int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"score for '{name}' must be an integer") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chouette", description="Chouette scoreboard (CLI)")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory holding session and roster files")
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in PolicyName],
        default=None,
        help="Score entry policy (default from CHOUETTE_SCORE_POLICY)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("show", help="Show the current seating and scores")
    sub.add_parser("players", help="List known players")
    add = sub.add_parser("add-player", help="Register a new player")
    add.add_argument("name")
    remove = sub.add_parser("remove-player", help="Delete a player who is not seated")
    remove.add_argument("player")

    seat = sub.add_parser("seat", help="Assign (or clear) the Box or Captain seat during setup")
    seat.add_argument("seat", choices=[s.value for s in Seat])
    seat.add_argument("player", nargs="?", default=None)

    queue = sub.add_parser("queue", help="Replace the team queue order")
    queue.add_argument("players", nargs="*")

    start = sub.add_parser("start", help="Start the game with the current (or given) seating")
    start.add_argument("--box", default=None)
    start.add_argument("--captain", default=None)
    start.add_argument("--queue", nargs="*", default=None)

    score = sub.add_parser("score", help="Submit a game's scores as NAME=SCORE pairs")
    score.add_argument("entries", nargs="+", type=_parse_score)

    sit = sub.add_parser("sit-out", help="Toggle a seated player's sitting-out flag")
    sit.add_argument("player")

    sub.add_parser("end", help="End the chouette and record lifetime totals")
    sub.add_parser("clear", help="Discard the current session")
    return parser


def _run(args: argparse.Namespace, manager: SessionManager, presenter: RichPresenter) -> None:
    command = args.command or "show"
    if command == "show":
        presenter.show_session(manager.snapshot())
    elif command == "players":
        presenter.show_players(manager.players())
    elif command == "add-player":
        player = manager.roster.create_player(args.name)
        presenter.console.print(f"Added [bold]{player.name}[/] ({player.id})")
    elif command == "remove-player":
        manager.remove_player(_resolve(manager, args.player))
        presenter.show_players(manager.players())
    elif command == "seat":
        player_id = _resolve(manager, args.player) if args.player else None
        manager.assign_seat(Seat(args.seat), player_id)
        presenter.show_session(manager.snapshot())
    elif command == "queue":
        manager.set_queue([_resolve(manager, ref) for ref in args.players])
        presenter.show_session(manager.snapshot())
    elif command == "start":
        manager.start_game(
            _resolve(manager, args.box) if args.box else None,
            _resolve(manager, args.captain) if args.captain else None,
            [_resolve(manager, ref) for ref in args.queue] if args.queue is not None else None,
        )
        presenter.show_session(manager.snapshot())
    elif command == "score":
        entries = {_resolve(manager, name): value for name, value in args.entries}
        result = manager.submit_scores(entries)
        presenter.show_score_result(manager.score_result(result))
    elif command == "sit-out":
        manager.toggle_sitting_out(_resolve(manager, args.player))
        presenter.show_session(manager.snapshot())
    elif command == "end":
        names = {player.id: player.name for player in manager.roster.get_all_players()}
        final_scores, _ = manager.end_chouette()
        presenter.show_final_scores(final_scores, names)
    elif command == "clear":
        manager.clear_session()
        presenter.show_session(manager.snapshot())


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    settings = load_settings()
    if args.data_dir:
        settings = replace(settings, data_dir=Path(args.data_dir).expanduser())
    if args.policy:
        settings = replace(settings, score_policy=PolicyName(args.policy))

    presenter = RichPresenter(no_color=args.no_color)
    try:
        manager = build_manager(settings)
        _run(args, manager, presenter)
    except ChouetteError as exc:
        presenter.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
