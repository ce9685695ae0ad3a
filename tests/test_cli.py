from __future__ import annotations

import json

from chouette import cli


def _run(tmp_path, *args: str) -> int:
    return cli.main(["--data-dir", str(tmp_path), "--no-color", *args])


def test_cli_plays_a_round_and_ends(tmp_path, capsys):
    for name in ("Ann", "Ben", "Cat"):
        assert _run(tmp_path, "add-player", name) == 0

    assert _run(tmp_path, "seat", "box", "ann") == 0
    assert _run(tmp_path, "seat", "captain", "Ben") == 0
    assert _run(tmp_path, "queue", "Cat") == 0
    assert _run(tmp_path, "--policy", "cube", "start") == 0
    assert _run(tmp_path, "--policy", "cube", "score", "Ben=-2", "Cat=-1") == 0

    stored = json.loads((tmp_path / "chouette_session.json").read_text(encoding="utf-8"))
    players = {p["name"]: p["id"] for p in json.loads((tmp_path / "chouette_players.json").read_text(encoding="utf-8"))}
    assert stored["boxPlayerId"] == players["Ann"]
    assert stored["captainPlayerId"] == players["Cat"]
    assert stored["queuePlayerIds"] == [players["Ben"]]
    assert stored["currentChouetteScores"][players["Ann"]] == 3

    assert _run(tmp_path, "end") == 0
    out = capsys.readouterr().out
    assert "Final scores" in out
    totals = {p["name"]: p["totalScore"] for p in json.loads((tmp_path / "chouette_players.json").read_text(encoding="utf-8"))}
    assert totals == {"Ann": 3, "Ben": -2, "Cat": -1}


def test_cli_reports_errors_with_exit_code(tmp_path, capsys):
    assert _run(tmp_path, "score", "Nobody=1") == 1
    assert "Error" in capsys.readouterr().out


def test_cli_zero_sum_policy_rejects_unbalanced(tmp_path, capsys):
    _run(tmp_path, "add-player", "Ann")
    _run(tmp_path, "add-player", "Ben")
    assert _run(tmp_path, "--policy", "zero_sum", "start", "--box", "Ann", "--captain", "Ben") == 0

    assert _run(tmp_path, "--policy", "zero_sum", "score", "Ann=3", "Ben=-1") == 1
    assert "sum to zero" in capsys.readouterr().out
    assert _run(tmp_path, "--policy", "zero_sum", "score", "Ann=3", "Ben=-3") == 0


def test_cli_removes_only_unseated_players(tmp_path, capsys):
    for name in ("Ann", "Ben", "Cat"):
        _run(tmp_path, "add-player", name)
    _run(tmp_path, "seat", "box", "Ann")

    assert _run(tmp_path, "remove-player", "Ann") == 1
    assert "seated" in capsys.readouterr().out
    assert _run(tmp_path, "remove-player", "cat") == 0

    names = [p["name"] for p in json.loads((tmp_path / "chouette_players.json").read_text(encoding="utf-8"))]
    assert names == ["Ann", "Ben"]
