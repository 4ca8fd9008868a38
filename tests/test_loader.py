from datetime import date

import pytest

from cricket_stats_tool.loader import load_match_entries, normalize_role, to_count


def _write(tmp_path, text):
    path = tmp_path / "scorecard.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_match_entries_resolves_column_aliases(tmp_path):
    path = _write(
        tmp_path,
        "Player,Date,R,B,4s,6s,Wkts,O,Conceded,Dismissed By\n"
        "Alice,2024-05-01,54,40,6,1,0,0,0,Bob\n"
        "Bob,2024-05-01,3,5,0,0,2,3.4,21,\n",
    )
    entries = load_match_entries(path)

    assert len(entries) == 2
    alice, bob = entries
    assert alice.player_name == "Alice"
    assert alice.date == date(2024, 5, 1)
    assert (alice.runs, alice.balls_faced, alice.fours, alice.sixes) == (54, 40, 6, 1)
    assert alice.dismissed_by == "Bob"
    assert bob.overs_bowled == "3.4"
    assert (bob.wickets, bob.runs_conceded) == (2, 21)
    assert bob.dismissed_by is None


def test_optional_columns_default_to_zero(tmp_path):
    path = _write(tmp_path, "player_name,date\nAlice,2024-05-01\n")
    (entry,) = load_match_entries(path)

    assert entry.runs == 0
    assert entry.overs_bowled == "0.0"


def test_missing_required_column(tmp_path):
    path = _write(tmp_path, "player_name,runs\nAlice,10\n")
    with pytest.raises(ValueError, match="Missing required columns"):
        load_match_entries(path)


def test_bad_overs_names_the_line(tmp_path):
    path = _write(tmp_path, "player,date,overs\nAlice,2024-05-01,1.0\nBob,2024-05-01,2.7\n")
    with pytest.raises(ValueError, match="line 3"):
        load_match_entries(path)


def test_to_count():
    assert to_count("1,024") == 1024
    assert to_count("") == 0
    assert to_count(None) == 0
    with pytest.raises(ValueError):
        to_count("-3")
    with pytest.raises(ValueError):
        to_count("12.5")


def test_normalize_role():
    assert normalize_role("All Rounder") == "All-rounder"
    assert normalize_role("WK") == "Wicket-keeper"
    assert normalize_role(None) == "All-rounder"
    assert normalize_role("Opener") == "Opener"
