import csv
import io

import pytest

from cricket_stats_tool import db
from cricket_stats_tool.cli import STATS_HEADER, main


def _run(db_path, *args):
    return main(["--db", str(db_path), *args])


def test_init_db_with_seed(db_path, capsys):
    assert _run(db_path, "init-db", "--seed") == 0
    assert "Seeded 6 players" in capsys.readouterr().out
    assert len(db.list_players(db_path)) == 6


def test_add_player_and_match_then_stats(db_path, capsys):
    assert _run(db_path, "add-player", "--name", "Alice", "--role", "batter") == 0
    assert _run(
        db_path, "add-match", "--player-id", "1", "--date", "2024-05-01",
        "--runs", "52", "--balls-faced", "40", "--overs", "2.3", "--runs-conceded", "18", "--wickets", "2",
    ) == 0
    capsys.readouterr()

    assert _run(db_path, "stats") == 0
    lines = capsys.readouterr().out.strip().splitlines()

    assert lines[0] == STATS_HEADER
    assert lines[1] == "1,Alice,Batsman,1,52,40,52.00,130.00,1,0,52,2,2.3,9.00,7.20,2/18"


def test_stats_for_unknown_player(db_path, capsys):
    assert _run(db_path, "stats", "--player-id", "77") == 1
    assert "not found" in capsys.readouterr().err


def test_stats_written_to_file(db_path, tmp_path):
    output = tmp_path / "stats.csv"
    db.create_player("Alice", db_path=db_path)

    assert _run(db_path, "stats", "--output", str(output)) == 0
    assert output.read_text(encoding="utf-8").splitlines()[0] == STATS_HEADER


def test_import_csv(db_path, tmp_path, capsys):
    db.create_player("Alice", db_path=db_path)
    db.create_player("Bob", db_path=db_path)
    csv_path = tmp_path / "scores.csv"
    csv_path.write_text(
        "player,date,runs,overs,conceded,dismissed by\n"
        "alice,2024-05-01,12,0,0,Bob\n"
        "Bob,2024-05-01,7,1.2,9,\n",
        encoding="utf-8",
    )

    assert _run(db_path, "import", "--csv", str(csv_path)) == 0
    assert "Imported 2 match records" in capsys.readouterr().out

    records = db.list_match_records(db_path=db_path)
    assert len(records) == 2
    assert {r.wicket_taken_by for r in records} == {2, None}


def test_import_rejects_unknown_players(db_path, tmp_path):
    csv_path = tmp_path / "scores.csv"
    csv_path.write_text("player,date,runs\nZed,2024-05-01,12\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Zed"):
        _run(db_path, "import", "--csv", str(csv_path))


def test_monthly_and_head_to_head(db_path, capsys):
    a = db.create_player("Alice", db_path=db_path)
    b = db.create_player("Bob", db_path=db_path)
    db.add_match_record(a.id, "2024-05-01", runs=12, wicket_taken_by=b.id, db_path=db_path)

    assert _run(db_path, "monthly", "--year", "2024", "--month", "5") == 0
    assert capsys.readouterr().out.splitlines()[1] == "1,1,Alice,1,12,0"

    assert _run(db_path, "h2h", "--player-one", str(a.id), "--player-two", str(b.id)) == 0
    out = capsys.readouterr().out
    assert "Alice dismissed by Bob: 1" in out
    assert "Bob dismissed by Alice: 0" in out


def test_stats_quotes_fields_containing_commas(db_path, capsys):
    db.create_player("Alice", "Opener, captain", db_path=db_path)
    capsys.readouterr()

    assert _run(db_path, "stats") == 0
    header, row = csv.reader(io.StringIO(capsys.readouterr().out))

    assert len(row) == len(header)
    assert row[1:3] == ["Alice", "Opener, captain"]
    assert row[-1] == "N/A"


def test_monthly_quotes_names_containing_commas(db_path, capsys):
    player = db.create_player("Singh, K", db_path=db_path)
    db.add_match_record(player.id, "2024-05-01", runs=12, db_path=db_path)

    assert _run(db_path, "monthly", "--year", "2024", "--month", "5") == 0
    rows = list(csv.reader(io.StringIO(capsys.readouterr().out)))

    assert rows[1] == ["1", str(player.id), "Singh, K", "1", "12", "0"]


def test_import_matches_names_the_way_the_store_does(db_path, tmp_path):
    upper = db.create_player("Ärne", db_path=db_path)
    lower = db.create_player("ärne", db_path=db_path)
    csv_path = tmp_path / "scores.csv"
    csv_path.write_text("player,date,runs\nÄrne,2024-05-01,10\närne,2024-05-02,3\n", encoding="utf-8")

    assert _run(db_path, "import", "--csv", str(csv_path)) == 0

    assert [r.runs for r in db.list_match_records(upper.id, db_path=db_path)] == [10]
    assert [r.runs for r in db.list_match_records(lower.id, db_path=db_path)] == [3]


def test_summary(db_path, capsys):
    a = db.create_player("Alice", db_path=db_path)
    b = db.create_player("Bob", db_path=db_path)
    db.add_match_record(a.id, "2024-05-01", runs=40, db_path=db_path)
    db.add_match_record(b.id, "2024-05-01", runs=8, wickets=3, db_path=db_path)

    assert _run(db_path, "summary") == 0
    out = capsys.readouterr().out.splitlines()

    assert out == ["Total matches: 2", "Top run scorer: Alice (40)", "Top wicket taker: Bob (3)"]


def test_summary_without_players(db_path, capsys):
    assert _run(db_path, "summary") == 0
    assert capsys.readouterr().out.splitlines() == ["Total matches: 0", "No players yet"]
