from __future__ import annotations

import argparse
import csv
import io
import logging
import sys
from pathlib import Path

from . import db
from .loader import load_match_entries
from .models import DEFAULT_ROLE, Player, PlayerStatistics
from .secrets import configure_logging, load_env_files
from .service import StatsService

STATS_COLUMNS = (
    "player_id",
    "name",
    "role",
    "matches",
    "total_runs",
    "total_balls",
    "batting_average",
    "strike_rate",
    "fifties",
    "hundreds",
    "best_batting",
    "total_wickets",
    "overs_bowled",
    "bowling_average",
    "economy_rate",
    "best_bowling",
)
STATS_HEADER = ",".join(STATS_COLUMNS)
MONTHLY_COLUMNS = ("rank", "player_id", "name", "matches", "runs", "wickets")

logger = logging.getLogger(__name__)
load_env_files()


def _stats_row(s: PlayerStatistics) -> list[object]:
    p = s.player
    return [
        p.id,
        p.name,
        p.role,
        s.matches,
        s.total_runs,
        s.total_balls,
        f"{s.batting_average:.2f}",
        f"{s.strike_rate:.2f}",
        s.fifties,
        s.hundreds,
        s.best_batting,
        s.total_wickets,
        s.overs_bowled,
        f"{s.bowling_average:.2f}",
        f"{s.economy_rate:.2f}",
        s.best_bowling,
    ]


def _emit(rows: list[list[object]], output_path: str | None) -> None:
    # names and free-text roles may hold commas or quotes
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerows(rows)
    payload = buffer.getvalue()
    if output_path:
        Path(output_path).write_text(payload, encoding="utf-8")
    else:
        sys.stdout.write(payload)


def run_init_db(db_path: str | None, seed: bool) -> int:
    db.init_db(db_path)
    if seed:
        created = db.seed_players(db_path=db_path)
        print(f"Seeded {len(created)} players")
    return 0


def run_add_player(db_path: str | None, name: str, role: str, image_url: str | None) -> int:
    player = db.create_player(name, role, image_url, db_path=db_path)
    print(f"{player.id},{player.name},{player.role}")
    return 0


def run_add_match(db_path: str | None, args: argparse.Namespace) -> int:
    record = db.add_match_record(
        player_id=args.player_id,
        match_date=args.date,
        runs=args.runs,
        balls_faced=args.balls_faced,
        fours=args.fours,
        sixes=args.sixes,
        wickets=args.wickets,
        overs_bowled=args.overs,
        runs_conceded=args.runs_conceded,
        wicket_taken_by=args.wicket_taken_by,
        db_path=db_path,
    )
    print(f"Added match record {record.id}")
    return 0


def run_import(db_path: str | None, csv_path: str) -> int:
    entries = load_match_entries(csv_path)

    # the store decides which spellings name the same player
    names = {e.player_name for e in entries} | {e.dismissed_by for e in entries if e.dismissed_by}
    players_by_name: dict[str, Player | None] = {
        name: db.get_player_by_name(name, db_path) for name in names
    }
    missing = sorted(name for name, player in players_by_name.items() if player is None)
    if missing:
        raise ValueError(f"Unknown players in CSV: {missing}. Add them with add-player first.")

    for e in entries:
        dismissed_by = players_by_name[e.dismissed_by].id if e.dismissed_by else None
        db.add_match_record(
            player_id=players_by_name[e.player_name].id,
            match_date=e.date,
            runs=e.runs,
            balls_faced=e.balls_faced,
            fours=e.fours,
            sixes=e.sixes,
            wickets=e.wickets,
            overs_bowled=e.overs_bowled,
            runs_conceded=e.runs_conceded,
            wicket_taken_by=dismissed_by,
            db_path=db_path,
        )

    logger.info("Imported %d match records from %s", len(entries), csv_path)
    print(f"Imported {len(entries)} match records")
    return 0


def run_stats(db_path: str | None, player_id: int | None, output_path: str | None) -> int:
    service = StatsService(db.SQLiteRecordSource(db_path))

    if player_id is not None:
        stats = service.get_player_statistics(player_id)
        if stats is None:
            print(f"Player {player_id} not found", file=sys.stderr)
            return 1
        rows = [stats]
    else:
        rows = service.list_all_player_statistics()

    _emit([list(STATS_COLUMNS), *(_stats_row(s) for s in rows)], output_path)
    return 0


def run_monthly(db_path: str | None, year: int, month: int, output_path: str | None) -> int:
    service = StatsService(db.SQLiteRecordSource(db_path))
    rows: list[list[object]] = [list(MONTHLY_COLUMNS)]
    for rank, s in enumerate(service.monthly_statistics(year, month), start=1):
        rows.append([rank, s.player.id, s.player.name, s.matches, s.runs, s.wickets])
    _emit(rows, output_path)
    return 0


def run_summary(db_path: str | None) -> int:
    summary = StatsService(db.SQLiteRecordSource(db_path)).team_summary()
    top_bat, top_bowl = summary.top_run_scorer, summary.top_wicket_taker
    print(f"Total matches: {summary.total_matches}")
    if top_bat is None or top_bowl is None:
        print("No players yet")
        return 0
    print(f"Top run scorer: {top_bat.player.name} ({top_bat.total_runs})")
    print(f"Top wicket taker: {top_bowl.player.name} ({top_bowl.total_wickets})")
    return 0


def run_head_to_head(db_path: str | None, player_one: int, player_two: int) -> int:
    service = StatsService(db.SQLiteRecordSource(db_path))
    result = service.head_to_head(player_one, player_two)
    if result is None:
        print("Player not found", file=sys.stderr)
        return 1

    one, two = result.player_one, result.player_two
    print(f"{one.name} dismissed by {two.name}: {result.one_dismissed_by_two}")
    print(f"{two.name} dismissed by {one.name}: {result.two_dismissed_by_one}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cricket match records and career statistics")
    parser.add_argument("--db", required=False, help="Path to the sqlite database")
    parser.add_argument("--log-level", required=False, help="Logging level, e.g. DEBUG")
    sub = parser.add_subparsers(dest="command", required=True)

    init_cmd = sub.add_parser("init-db", help="Create the database schema")
    init_cmd.add_argument("--seed", action="store_true", help="Add the default roster when empty")

    player_cmd = sub.add_parser("add-player", help="Add a player to the roster")
    player_cmd.add_argument("--name", required=True)
    player_cmd.add_argument("--role", default=DEFAULT_ROLE)
    player_cmd.add_argument("--image-url", required=False)

    match_cmd = sub.add_parser("add-match", help="Record one player's match performance")
    match_cmd.add_argument("--player-id", type=int, required=True)
    match_cmd.add_argument("--date", required=True, help="Match date YYYY-MM-DD")
    match_cmd.add_argument("--runs", type=int, default=0)
    match_cmd.add_argument("--balls-faced", type=int, default=0)
    match_cmd.add_argument("--fours", type=int, default=0)
    match_cmd.add_argument("--sixes", type=int, default=0)
    match_cmd.add_argument("--wickets", type=int, default=0)
    match_cmd.add_argument("--overs", default="0", help="Overs bowled as whole.balls, e.g. 3.4")
    match_cmd.add_argument("--runs-conceded", type=int, default=0)
    match_cmd.add_argument("--wicket-taken-by", type=int, required=False, help="Id of the dismissing player")

    import_cmd = sub.add_parser("import", help="Import match records from CSV")
    import_cmd.add_argument("--csv", required=True, help="Path to scorecard CSV")

    stats_cmd = sub.add_parser("stats", help="Career statistics as CSV")
    stats_cmd.add_argument("--player-id", type=int, required=False)
    stats_cmd.add_argument("--output", required=False, help="Optional output CSV path")

    monthly_cmd = sub.add_parser("monthly", help="Runs and wickets for one month")
    monthly_cmd.add_argument("--year", type=int, required=True)
    monthly_cmd.add_argument("--month", type=int, required=True)
    monthly_cmd.add_argument("--output", required=False, help="Optional output CSV path")

    sub.add_parser("summary", help="Total matches and the run and wicket leaders")

    h2h_cmd = sub.add_parser("h2h", help="How often two players dismissed each other")
    h2h_cmd.add_argument("--player-one", type=int, required=True)
    h2h_cmd.add_argument("--player-two", type=int, required=True)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "init-db":
        return run_init_db(args.db, args.seed)
    if args.command == "add-player":
        return run_add_player(args.db, args.name, args.role, args.image_url)
    if args.command == "add-match":
        return run_add_match(args.db, args)
    if args.command == "import":
        return run_import(args.db, args.csv)
    if args.command == "stats":
        return run_stats(args.db, args.player_id, args.output)
    if args.command == "monthly":
        return run_monthly(args.db, args.year, args.month, args.output)
    if args.command == "summary":
        return run_summary(args.db)
    if args.command == "h2h":
        return run_head_to_head(args.db, args.player_one, args.player_two)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
