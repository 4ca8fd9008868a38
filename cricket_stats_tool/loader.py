from __future__ import annotations

import csv
import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from .models import DEFAULT_ROLE
from .overs import validate_overs


CANONICAL_COLUMNS = {
    "player_name": ["player_name", "player name", "player", "name"],
    "date": ["date", "match_date", "match date"],
    "runs": ["runs", "r", "runs_scored", "runs scored"],
    "balls_faced": ["balls_faced", "balls faced", "balls", "b"],
    "fours": ["fours", "4s"],
    "sixes": ["sixes", "6s"],
    "wickets": ["wickets", "wkts", "w"],
    "overs_bowled": ["overs_bowled", "overs bowled", "overs", "o"],
    "runs_conceded": ["runs_conceded", "runs conceded", "conceded", "bowling runs"],
    "dismissed_by": ["dismissed_by", "dismissed by", "wicket_taken_by", "wicket taken by", "out by"],
}

REQUIRED_COLUMNS = ("player_name", "date")

ROLE_ALIASES = {
    "batsman": "Batsman",
    "batter": "Batsman",
    "bat": "Batsman",
    "bowler": "Bowler",
    "bowl": "Bowler",
    "allrounder": "All-rounder",
    "all_rounder": "All-rounder",
    "ar": "All-rounder",
    "wicket_keeper": "Wicket-keeper",
    "wicketkeeper": "Wicket-keeper",
    "wk": "Wicket-keeper",
    "keeper": "Wicket-keeper",
}


@dataclass(frozen=True)
class MatchEntry:
    player_name: str
    date: date
    runs: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    wickets: int = 0
    overs_bowled: str = "0.0"
    runs_conceded: int = 0
    dismissed_by: str | None = None


def to_count(value: object, field: str = "value") -> int:
    """Parse a non-negative whole number; blank means zero."""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse {field} from '{value}'")
    if isinstance(value, int):
        number = value
    else:
        token = str(value).strip().replace(",", "")
        if token == "":
            return 0
        if not re.fullmatch(r"-?\d+", token):
            raise ValueError(f"Cannot parse {field} from '{value}'")
        number = int(token)
    if number < 0:
        raise ValueError(f"{field} cannot be negative")
    return number


def to_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    token = str(value or "").strip()
    if token == "":
        raise ValueError("Match date is required")
    try:
        return date.fromisoformat(token)
    except ValueError:
        raise ValueError(f"Invalid match date '{value}'. Use YYYY-MM-DD.") from None


def normalize_role(role: str | None) -> str:
    cleaned = str(role or "").strip()
    if cleaned == "":
        return DEFAULT_ROLE
    key = re.sub(r"[\s-]+", "_", cleaned.lower())
    # free text roles are kept as entered
    return ROLE_ALIASES.get(key, cleaned)


def _normalize_column(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")


def _resolve_columns(fieldnames: list[str]) -> dict[str, str]:
    normalized_to_original = {_normalize_column(col): col for col in fieldnames}
    resolved: dict[str, str] = {}

    for canonical, aliases in CANONICAL_COLUMNS.items():
        for alias in aliases:
            normalized_alias = _normalize_column(alias)
            if normalized_alias in normalized_to_original:
                resolved[canonical] = normalized_to_original[normalized_alias]
                break

    missing = [c for c in REQUIRED_COLUMNS if c not in resolved]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    return resolved


def _parse_row(row: dict[str, str], column_map: dict[str, str]) -> MatchEntry:
    def cell(field: str) -> str:
        column = column_map.get(field)
        if column is None:
            return ""
        return (row.get(column) or "").strip()

    player_name = cell("player_name")
    if not player_name:
        raise ValueError("Player name is required")

    overs_text = cell("overs_bowled")
    dismissed_by = cell("dismissed_by")
    return MatchEntry(
        player_name=player_name,
        date=to_date(cell("date")),
        runs=to_count(cell("runs"), "runs"),
        balls_faced=to_count(cell("balls_faced"), "balls faced"),
        fours=to_count(cell("fours"), "fours"),
        sixes=to_count(cell("sixes"), "sixes"),
        wickets=to_count(cell("wickets"), "wickets"),
        overs_bowled=validate_overs(overs_text or "0"),
        runs_conceded=to_count(cell("runs_conceded"), "runs conceded"),
        dismissed_by=dismissed_by or None,
    )


def load_match_entries(csv_path: str | Path) -> list[MatchEntry]:
    path = Path(csv_path)
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError("CSV has no header")
        column_map = _resolve_columns(reader.fieldnames)

        entries: list[MatchEntry] = []
        for row in reader:
            try:
                entries.append(_parse_row(row, column_map))
            except ValueError as exc:
                raise ValueError(f"{path.name} line {reader.line_num}: {exc}") from exc

    return entries
