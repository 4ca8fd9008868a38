from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import date
from pathlib import Path
from typing import Any, Iterable

from .loader import normalize_role, to_count, to_date
from .models import DEFAULT_ROLE, MatchRecord, Player
from .overs import validate_overs
from .secrets import get_db_path

DEFAULT_ROSTER = ("Himanshu", "Kuldeep", "Monti", "Ronaldo", "Jitu", "Dilip")

PLAYER_FIELDS = ("name", "role", "image_url")
COUNT_FIELDS = ("runs", "balls_faced", "fours", "sixes", "wickets", "runs_conceded")
RECORD_FIELDS = (
    "player_id",
    "date",
    *COUNT_FIELDS,
    "overs_bowled",
    "wicket_taken_by",
)

_RECORD_COLUMNS = """
    id, player_id, match_date, runs, balls_faced, fours, sixes,
    wickets, overs_bowled, runs_conceded, wicket_taken_by
"""

logger = logging.getLogger(__name__)


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    path = Path(db_path) if db_path is not None else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_db(db_path: str | Path | None = None) -> None:
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)


def _ensure_schema(conn: sqlite3.Connection) -> None:
    statements = [
        """
        CREATE TABLE IF NOT EXISTS players (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL COLLATE NOCASE UNIQUE,
            role TEXT NOT NULL DEFAULT 'All-rounder',
            image_url TEXT,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS match_records (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            player_id INTEGER NOT NULL,
            match_date TEXT NOT NULL,
            runs INTEGER NOT NULL DEFAULT 0 CHECK (runs >= 0),
            balls_faced INTEGER NOT NULL DEFAULT 0 CHECK (balls_faced >= 0),
            fours INTEGER NOT NULL DEFAULT 0 CHECK (fours >= 0),
            sixes INTEGER NOT NULL DEFAULT 0 CHECK (sixes >= 0),
            wickets INTEGER NOT NULL DEFAULT 0 CHECK (wickets >= 0),
            overs_bowled TEXT NOT NULL DEFAULT '0.0',
            runs_conceded INTEGER NOT NULL DEFAULT 0 CHECK (runs_conceded >= 0),
            wicket_taken_by INTEGER,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (player_id) REFERENCES players(id) ON DELETE CASCADE,
            FOREIGN KEY (wicket_taken_by) REFERENCES players(id) ON DELETE SET NULL
        );
        """,
        "CREATE INDEX IF NOT EXISTS idx_match_records_player ON match_records(player_id);",
        "CREATE INDEX IF NOT EXISTS idx_match_records_date ON match_records(match_date);",
    ]

    for stmt in statements:
        conn.execute(stmt)


def _normalize_player_name(name: str | None) -> str:
    cleaned = str(name or "").strip()
    if not cleaned:
        raise ValueError("Player name is required")
    return cleaned


def _normalize_image_url(image_url: str | None) -> str | None:
    cleaned = str(image_url or "").strip()
    return cleaned or None


def _row_to_player(row: sqlite3.Row) -> Player:
    return Player(
        id=int(row["id"]),
        name=str(row["name"]),
        role=str(row["role"]),
        image_url=row["image_url"],
    )


def _row_to_record(row: sqlite3.Row) -> MatchRecord:
    taken_by = row["wicket_taken_by"]
    return MatchRecord(
        id=int(row["id"]),
        player_id=int(row["player_id"]),
        date=date.fromisoformat(str(row["match_date"])),
        runs=int(row["runs"]),
        balls_faced=int(row["balls_faced"]),
        fours=int(row["fours"]),
        sixes=int(row["sixes"]),
        wickets=int(row["wickets"]),
        overs_bowled=str(row["overs_bowled"]),
        runs_conceded=int(row["runs_conceded"]),
        wicket_taken_by=None if taken_by is None else int(taken_by),
    )


def _player_exists(conn: sqlite3.Connection, player_id: int) -> bool:
    row = conn.execute("SELECT 1 FROM players WHERE id = ?", (int(player_id),)).fetchone()
    return row is not None


def _insert_player(conn: sqlite3.Connection, name: str, role: str, image_url: str | None) -> int:
    try:
        cur = conn.execute(
            "INSERT INTO players(name, role, image_url) VALUES(?, ?, ?)",
            (name, role, image_url),
        )
    except sqlite3.IntegrityError:
        raise ValueError(f"Player '{name}' already exists") from None
    return int(cur.lastrowid)


def create_player(
    name: str,
    role: str | None = DEFAULT_ROLE,
    image_url: str | None = None,
    db_path: str | Path | None = None,
) -> Player:
    cleaned_name = _normalize_player_name(name)
    normalized_role = normalize_role(role)
    cleaned_image = _normalize_image_url(image_url)

    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        player_id = _insert_player(conn, cleaned_name, normalized_role, cleaned_image)

    logger.info("Created player %s (id=%s)", cleaned_name, player_id)
    return Player(id=player_id, name=cleaned_name, role=normalized_role, image_url=cleaned_image)


def get_player(player_id: int, db_path: str | Path | None = None) -> Player | None:
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        row = conn.execute(
            "SELECT id, name, role, image_url FROM players WHERE id = ?",
            (int(player_id),),
        ).fetchone()
    return _row_to_player(row) if row else None


def get_player_by_name(name: str, db_path: str | Path | None = None) -> Player | None:
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        row = conn.execute(
            "SELECT id, name, role, image_url FROM players WHERE name = ? COLLATE NOCASE",
            (str(name or "").strip(),),
        ).fetchone()
    return _row_to_player(row) if row else None


def list_players(db_path: str | Path | None = None) -> list[Player]:
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        rows = conn.execute("SELECT id, name, role, image_url FROM players ORDER BY id").fetchall()
    return [_row_to_player(r) for r in rows]


def count_players(db_path: str | Path | None = None) -> int:
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        row = conn.execute("SELECT COUNT(*) AS n FROM players").fetchone()
    return int(row["n"])


def update_player(
    player_id: int,
    changes: dict[str, Any],
    db_path: str | Path | None = None,
) -> Player | None:
    unknown = set(changes) - set(PLAYER_FIELDS)
    if unknown:
        raise ValueError(f"Unknown player fields: {sorted(unknown)}")

    existing = get_player(player_id, db_path)
    if existing is None:
        return None

    name = _normalize_player_name(changes["name"]) if "name" in changes else existing.name
    role = normalize_role(changes["role"]) if "role" in changes else existing.role
    image_url = (
        _normalize_image_url(changes["image_url"]) if "image_url" in changes else existing.image_url
    )

    with closing(get_connection(db_path)) as conn, conn:
        try:
            conn.execute(
                """
                UPDATE players
                SET name = ?, role = ?, image_url = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (name, role, image_url, int(player_id)),
            )
        except sqlite3.IntegrityError:
            raise ValueError(f"Player '{name}' already exists") from None

    logger.info("Updated player id=%s", player_id)
    return Player(id=existing.id, name=name, role=role, image_url=image_url)


def delete_player(player_id: int, db_path: str | Path | None = None) -> bool:
    """Delete a player together with all of their match records."""
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        cur = conn.execute("DELETE FROM players WHERE id = ?", (int(player_id),))
    deleted = cur.rowcount > 0
    if deleted:
        logger.info("Deleted player id=%s and their match records", player_id)
    return deleted


def seed_players(
    names: Iterable[str] = DEFAULT_ROSTER,
    db_path: str | Path | None = None,
) -> list[Player]:
    """Create the default roster, only when the store has no players yet."""
    created: list[Player] = []
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        row = conn.execute("SELECT COUNT(*) AS n FROM players").fetchone()
        if int(row["n"]) > 0:
            return created
        for name in names:
            cleaned = _normalize_player_name(name)
            player_id = _insert_player(conn, cleaned, DEFAULT_ROLE, None)
            created.append(Player(id=player_id, name=cleaned))

    logger.info("Seeded %d players", len(created))
    return created


def _clean_record_fields(conn: sqlite3.Connection, fields: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    if "player_id" in fields:
        player_id = to_count(fields["player_id"], "player_id")
        if not _player_exists(conn, player_id):
            raise ValueError(f"Player {player_id} does not exist")
        cleaned["player_id"] = player_id
    if "date" in fields:
        cleaned["match_date"] = to_date(fields["date"]).isoformat()
    for field in COUNT_FIELDS:
        if field in fields:
            cleaned[field] = to_count(fields[field], field)
    if "overs_bowled" in fields:
        overs = fields["overs_bowled"]
        cleaned["overs_bowled"] = validate_overs("0" if overs is None else overs)
    if "wicket_taken_by" in fields:
        taken_by = fields["wicket_taken_by"]
        if taken_by is not None:
            taken_by = to_count(taken_by, "wicket_taken_by")
            if not _player_exists(conn, taken_by):
                raise ValueError(f"Dismissing player {taken_by} does not exist")
        cleaned["wicket_taken_by"] = taken_by
    return cleaned


def add_match_record(
    player_id: int,
    match_date: date | str,
    runs: int = 0,
    balls_faced: int = 0,
    fours: int = 0,
    sixes: int = 0,
    wickets: int = 0,
    overs_bowled: str = "0",
    runs_conceded: int = 0,
    wicket_taken_by: int | None = None,
    db_path: str | Path | None = None,
) -> MatchRecord:
    fields = {
        "player_id": player_id,
        "date": match_date,
        "runs": runs,
        "balls_faced": balls_faced,
        "fours": fours,
        "sixes": sixes,
        "wickets": wickets,
        "overs_bowled": overs_bowled,
        "runs_conceded": runs_conceded,
        "wicket_taken_by": wicket_taken_by,
    }

    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        cleaned = _clean_record_fields(conn, fields)
        columns = ", ".join(cleaned)
        placeholders = ", ".join("?" for _ in cleaned)
        cur = conn.execute(
            f"INSERT INTO match_records({columns}) VALUES({placeholders})",
            tuple(cleaned.values()),
        )
        row = conn.execute(
            f"SELECT {_RECORD_COLUMNS} FROM match_records WHERE id = ?",
            (int(cur.lastrowid),),
        ).fetchone()

    record = _row_to_record(row)
    logger.info("Added match record id=%s for player id=%s", record.id, record.player_id)
    return record


def get_match_record(record_id: int, db_path: str | Path | None = None) -> MatchRecord | None:
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        row = conn.execute(
            f"SELECT {_RECORD_COLUMNS} FROM match_records WHERE id = ?",
            (int(record_id),),
        ).fetchone()
    return _row_to_record(row) if row else None


def list_match_records(
    player_id: int | None = None,
    db_path: str | Path | None = None,
) -> list[MatchRecord]:
    """Match history, most recent match first."""
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        if player_id is None:
            rows = conn.execute(
                f"SELECT {_RECORD_COLUMNS} FROM match_records ORDER BY match_date DESC, id DESC"
            ).fetchall()
        else:
            rows = conn.execute(
                f"""
                SELECT {_RECORD_COLUMNS} FROM match_records
                WHERE player_id = ?
                ORDER BY match_date DESC, id DESC
                """,
                (int(player_id),),
            ).fetchall()
    return [_row_to_record(r) for r in rows]


def update_match_record(
    record_id: int,
    changes: dict[str, Any],
    db_path: str | Path | None = None,
) -> MatchRecord | None:
    unknown = set(changes) - set(RECORD_FIELDS)
    if unknown:
        raise ValueError(f"Unknown match record fields: {sorted(unknown)}")

    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        exists = conn.execute(
            "SELECT 1 FROM match_records WHERE id = ?", (int(record_id),)
        ).fetchone()
        if exists is None:
            return None

        cleaned = _clean_record_fields(conn, changes)
        if cleaned:
            assignments = ", ".join(f"{column} = ?" for column in cleaned)
            conn.execute(
                f"""
                UPDATE match_records
                SET {assignments}, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (*cleaned.values(), int(record_id)),
            )
        row = conn.execute(
            f"SELECT {_RECORD_COLUMNS} FROM match_records WHERE id = ?",
            (int(record_id),),
        ).fetchone()

    logger.info("Updated match record id=%s", record_id)
    return _row_to_record(row)


def delete_match_record(record_id: int, db_path: str | Path | None = None) -> bool:
    with closing(get_connection(db_path)) as conn, conn:
        _ensure_schema(conn)
        cur = conn.execute("DELETE FROM match_records WHERE id = ?", (int(record_id),))
    deleted = cur.rowcount > 0
    if deleted:
        logger.info("Deleted match record id=%s", record_id)
    return deleted


class SQLiteRecordSource:
    """Record source backed by the sqlite store."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = db_path

    def list_players(self) -> list[Player]:
        return list_players(self.db_path)

    def list_match_records(self) -> list[MatchRecord]:
        return list_match_records(db_path=self.db_path)
