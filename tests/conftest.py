from datetime import date

import pytest
from fastapi.testclient import TestClient

from cricket_stats_tool import db
from cricket_stats_tool.api import create_app
from cricket_stats_tool.models import MatchRecord, Player


@pytest.fixture
def db_path(tmp_path):
    """Fresh sqlite file for each test."""
    path = tmp_path / "cricket.db"
    db.init_db(path)
    return path


@pytest.fixture
def client(db_path):
    """TestClient bound to the temporary database."""
    with TestClient(create_app(db_path)) as c:
        yield c


@pytest.fixture
def make_record():
    """Build MatchRecord values with sensible defaults and unique ids."""
    counter = {"next_id": 1}

    def _make(player_id=1, match_date=date(2024, 5, 1), **fields):
        record_id = fields.pop("id", counter["next_id"])
        counter["next_id"] = record_id + 1
        return MatchRecord(id=record_id, player_id=player_id, date=match_date, **fields)

    return _make


@pytest.fixture
def alice():
    return Player(id=1, name="Alice", role="Batsman")


@pytest.fixture
def bob():
    return Player(id=2, name="Bob", role="Bowler")
