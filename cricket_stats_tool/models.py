from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

ROLES = ("Batsman", "Bowler", "All-rounder", "Wicket-keeper")
DEFAULT_ROLE = "All-rounder"


@dataclass(frozen=True)
class Player:
    id: int
    name: str
    role: str = DEFAULT_ROLE
    image_url: str | None = None


@dataclass(frozen=True)
class MatchRecord:
    id: int
    player_id: int
    date: date
    runs: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    wickets: int = 0
    # "whole.balls" text, 4.3 is four overs and three balls
    overs_bowled: str = "0"
    runs_conceded: int = 0
    wicket_taken_by: int | None = None


@dataclass(frozen=True)
class PlayerStatistics:
    """Career figures derived from a player's match records. Never stored."""

    player: Player
    matches: int
    total_runs: int
    total_balls: int
    total_wickets: int
    batting_average: float
    strike_rate: float
    bowling_average: float
    economy_rate: float
    fifties: int
    hundreds: int
    best_batting: int
    best_bowling: str
    balls_bowled: int = 0
    overs_bowled: str = "0.0"
    runs_conceded: int = 0
    total_fours: int = 0
    total_sixes: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.player.id,
            "name": self.player.name,
            "role": self.player.role,
            "image_url": self.player.image_url,
            "matches": self.matches,
            "total_runs": self.total_runs,
            "total_balls": self.total_balls,
            "total_wickets": self.total_wickets,
            "batting_average": self.batting_average,
            "strike_rate": self.strike_rate,
            "bowling_average": self.bowling_average,
            "economy_rate": self.economy_rate,
            "fifties": self.fifties,
            "hundreds": self.hundreds,
            "best_batting": self.best_batting,
            "best_bowling": self.best_bowling,
            "balls_bowled": self.balls_bowled,
            "overs_bowled": self.overs_bowled,
            "runs_conceded": self.runs_conceded,
            "total_fours": self.total_fours,
            "total_sixes": self.total_sixes,
        }


@dataclass(frozen=True)
class MonthlySummary:
    player: Player
    year: int
    month: int
    matches: int
    runs: int
    wickets: int


@dataclass(frozen=True)
class HeadToHead:
    player_one: Player
    player_two: Player
    one_dismissed_by_two: int
    two_dismissed_by_one: int


@dataclass(frozen=True)
class TeamSummary:
    total_matches: int
    top_run_scorer: PlayerStatistics | None
    top_wicket_taker: PlayerStatistics | None
