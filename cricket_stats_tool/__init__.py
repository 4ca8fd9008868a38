"""Cricket match records and career statistics."""

from .models import MatchRecord, Player, PlayerStatistics
from .overs import format_overs, total_balls, validate_overs
from .service import InMemoryRecordSource, RecordSource, StatsService
from .stats import compute_all_stats, compute_stats, team_summary

__all__ = [
    "MatchRecord",
    "Player",
    "PlayerStatistics",
    "format_overs",
    "total_balls",
    "validate_overs",
    "InMemoryRecordSource",
    "RecordSource",
    "StatsService",
    "compute_all_stats",
    "compute_stats",
    "team_summary",
]
