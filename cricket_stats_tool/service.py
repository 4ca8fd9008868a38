from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Protocol, Sequence

from .models import (
    HeadToHead,
    MatchRecord,
    MonthlySummary,
    Player,
    PlayerStatistics,
    TeamSummary,
)
from .stats import (
    compute_all_stats,
    compute_stats,
    head_to_head,
    monthly_summaries,
    team_summary,
)

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    def list_players(self) -> Sequence[Player]:
        ...

    def list_match_records(self) -> Sequence[MatchRecord]:
        ...


class InMemoryRecordSource:
    def __init__(
        self,
        players: Iterable[Player] = (),
        records: Iterable[MatchRecord] = (),
    ) -> None:
        self.players = list(players)
        self.records = list(records)

    def list_players(self) -> list[Player]:
        return list(self.players)

    def list_match_records(self) -> list[MatchRecord]:
        return list(self.records)


class StatsService:
    """Reads a fresh snapshot from the record source and aggregates it.

    Nothing is cached: every call recomputes from whatever the source holds
    at that moment. Failures raised by the source propagate unchanged.
    """

    def __init__(self, source: RecordSource) -> None:
        self.source = source

    def _snapshot(self) -> tuple[list[Player], list[MatchRecord]]:
        with ThreadPoolExecutor(max_workers=2) as pool:
            players_future = pool.submit(self.source.list_players)
            records_future = pool.submit(self.source.list_match_records)
            players = list(players_future.result())
            records = list(records_future.result())
        logger.debug("Loaded %d players and %d match records", len(players), len(records))
        return players, records

    def list_all_player_statistics(self) -> list[PlayerStatistics]:
        players, records = self._snapshot()
        return compute_all_stats(players, records)

    def get_player_statistics(self, player_id: int) -> PlayerStatistics | None:
        """Return None when no player has this id."""
        players, records = self._snapshot()
        player = _find_player(players, player_id)
        if player is None:
            return None
        return compute_stats(player, [r for r in records if r.player_id == player.id])

    def team_summary(self) -> TeamSummary:
        return team_summary(self.list_all_player_statistics())

    def monthly_statistics(self, year: int, month: int) -> list[MonthlySummary]:
        players, records = self._snapshot()
        return monthly_summaries(players, records, year, month)

    def head_to_head(self, player_one_id: int, player_two_id: int) -> HeadToHead | None:
        if player_one_id == player_two_id:
            raise ValueError("Head to head needs two different players")
        players, records = self._snapshot()
        player_one = _find_player(players, player_one_id)
        player_two = _find_player(players, player_two_id)
        if player_one is None or player_two is None:
            return None
        return head_to_head(player_one, player_two, records)


def _find_player(players: Iterable[Player], player_id: int) -> Player | None:
    return next((p for p in players if p.id == player_id), None)
