from __future__ import annotations

import logging
import math
from decimal import Decimal
from fractions import Fraction
from functools import reduce
from typing import Callable, Iterable, NamedTuple, Sequence, Union

from .models import (
    HeadToHead,
    MatchRecord,
    MonthlySummary,
    Player,
    PlayerStatistics,
    TeamSummary,
)
from .overs import BALLS_PER_OVER, format_overs, total_balls

FIFTY = 50
HUNDRED = 100
NO_BEST_BOWLING = "N/A"

Number = Union[int, float, Decimal, Fraction]

logger = logging.getLogger(__name__)


class _BowlingFigure(NamedTuple):
    wickets: int
    runs_conceded: float


# Any real spell beats this: equal wickets, fewer runs.
_FLOOR = _BowlingFigure(wickets=0, runs_conceded=math.inf)


def round_stat(value: Number) -> float:
    """Round to two decimals, halves away from zero (33.335 -> 33.34)."""
    if isinstance(value, float):
        exact = Fraction(Decimal(repr(value)))
    else:
        exact = Fraction(value)

    scaled = abs(exact) * 100
    hundredths = math.floor(scaled)
    if scaled - hundredths >= Fraction(1, 2):
        hundredths += 1
    result = float(Fraction(hundredths, 100))
    return -result if exact < 0 else result


def _ratio(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return round_stat(Fraction(numerator, denominator))


def _pick_better(best: _BowlingFigure, record: MatchRecord) -> _BowlingFigure:
    if record.wickets > best.wickets:
        return _BowlingFigure(record.wickets, record.runs_conceded)
    if record.wickets == best.wickets and record.runs_conceded < best.runs_conceded:
        return _BowlingFigure(record.wickets, record.runs_conceded)
    return best


def best_bowling(records: Iterable[MatchRecord]) -> str:
    best = reduce(_pick_better, records, _FLOOR)
    if best.wickets == 0 and math.isinf(best.runs_conceded):
        return NO_BEST_BOWLING
    return f"{best.wickets}/{int(best.runs_conceded)}"


def compute_stats(player: Player, records: Sequence[MatchRecord]) -> PlayerStatistics:
    # every record is one match played, there is no did-not-bat state
    matches = len(records)
    total_runs = sum(r.runs for r in records)
    balls_faced = sum(r.balls_faced for r in records)
    total_wickets = sum(r.wickets for r in records)
    runs_conceded = sum(r.runs_conceded for r in records)
    balls_bowled = total_balls(r.overs_bowled for r in records)

    return PlayerStatistics(
        player=player,
        matches=matches,
        total_runs=total_runs,
        total_balls=balls_faced,
        total_wickets=total_wickets,
        batting_average=_ratio(total_runs, matches),
        strike_rate=_ratio(total_runs * 100, balls_faced),
        bowling_average=_ratio(runs_conceded, total_wickets),
        economy_rate=_ratio(runs_conceded * BALLS_PER_OVER, balls_bowled),
        fifties=sum(1 for r in records if FIFTY <= r.runs < HUNDRED),
        hundreds=sum(1 for r in records if r.runs >= HUNDRED),
        best_batting=max((r.runs for r in records), default=0),
        best_bowling=best_bowling(records),
        balls_bowled=balls_bowled,
        overs_bowled=format_overs(balls_bowled),
        runs_conceded=runs_conceded,
        total_fours=sum(r.fours for r in records),
        total_sixes=sum(r.sixes for r in records),
    )


def group_by_player(records: Iterable[MatchRecord]) -> dict[int, list[MatchRecord]]:
    grouped: dict[int, list[MatchRecord]] = {}
    for record in records:
        grouped.setdefault(record.player_id, []).append(record)
    return grouped


def compute_all_stats(
    players: Sequence[Player], records: Iterable[MatchRecord]
) -> list[PlayerStatistics]:
    grouped = group_by_player(records)

    orphans = set(grouped) - {p.id for p in players}
    if orphans:
        logger.debug("Skipping match records for unknown player ids %s", sorted(orphans))

    return [compute_stats(p, grouped.get(p.id, [])) for p in players]


def monthly_summaries(
    players: Sequence[Player],
    records: Iterable[MatchRecord],
    year: int,
    month: int,
) -> list[MonthlySummary]:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    in_month = [r for r in records if r.date.year == year and r.date.month == month]
    grouped = group_by_player(in_month)

    summaries: list[MonthlySummary] = []
    for player in players:
        player_records = grouped.get(player.id, [])
        if not player_records:
            continue
        summaries.append(
            MonthlySummary(
                player=player,
                year=year,
                month=month,
                matches=len(player_records),
                runs=sum(r.runs for r in player_records),
                wickets=sum(r.wickets for r in player_records),
            )
        )

    return sorted(summaries, key=lambda s: s.runs, reverse=True)


def head_to_head(
    player_one: Player, player_two: Player, records: Iterable[MatchRecord]
) -> HeadToHead:
    one_out = 0
    two_out = 0
    for r in records:
        if r.player_id == player_one.id and r.wicket_taken_by == player_two.id:
            one_out += 1
        elif r.player_id == player_two.id and r.wicket_taken_by == player_one.id:
            two_out += 1

    return HeadToHead(
        player_one=player_one,
        player_two=player_two,
        one_dismissed_by_two=one_out,
        two_dismissed_by_one=two_out,
    )


def _leader(
    statistics: Sequence[PlayerStatistics], key: Callable[[PlayerStatistics], int]
) -> PlayerStatistics | None:
    if not statistics:
        return None
    # on a tie the later player in roster order is kept
    return reduce(lambda prev, cur: prev if key(prev) > key(cur) else cur, statistics)


def team_summary(statistics: Sequence[PlayerStatistics]) -> TeamSummary:
    """Dashboard totals: match count across players and the two leaders."""
    return TeamSummary(
        total_matches=sum(s.matches for s in statistics),
        top_run_scorer=_leader(statistics, lambda s: s.total_runs),
        top_wicket_taker=_leader(statistics, lambda s: s.total_wickets),
    )
