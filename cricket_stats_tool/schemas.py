"""
schemas.py - Pydantic schemas for API request/response validation.

Request bodies are checked here before they reach the record store; the
overs grammar (whole overs, then an optional ball count 0-5) is enforced
for every match record that comes in over HTTP.
"""

import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import DEFAULT_ROLE, ROLES
from .overs import validate_overs


# =============================================================================
# PLAYER SCHEMAS
# =============================================================================

class PlayerCreate(BaseModel):
    """Schema for adding a player to the roster."""
    name: str = Field(..., min_length=1, description="Display name")
    role: Optional[str] = Field(DEFAULT_ROLE, description=f"One of {', '.join(ROLES)}; other text is kept as entered")
    image_url: Optional[str] = Field(None, description="Optional picture reference")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Player name is required")
        return value.strip()


class PlayerUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = None
    image_url: Optional[str] = None


class PlayerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    role: str
    image_url: Optional[str] = None


# =============================================================================
# MATCH RECORD SCHEMAS
# =============================================================================

OversInput = Union[str, int, float]


def _check_overs(value: Optional[OversInput]) -> Optional[str]:
    if value is None:
        return None
    return validate_overs(value)


class MatchRecordCreate(BaseModel):
    """One player's performance in one match."""
    player_id: int = Field(..., description="Player who batted/bowled")
    date: datetime.date = Field(..., description="Match date (YYYY-MM-DD)")
    runs: int = Field(0, ge=0)
    balls_faced: int = Field(0, ge=0)
    fours: int = Field(0, ge=0)
    sixes: int = Field(0, ge=0)
    wickets: int = Field(0, ge=0)
    overs_bowled: OversInput = Field("0", description="Overs as whole.balls, e.g. 4 or 4.2")
    runs_conceded: int = Field(0, ge=0)
    wicket_taken_by: Optional[int] = Field(None, description="Player who took this player's wicket")

    @field_validator("overs_bowled")
    @classmethod
    def overs_grammar(cls, value: OversInput) -> str:
        return validate_overs(value)


class MatchRecordUpdate(BaseModel):
    player_id: Optional[int] = None
    date: Optional[datetime.date] = None
    runs: Optional[int] = Field(None, ge=0)
    balls_faced: Optional[int] = Field(None, ge=0)
    fours: Optional[int] = Field(None, ge=0)
    sixes: Optional[int] = Field(None, ge=0)
    wickets: Optional[int] = Field(None, ge=0)
    overs_bowled: Optional[OversInput] = None
    runs_conceded: Optional[int] = Field(None, ge=0)
    wicket_taken_by: Optional[int] = None

    @field_validator("overs_bowled")
    @classmethod
    def overs_grammar(cls, value: Optional[OversInput]) -> Optional[str]:
        return _check_overs(value)


class MatchRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    player_id: int
    date: datetime.date
    runs: int
    balls_faced: int
    fours: int
    sixes: int
    wickets: int
    overs_bowled: str
    runs_conceded: int
    wicket_taken_by: Optional[int] = None


# =============================================================================
# DERIVED STATISTICS SCHEMAS
# =============================================================================

class PlayerStatisticsOut(BaseModel):
    """A player with career figures computed at read time."""
    id: int
    name: str
    role: str
    image_url: Optional[str] = None
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
    best_bowling: str = Field(..., description="Best figures as wickets/runs, or N/A")
    balls_bowled: int
    overs_bowled: str
    runs_conceded: int
    total_fours: int
    total_sixes: int


class MonthlySummaryOut(BaseModel):
    id: int
    name: str
    year: int
    month: int
    matches: int
    runs: int
    wickets: int


class TeamSummaryOut(BaseModel):
    total_matches: int = Field(..., description="Match appearances summed over every player")
    top_run_scorer: Optional[PlayerStatisticsOut] = None
    top_wicket_taker: Optional[PlayerStatisticsOut] = None


class HeadToHeadOut(BaseModel):
    player_one: PlayerOut
    player_two: PlayerOut
    one_dismissed_by_two: int = Field(..., description="Times player two got player one out")
    two_dismissed_by_one: int = Field(..., description="Times player one got player two out")


# =============================================================================
# HEALTH CHECK
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    database: str
    player_count: int
