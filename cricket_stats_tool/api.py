"""
api.py - FastAPI application for the cricket stats tracker.

Provides REST API endpoints:
- GET /health: System status check
- GET /api/players: Every player with career statistics
- GET /api/players/{id}: One player with career statistics
- POST/PATCH/DELETE /api/players: Roster maintenance
- GET/POST /api/stats, GET/PATCH/DELETE /api/stats/{id}: Match records
- GET /api/stats/monthly: Runs and wickets for one calendar month
- GET /api/summary: Total matches, top run scorer and top wicket taker
- GET /api/head-to-head: Dismissal counts between two players

Statistics are recomputed from the record store on every request.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status

from . import db, schemas
from .secrets import configure_logging, get_db_path, load_env_files
from .service import StatsService

logger = logging.getLogger(__name__)

PLAYER_NOT_FOUND = "Player not found"
RECORD_NOT_FOUND = "Match record not found"


def get_store_path(request: Request) -> Path:
    return request.app.state.db_path


def get_service(db_path: Path = Depends(get_store_path)) -> StatsService:
    return StatsService(db.SQLiteRecordSource(db_path))


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def create_app(db_path: Optional[Union[str, Path]] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        db.init_db(app.state.db_path)
        logger.info("Record store ready at %s", app.state.db_path)
        yield
        logger.info("Shutting down cricket stats API")

    app = FastAPI(
        title="Cricket Stats API",
        description="Match records and career statistics for a small cricket roster",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.db_path = Path(db_path) if db_path is not None else get_db_path()

    # =========================================================================
    # HEALTH CHECK
    # =========================================================================

    @app.get("/health", response_model=schemas.HealthResponse)
    def health_check(db_path: Path = Depends(get_store_path)):
        return {
            "status": "healthy",
            "database": "connected",
            "player_count": db.count_players(db_path),
        }

    # =========================================================================
    # PLAYER ENDPOINTS
    # =========================================================================

    @app.get("/api/players", response_model=List[schemas.PlayerStatisticsOut])
    def list_player_statistics(service: StatsService = Depends(get_service)):
        return [s.to_dict() for s in service.list_all_player_statistics()]

    @app.get("/api/players/{player_id}", response_model=schemas.PlayerStatisticsOut)
    def get_player_statistics(player_id: int, service: StatsService = Depends(get_service)):
        stats = service.get_player_statistics(player_id)
        if stats is None:
            raise HTTPException(status_code=404, detail=PLAYER_NOT_FOUND)
        return stats.to_dict()

    @app.post("/api/players", response_model=schemas.PlayerOut, status_code=status.HTTP_201_CREATED)
    def create_player(payload: schemas.PlayerCreate, db_path: Path = Depends(get_store_path)):
        try:
            return db.create_player(payload.name, payload.role, payload.image_url, db_path=db_path)
        except ValueError as exc:
            raise _bad_request(exc) from exc

    @app.patch("/api/players/{player_id}", response_model=schemas.PlayerOut)
    def update_player(
        player_id: int,
        payload: schemas.PlayerUpdate,
        db_path: Path = Depends(get_store_path),
    ):
        try:
            player = db.update_player(player_id, payload.model_dump(exclude_unset=True), db_path=db_path)
        except ValueError as exc:
            raise _bad_request(exc) from exc
        if player is None:
            raise HTTPException(status_code=404, detail=PLAYER_NOT_FOUND)
        return player

    @app.delete("/api/players/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_player(player_id: int, db_path: Path = Depends(get_store_path)):
        if not db.delete_player(player_id, db_path=db_path):
            raise HTTPException(status_code=404, detail=PLAYER_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # =========================================================================
    # MATCH RECORD ENDPOINTS
    # =========================================================================

    @app.get("/api/stats", response_model=List[schemas.MatchRecordOut])
    def list_match_records(
        player_id: Optional[int] = Query(None, description="Only this player's records"),
        db_path: Path = Depends(get_store_path),
    ):
        return db.list_match_records(player_id, db_path=db_path)

    @app.post("/api/stats", response_model=schemas.MatchRecordOut, status_code=status.HTTP_201_CREATED)
    def add_match_record(payload: schemas.MatchRecordCreate, db_path: Path = Depends(get_store_path)):
        try:
            return db.add_match_record(
                player_id=payload.player_id,
                match_date=payload.date,
                runs=payload.runs,
                balls_faced=payload.balls_faced,
                fours=payload.fours,
                sixes=payload.sixes,
                wickets=payload.wickets,
                overs_bowled=payload.overs_bowled,
                runs_conceded=payload.runs_conceded,
                wicket_taken_by=payload.wicket_taken_by,
                db_path=db_path,
            )
        except ValueError as exc:
            raise _bad_request(exc) from exc

    @app.get("/api/stats/monthly", response_model=List[schemas.MonthlySummaryOut])
    def monthly_statistics(
        year: int = Query(..., ge=1900, le=9999),
        month: int = Query(..., ge=1, le=12),
        service: StatsService = Depends(get_service),
    ):
        return [
            {
                "id": s.player.id,
                "name": s.player.name,
                "year": s.year,
                "month": s.month,
                "matches": s.matches,
                "runs": s.runs,
                "wickets": s.wickets,
            }
            for s in service.monthly_statistics(year, month)
        ]

    @app.get("/api/stats/{record_id}", response_model=schemas.MatchRecordOut)
    def get_match_record(record_id: int, db_path: Path = Depends(get_store_path)):
        record = db.get_match_record(record_id, db_path=db_path)
        if record is None:
            raise HTTPException(status_code=404, detail=RECORD_NOT_FOUND)
        return record

    @app.patch("/api/stats/{record_id}", response_model=schemas.MatchRecordOut)
    def update_match_record(
        record_id: int,
        payload: schemas.MatchRecordUpdate,
        db_path: Path = Depends(get_store_path),
    ):
        try:
            record = db.update_match_record(record_id, payload.model_dump(exclude_unset=True), db_path=db_path)
        except ValueError as exc:
            raise _bad_request(exc) from exc
        if record is None:
            raise HTTPException(status_code=404, detail=RECORD_NOT_FOUND)
        return record

    @app.delete("/api/stats/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_match_record(record_id: int, db_path: Path = Depends(get_store_path)):
        if not db.delete_match_record(record_id, db_path=db_path):
            raise HTTPException(status_code=404, detail=RECORD_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # =========================================================================
    # TEAM SUMMARY
    # =========================================================================

    @app.get("/api/summary", response_model=schemas.TeamSummaryOut)
    def team_summary(service: StatsService = Depends(get_service)):
        summary = service.team_summary()
        return {
            "total_matches": summary.total_matches,
            "top_run_scorer": summary.top_run_scorer.to_dict() if summary.top_run_scorer else None,
            "top_wicket_taker": summary.top_wicket_taker.to_dict() if summary.top_wicket_taker else None,
        }

    # =========================================================================
    # HEAD TO HEAD
    # =========================================================================

    @app.get("/api/head-to-head", response_model=schemas.HeadToHeadOut)
    def head_to_head(
        player_one: int = Query(..., description="First player id"),
        player_two: int = Query(..., description="Second player id"),
        service: StatsService = Depends(get_service),
    ):
        try:
            result = service.head_to_head(player_one, player_two)
        except ValueError as exc:
            raise _bad_request(exc) from exc
        if result is None:
            raise HTTPException(status_code=404, detail=PLAYER_NOT_FOUND)
        return {
            "player_one": result.player_one,
            "player_two": result.player_two,
            "one_dismissed_by_two": result.one_dismissed_by_two,
            "two_dismissed_by_one": result.two_dismissed_by_one,
        }

    return app


load_env_files()
app = create_app()
