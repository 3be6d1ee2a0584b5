# app/api/v1/stats.py

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.deps import get_db_dep
from ...schemas.stats import FactStats, MyStats, Results
from ...services import scoring

router = APIRouter(prefix="/rooms/{room_id}", tags=["stats"])


@router.get("/stats/{player_id}", response_model=MyStats)
def my_stats(
    room_id: int,
    player_id: str,
    date: Optional[str] = None,
    db: Session = Depends(get_db_dep),
):
    return scoring.my_stats(db, player_id, room_id, date)


@router.get("/stats/{player_id}/facts", response_model=list[FactStats])
def fact_breakdown(
    room_id: int,
    player_id: str,
    date: Optional[str] = None,
    db: Session = Depends(get_db_dep),
):
    """自分の3つのファクトそれぞれを誰が選んだか"""
    return scoring.fact_breakdown(db, player_id, room_id, date)


@router.get("/results/{player_id}", response_model=Results)
def results(
    room_id: int,
    player_id: str,
    date: Optional[str] = None,
    db: Session = Depends(get_db_dep),
):
    return scoring.room_results(db, player_id, room_id, date)
