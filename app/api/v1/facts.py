# app/api/v1/facts.py

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.deps import get_db_dep
from ...schemas.fact import FactSetOut, FactSubmit, PlayerWithFacts
from ...services import facts as fact_store

router = APIRouter(prefix="/rooms/{room_id}/facts", tags=["facts"])


@router.post("", response_model=FactSetOut)
def submit_facts(
    room_id: int,
    data: FactSubmit,
    db: Session = Depends(get_db_dep),
):
    """今日の3つ（fact3 が嘘）。1日1回だけ"""
    return fact_store.submit_facts(
        db, data.player_id, room_id, data.date, data.fact1, data.fact2, data.fact3
    )


@router.get("", response_model=list[PlayerWithFacts])
def list_submitted(
    room_id: int,
    date: Optional[str] = None,
    db: Session = Depends(get_db_dep),
):
    return fact_store.list_submitted_today(db, room_id, date)
