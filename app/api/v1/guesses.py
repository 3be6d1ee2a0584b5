# app/api/v1/guesses.py

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.deps import get_db_dep
from ...schemas.guess import GuessCreate, GuessResult, HasGuessedOut
from ...services import guesses as guess_ledger

router = APIRouter(prefix="/rooms/{room_id}/guesses", tags=["guesses"])


@router.post("", response_model=GuessResult)
def record_guess(
    room_id: int,
    data: GuessCreate,
    db: Session = Depends(get_db_dep),
):
    return guess_ledger.record_guess(
        db, data.guesser_id, data.target_id, room_id, data.date, data.chosen_fact
    )


@router.get("/exists", response_model=HasGuessedOut)
def has_guessed(
    room_id: int,
    guesser_id: str,
    target_id: str,
    date: Optional[str] = None,
    db: Session = Depends(get_db_dep),
):
    return HasGuessedOut(
        guesser_id=guesser_id,
        target_id=target_id,
        has_guessed=guess_ledger.has_guessed(db, guesser_id, target_id, room_id, date),
    )
