# app/services/guesses.py
import logging
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import AlreadyGuessedError, NotFoundError, ValidationError
from ..models.guess import Guess
from ..schemas.guess import GuessResult
from .facts import _find_facts, check_date_key
from .rooms import is_active_member
from .store import require_text, store_call

logger = logging.getLogger(__name__)


def _find_guess(
    db: Session, guesser_id: str, target_id: str, room_id: int, date: str
) -> Optional[Guess]:
    return (
        db.query(Guess)
        .filter(
            Guess.player_id == guesser_id,
            Guess.aim_id == target_id,
            Guess.room_id == room_id,
            Guess.date == date,
        )
        .one_or_none()
    )


@store_call("record_guess")
def record_guess(
    db: Session,
    guesser_id: str,
    target_id: str,
    room_id: int,
    date: Optional[str],
    chosen_statement: str,
) -> GuessResult:
    date = check_date_key(date)
    chosen = require_text(chosen_statement, "chosen statement")

    if guesser_id == target_id:
        raise ValidationError("Player cannot guess their own facts")

    if not is_active_member(db, guesser_id, room_id):
        raise NotFoundError(f"Player {guesser_id} is not an active member of room {room_id}")

    if _find_guess(db, guesser_id, target_id, room_id, date) is not None:
        raise AlreadyGuessedError("You have already guessed this player's facts today")

    target_facts = _find_facts(db, target_id, room_id, date)
    if target_facts is None:
        raise NotFoundError(f"Player {target_id} has not submitted facts for {date}")

    if chosen not in target_facts.statements:
        raise ValidationError("Chosen statement is not one of the target's facts")

    # 嘘は fact3 固定
    is_correct = chosen == target_facts.false_statement

    guess = Guess(
        id=str(uuid.uuid4()),
        player_id=guesser_id,
        aim_id=target_id,
        room_id=room_id,
        date=date,
        chosen_fact=chosen,
        is_correct=is_correct,
    )
    db.add(guess)
    try:
        db.commit()
    except IntegrityError as e:
        # 同じリクエストが同時に来た：先に入った方が残る
        db.rollback()
        raise AlreadyGuessedError("You have already guessed this player's facts today") from e

    logger.info(
        "guess recorded: guesser=%s target=%s room=%s date=%s correct=%s",
        guesser_id, target_id, room_id, date, is_correct,
    )
    return GuessResult(is_correct=is_correct)


@store_call("has_guessed")
def has_guessed(
    db: Session, guesser_id: str, target_id: str, room_id: int, date: Optional[str] = None
) -> bool:
    return _find_guess(db, guesser_id, target_id, room_id, check_date_key(date)) is not None


@store_call("guessed_target_ids")
def guessed_target_ids(
    db: Session, guesser_id: str, room_id: int, date: Optional[str] = None
) -> set[str]:
    rows = (
        db.query(Guess.aim_id)
        .filter(
            Guess.player_id == guesser_id,
            Guess.room_id == room_id,
            Guess.date == check_date_key(date),
        )
        .all()
    )
    return {aim_id for (aim_id,) in rows}
