# app/services/facts.py
"""
1日1回のファクト提出。

提出は insert のみ（上書きしない）。同じ (player, room, date) の2回目は
DuplicateSubmissionError。当てっこが始まった後に内容が変わらないようにするため。
嘘は常に fact3。
"""
import logging
import random
import uuid
from datetime import date as date_cls
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DuplicateSubmissionError, NotFoundError, ValidationError
from ..models.fact import FactSet
from ..models.player import Player
from ..schemas.fact import PlayerWithFacts
from .rooms import is_active_member
from .store import require_text, store_call

logger = logging.getLogger(__name__)


def today_key() -> str:
    """UTC の今日 'YYYY-MM-DD'"""
    return datetime.now(timezone.utc).date().isoformat()


def check_date_key(value: Optional[str]) -> str:
    if value is None:
        return today_key()
    try:
        return date_cls.fromisoformat(value).isoformat()
    except (TypeError, ValueError) as e:
        raise ValidationError(f"date must be YYYY-MM-DD, got {value!r}") from e


def _find_facts(db: Session, player_id: str, room_id: int, date: str) -> Optional[FactSet]:
    return (
        db.query(FactSet)
        .filter(
            FactSet.player_id == player_id,
            FactSet.room_id == room_id,
            FactSet.date == date,
        )
        .one_or_none()
    )


@store_call("submit_facts")
def submit_facts(
    db: Session,
    player_id: str,
    room_id: int,
    date: Optional[str],
    fact1: str,
    fact2: str,
    fact3: str,
) -> FactSet:
    statements = [
        require_text(fact1, "fact1"),
        require_text(fact2, "fact2"),
        require_text(fact3, "fact3"),
    ]
    # 同じ文が2つあると、1回の当てっこが複数スロットに数えられる
    if len(set(statements)) != len(statements):
        raise ValidationError("The three statements must be different")
    date = check_date_key(date)

    if not is_active_member(db, player_id, room_id):
        raise NotFoundError(f"Player {player_id} is not an active member of room {room_id}")

    if _find_facts(db, player_id, room_id, date) is not None:
        raise DuplicateSubmissionError("Facts for today have already been submitted")

    facts = FactSet(
        id=str(uuid.uuid4()),
        player_id=player_id,
        room_id=room_id,
        date=date,
        fact1=statements[0],
        fact2=statements[1],
        fact3=statements[2],
    )
    db.add(facts)
    try:
        db.commit()
    except IntegrityError as e:
        # 別タブからの同時提出
        db.rollback()
        raise DuplicateSubmissionError("Facts for today have already been submitted") from e

    db.refresh(facts)
    logger.info("facts submitted: player=%s room=%s date=%s", player_id, room_id, date)
    return facts


@store_call("get_facts")
def get_facts(db: Session, player_id: str, room_id: int, date: Optional[str] = None) -> Optional[FactSet]:
    return _find_facts(db, player_id, room_id, check_date_key(date))


@store_call("list_submitted_today")
def list_submitted_today(
    db: Session,
    room_id: int,
    date: Optional[str] = None,
    *,
    rng: Optional[random.Random] = None,
) -> list[PlayerWithFacts]:
    """
    その日に提出済みのプレイヤー一覧。
    facts は表示用にシャッフルする（順番に意味はない）。
    """
    date = check_date_key(date)
    rng = rng or random.Random()

    rows = (
        db.query(FactSet, Player)
        .join(Player, FactSet.player_id == Player.id)
        .filter(
            FactSet.room_id == room_id,
            FactSet.date == date,
        )
        .order_by(FactSet.created_at)
        .all()
    )

    items: list[PlayerWithFacts] = []
    for fs, player in rows:
        shuffled = fs.statements[:]
        rng.shuffle(shuffled)
        items.append(
            PlayerWithFacts(
                player_id=player.id,
                name=player.name,
                surname=player.surname,
                position=player.position,
                facts=shuffled,
            )
        )
    return items
