# app/services/scoring.py
"""
結果画面の集計。

正解判定は書き込み時に済んでいるので、ここでは数えるだけ。
fact1 / fact2 を選んだ当てっこは定義上つねに不正解になる。
"""
from typing import Optional

from sqlalchemy.orm import Session

from ..models.guess import Guess
from ..models.player import Player
from ..schemas.stats import FactGuess, FactStats, MyStats, Results
from .facts import _find_facts, check_date_key
from .store import store_call


def accuracy_pct(correct: int, total: int) -> int:
    """四捨五入した正答率（%）。total=0 なら 0"""
    if total <= 0:
        return 0
    # round() は偶数丸めなので整数演算で half-up にする
    return (correct * 200 + total) // (2 * total)


@store_call("my_stats")
def my_stats(db: Session, player_id: str, room_id: int, date: Optional[str] = None) -> MyStats:
    rows = (
        db.query(Guess.is_correct)
        .filter(
            Guess.player_id == player_id,
            Guess.room_id == room_id,
            Guess.date == check_date_key(date),
        )
        .all()
    )
    total = len(rows)
    correct = sum(1 for (is_correct,) in rows if is_correct)
    return MyStats(total=total, correct=correct, accuracy_pct=accuracy_pct(correct, total))


@store_call("fact_breakdown")
def fact_breakdown(
    db: Session, player_id: str, room_id: int, date: Optional[str] = None
) -> list[FactStats]:
    date = check_date_key(date)
    facts = _find_facts(db, player_id, room_id, date)
    if facts is None:
        return []

    guesses = (
        db.query(Guess)
        .filter(
            Guess.aim_id == player_id,
            Guess.room_id == room_id,
            Guess.date == date,
        )
        .order_by(Guess.created_at)
        .all()
    )

    guesser_ids = {g.player_id for g in guesses}
    names: dict[str, str] = {}
    if guesser_ids:
        for p in db.query(Player).filter(Player.id.in_(guesser_ids)).all():
            names[p.id] = p.name

    result: list[FactStats] = []
    for statement in facts.statements:
        picked = [
            FactGuess(
                guesser_name=names.get(g.player_id, "Unknown"),
                is_correct=g.is_correct,
            )
            for g in guesses
            if g.chosen_fact == statement
        ]
        result.append(
            FactStats(
                statement=statement,
                guesses=picked,
                total_guesses=len(picked),
                correct_guesses=sum(1 for g in picked if g.is_correct),
            )
        )
    return result


def room_results(db: Session, player_id: str, room_id: int, date: Optional[str] = None) -> Results:
    date = check_date_key(date)
    return Results(
        room_id=room_id,
        date=date,
        my_stats=my_stats(db, player_id, room_id, date),
        facts=fact_breakdown(db, player_id, room_id, date),
    )
