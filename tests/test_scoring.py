# tests/test_scoring.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.player import Player
from app.services.facts import submit_facts
from app.services.guesses import record_guess
from app.services.players import register_player
from app.services.rooms import create_room, join_room
from app.services.scoring import accuracy_pct, fact_breakdown, my_stats, room_results

DATE = "2026-10-18"


def _setup(db: Session) -> int:
    """A, B, C, D が全員提出済みの部屋"""
    for pid, name in (("A", "Anna"), ("B", "Boris"), ("C", "Clara"), ("D", "Dima")):
        register_player(db, {"id": pid, "first_name": name}, name)
    room = create_room(db, "A", "Score Room")
    for pid in ("B", "C", "D"):
        join_room(db, pid, room.id)
    for pid in ("A", "B", "C", "D"):
        submit_facts(db, pid, room.id, DATE, f"{pid} truth 1", f"{pid} truth 2", f"{pid} lie")
    return room.id


@pytest.mark.parametrize(
    "correct,total,expected",
    [
        (0, 0, 0),
        (0, 3, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 2, 50),
        (1, 8, 13),  # 12.5 → 13（四捨五入）
        (3, 3, 100),
    ],
)
def test_accuracy_pct(correct, total, expected):
    assert accuracy_pct(correct, total) == expected


def test_my_stats_without_guesses_is_zero(db: Session):
    room_id = _setup(db)
    stats = my_stats(db, "A", room_id, DATE)
    assert (stats.total, stats.correct, stats.accuracy_pct) == (0, 0, 0)


def test_my_stats_counts_only_own_guesses_for_that_day(db: Session):
    room_id = _setup(db)
    record_guess(db, "A", "B", room_id, DATE, "B lie")
    record_guess(db, "A", "C", room_id, DATE, "C truth 1")
    record_guess(db, "A", "D", room_id, DATE, "D lie")
    record_guess(db, "B", "A", room_id, DATE, "A lie")

    stats = my_stats(db, "A", room_id, DATE)
    assert stats.total == 3
    assert stats.correct == 2
    assert stats.accuracy_pct == 67

    assert my_stats(db, "A", room_id, "2026-10-17").total == 0


def test_fact_breakdown_groups_guesses_per_statement(db: Session):
    room_id = _setup(db)
    record_guess(db, "B", "A", room_id, DATE, "A lie")
    record_guess(db, "C", "A", room_id, DATE, "A truth 1")
    record_guess(db, "D", "A", room_id, DATE, "A lie")

    breakdown = fact_breakdown(db, "A", room_id, DATE)
    assert [f.statement for f in breakdown] == ["A truth 1", "A truth 2", "A lie"]

    truth1, truth2, lie = breakdown
    assert truth1.total_guesses == 1
    assert truth1.correct_guesses == 0
    assert truth1.guesses[0].guesser_name == "Clara"
    assert truth1.guesses[0].is_correct is False

    assert truth2.total_guesses == 0
    assert truth2.guesses == []

    assert lie.total_guesses == 2
    assert lie.correct_guesses == 2
    assert {g.guesser_name for g in lie.guesses} == {"Boris", "Dima"}


def test_fact_breakdown_without_submission_is_empty(db: Session):
    room_id = _setup(db)
    assert fact_breakdown(db, "A", room_id, "2026-10-17") == []


def test_fact_breakdown_unknown_guesser_name(db: Session):
    room_id = _setup(db)
    record_guess(db, "B", "A", room_id, DATE, "A lie")
    db.query(Player).filter(Player.id == "B").delete()
    db.commit()

    lie = fact_breakdown(db, "A", room_id, DATE)[2]
    assert lie.guesses[0].guesser_name == "Unknown"


def test_room_results_bundles_both(db: Session):
    room_id = _setup(db)
    record_guess(db, "A", "B", room_id, DATE, "B lie")
    record_guess(db, "B", "A", room_id, DATE, "A truth 2")

    results = room_results(db, "A", room_id, DATE)
    assert results.room_id == room_id
    assert results.date == DATE
    assert results.my_stats.accuracy_pct == 100
    assert results.facts[1].total_guesses == 1


def test_stats_api(client: TestClient, db: Session):
    room_id = _setup(db)
    record_guess(db, "A", "B", room_id, DATE, "B truth 1")
    record_guess(db, "C", "A", room_id, DATE, "A lie")

    res = client.get(f"/api/rooms/{room_id}/stats/A", params={"date": DATE})
    assert res.status_code == 200
    assert res.json() == {"total": 1, "correct": 0, "accuracy_pct": 0}

    res = client.get(f"/api/rooms/{room_id}/stats/A/facts", params={"date": DATE})
    assert res.status_code == 200
    facts = res.json()
    assert facts[2]["statement"] == "A lie"
    assert facts[2]["guesses"] == [{"guesser_name": "Clara", "is_correct": True}]

    res = client.get(f"/api/rooms/{room_id}/results/A", params={"date": DATE})
    assert res.status_code == 200
    assert res.json()["my_stats"]["total"] == 1
