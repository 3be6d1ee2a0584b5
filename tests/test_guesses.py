# tests/test_guesses.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.errors import AlreadyGuessedError, NotFoundError, ValidationError
from app.models.guess import Guess
from app.services.facts import submit_facts
from app.services.guesses import guessed_target_ids, has_guessed, record_guess
from app.services.players import register_player
from app.services.rooms import create_room, join_room, leave_room

DATE = "2026-10-18"


def _setup(db: Session) -> int:
    """A, B, C の3人。A と B は提出済み、C は未提出"""
    for pid in ("A", "B", "C"):
        register_player(db, {"id": pid, "first_name": pid}, pid)
    room = create_room(db, "A", "Guess Room")
    join_room(db, "B", room.id)
    join_room(db, "C", room.id)
    submit_facts(db, "A", room.id, DATE, "plays guitar", "visited 5 countries", "knows 10 languages")
    submit_facts(db, "B", room.id, DATE, "has a cat", "runs marathons", "was born on Mars")
    return room.id


def test_choosing_fact3_is_correct(db: Session):
    room_id = _setup(db)
    result = record_guess(db, "B", "A", room_id, DATE, "knows 10 languages")
    assert result.is_correct is True

    row = db.query(Guess).one()
    assert row.player_id == "B"
    assert row.aim_id == "A"
    assert row.chosen_fact == "knows 10 languages"
    assert row.is_correct is True


@pytest.mark.parametrize("chosen", ["plays guitar", "visited 5 countries"])
def test_choosing_a_truth_is_incorrect(db: Session, chosen):
    room_id = _setup(db)
    result = record_guess(db, "B", "A", room_id, DATE, chosen)
    assert result.is_correct is False


def test_second_guess_same_target_same_day_fails_and_keeps_first(db: Session):
    room_id = _setup(db)
    record_guess(db, "B", "A", room_id, DATE, "plays guitar")

    with pytest.raises(AlreadyGuessedError):
        record_guess(db, "B", "A", room_id, DATE, "knows 10 languages")

    rows = db.query(Guess).all()
    assert len(rows) == 1
    assert rows[0].chosen_fact == "plays guitar"
    assert rows[0].is_correct is False


def test_cannot_guess_self(db: Session):
    room_id = _setup(db)
    with pytest.raises(ValidationError):
        record_guess(db, "A", "A", room_id, DATE, "knows 10 languages")


def test_target_without_facts_raises_not_found(db: Session):
    room_id = _setup(db)
    with pytest.raises(NotFoundError):
        record_guess(db, "A", "C", room_id, DATE, "anything")
    # 前日の分もない
    with pytest.raises(NotFoundError):
        record_guess(db, "B", "A", room_id, "2026-10-17", "knows 10 languages")


def test_chosen_statement_must_belong_to_target(db: Session):
    room_id = _setup(db)
    with pytest.raises(ValidationError):
        record_guess(db, "B", "A", room_id, DATE, "has a cat")
    with pytest.raises(ValidationError):
        record_guess(db, "B", "A", room_id, DATE, "   ")
    assert db.query(Guess).count() == 0


def test_has_guessed_and_guessed_targets(db: Session):
    room_id = _setup(db)
    assert not has_guessed(db, "C", "A", room_id, DATE)

    record_guess(db, "C", "A", room_id, DATE, "plays guitar")
    record_guess(db, "C", "B", room_id, DATE, "was born on Mars")

    assert has_guessed(db, "C", "A", room_id, DATE)
    assert not has_guessed(db, "A", "C", room_id, DATE)
    assert guessed_target_ids(db, "C", room_id, DATE) == {"A", "B"}
    assert guessed_target_ids(db, "C", room_id, "2026-10-17") == set()


def test_guess_api(client: TestClient, db: Session):
    room_id = _setup(db)
    payload = {"guesser_id": "B", "target_id": "A", "chosen_fact": "knows 10 languages", "date": DATE}

    res = client.post(f"/api/rooms/{room_id}/guesses", json=payload)
    assert res.status_code == 200
    assert res.json() == {"is_correct": True}

    res = client.post(f"/api/rooms/{room_id}/guesses", json=payload)
    assert res.status_code == 409
    assert res.json()["code"] == "already_guessed"

    res = client.get(
        f"/api/rooms/{room_id}/guesses/exists",
        params={"guesser_id": "B", "target_id": "A", "date": DATE},
    )
    assert res.status_code == 200
    assert res.json()["has_guessed"] is True


def test_guesser_must_be_active_member(db: Session):
    room_id = _setup(db)
    register_player(db, {"id": "X", "first_name": "X"}, "X")  # 登録済みだが未参加

    with pytest.raises(NotFoundError):
        record_guess(db, "X", "A", room_id, DATE, "knows 10 languages")
    # 未登録の ID
    with pytest.raises(NotFoundError):
        record_guess(db, "ghost", "A", room_id, DATE, "knows 10 languages")
    assert db.query(Guess).count() == 0


def test_guesser_who_left_cannot_guess(db: Session):
    room_id = _setup(db)
    leave_room(db, "B", room_id)

    with pytest.raises(NotFoundError):
        record_guess(db, "B", "A", room_id, DATE, "knows 10 languages")

    join_room(db, "B", room_id)
    assert record_guess(db, "B", "A", room_id, DATE, "knows 10 languages").is_correct is True


def test_guess_api_rejects_non_member(client: TestClient, db: Session):
    room_id = _setup(db)
    res = client.post(
        f"/api/rooms/{room_id}/guesses",
        json={"guesser_id": "ghost", "target_id": "A", "chosen_fact": "plays guitar", "date": DATE},
    )
    assert res.status_code == 404
    assert res.json()["code"] == "not_found"
