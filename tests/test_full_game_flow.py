# tests/test_full_game_flow.py
"""
部屋 483920 で A が作成 → A/B が提出 → B が A の嘘を当てる → 2回目は 409
という一連の流れを HTTP 経由で確認する。
"""
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.fact import FactSet
from app.models.guess import Guess
from app.services import rooms as room_registry

DATE = "2026-10-18"


def _register(client: TestClient, pid: str, name: str):
    res = client.post(
        "/api/players/register",
        json={"user": {"id": pid, "first_name": name}, "name": name},
    )
    assert res.status_code == 200


def test_full_day_in_room_483920(client: TestClient, db: Session):
    _register(client, "A", "Anna")
    _register(client, "B", "Boris")

    # 部屋IDを固定
    room = room_registry.create_room(db, "A", "Office", id_factory=lambda: 483920)
    assert room.id == 483920

    res = client.post("/api/rooms/483920/join", json={"player_id": "B"})
    assert res.status_code == 200

    # 1. A と B が提出
    res = client.post(
        "/api/rooms/483920/facts",
        json={
            "player_id": "A",
            "fact1": "plays guitar",
            "fact2": "visited 5 countries",
            "fact3": "knows 10 languages",
            "date": DATE,
        },
    )
    assert res.status_code == 200

    res = client.post(
        "/api/rooms/483920/facts",
        json={"player_id": "B", "fact1": "b1", "fact2": "b2", "fact3": "b3", "date": DATE},
    )
    assert res.status_code == 200

    # 2. B が A の嘘を当てる
    res = client.post(
        "/api/rooms/483920/guesses",
        json={"guesser_id": "B", "target_id": "A", "chosen_fact": "knows 10 languages", "date": DATE},
    )
    assert res.status_code == 200
    assert res.json()["is_correct"] is True

    # 3. A の結果：嘘の文に 1/1 正解
    res = client.get("/api/rooms/483920/stats/A/facts", params={"date": DATE})
    assert res.status_code == 200
    lie = res.json()[2]
    assert lie["statement"] == "knows 10 languages"
    assert lie["total_guesses"] == 1
    assert lie["correct_guesses"] == 1
    assert lie["guesses"] == [{"guesser_name": "Boris", "is_correct": True}]

    res = client.get("/api/rooms/483920/stats/B", params={"date": DATE})
    assert res.json() == {"total": 1, "correct": 1, "accuracy_pct": 100}

    # 4. 同じ日に2回目 → 409
    res = client.post(
        "/api/rooms/483920/guesses",
        json={"guesser_id": "B", "target_id": "A", "chosen_fact": "plays guitar", "date": DATE},
    )
    assert res.status_code == 409
    assert res.json()["code"] == "already_guessed"


def test_leave_and_rejoin_keeps_history(client: TestClient, db: Session):
    _register(client, "A", "Anna")
    _register(client, "B", "Boris")

    room_id = client.post("/api/rooms", json={"creator_id": "A", "name": "History"}).json()["id"]
    client.post(f"/api/rooms/{room_id}/join", json={"player_id": "B"})

    for pid in ("A", "B"):
        res = client.post(
            f"/api/rooms/{room_id}/facts",
            json={"player_id": pid, "fact1": f"{pid}1", "fact2": f"{pid}2", "fact3": f"{pid}3", "date": DATE},
        )
        assert res.status_code == 200
    client.post(
        f"/api/rooms/{room_id}/guesses",
        json={"guesser_id": "B", "target_id": "A", "chosen_fact": "A3", "date": DATE},
    )

    assert client.post(f"/api/rooms/{room_id}/leave", json={"player_id": "B"}).status_code == 204
    assert client.post(f"/api/rooms/{room_id}/join", json={"player_id": "B"}).status_code == 200

    assert db.query(FactSet).filter(FactSet.player_id == "B").count() == 1
    assert db.query(Guess).filter(Guess.player_id == "B").count() == 1
    rooms = client.get("/api/players/B/rooms").json()
    assert [r["id"] for r in rooms] == [room_id]
