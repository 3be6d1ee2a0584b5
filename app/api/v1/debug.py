# app/api/v1/debug.py

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...api.deps import get_db_dep
from ...db import Base, engine
from ...services import facts as fact_store
from ...services import players as player_registry
from ...services import rooms as room_registry

router = APIRouter(prefix="/debug", tags=["debug"])


class DebugSeedRequest(BaseModel):
    room_name: Optional[str] = None
    room_id: Optional[int] = None
    player_names: Optional[list[str]] = None
    player_count: Optional[int] = None
    submit_facts: bool = True
    date: Optional[str] = None


class DebugSeedPlayer(BaseModel):
    id: str
    name: str
    facts: Optional[list[str]] = None


class DebugSeedOut(BaseModel):
    room_id: int
    date: str
    players: list[DebugSeedPlayer]


@router.post("/reset_and_seed", response_model=DebugSeedOut)
def reset_and_seed(
    data: DebugSeedRequest,
    db: Session = Depends(get_db_dep),
):
    # DB 全消し（開発専用）
    db.close()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    # 参加者名を決定
    if data.player_names:
        names = data.player_names
    else:
        count = data.player_count or 3
        names = [f"Player{i+1}" for i in range(count)]

    date = fact_store.check_date_key(data.date)

    # プレイヤー作成（ID は debug-1, debug-2, ...）
    players = []
    for idx, name in enumerate(names, start=1):
        players.append(
            player_registry.register_player(db, {"id": f"debug-{idx}", "first_name": name}, name)
        )

    # 1人目が部屋を作成、残りは参加
    if data.room_id is not None:
        room = room_registry.create_room(
            db, players[0].id, data.room_name or "Debug Room", id_factory=lambda: data.room_id
        )
    else:
        room = room_registry.create_room(db, players[0].id, data.room_name or "Debug Room")
    for p in players[1:]:
        room_registry.join_room(db, p.id, room.id)

    out: list[DebugSeedPlayer] = []
    for p in players:
        facts = None
        if data.submit_facts:
            facts = [f"{p.name} truth A", f"{p.name} truth B", f"{p.name} lie"]
            fact_store.submit_facts(db, p.id, room.id, date, *facts)
        out.append(DebugSeedPlayer(id=p.id, name=p.name, facts=facts))

    return DebugSeedOut(room_id=room.id, date=date, players=out)
