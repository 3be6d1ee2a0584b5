# app/api/v1/players.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.deps import get_db_dep
from ...schemas.player import PlayerRegister, PlayerOut, ProfileUpdate
from ...schemas.room import RoomOut
from ...services import players as player_registry
from ...services import rooms as room_registry

router = APIRouter(prefix="/players", tags=["players"])


@router.post("/register", response_model=PlayerOut)
def register_player(
    data: PlayerRegister,
    db: Session = Depends(get_db_dep),
):
    """初回登録（同じIDなら上書き）"""
    return player_registry.register_player(
        db, data.user, data.name, data.surname, data.position
    )


@router.get("/{player_id}", response_model=PlayerOut)
def get_player(
    player_id: str,
    db: Session = Depends(get_db_dep),
):
    return player_registry.get_player(db, player_id)


@router.put("/{player_id}", response_model=PlayerOut)
def update_profile(
    player_id: str,
    data: ProfileUpdate,
    db: Session = Depends(get_db_dep),
):
    """プロフィール編集（名前・名字・役職）"""
    return player_registry.update_profile(
        db, player_id, data.name, data.surname, data.position
    )


@router.get("/{player_id}/rooms", response_model=list[RoomOut])
def list_my_rooms(
    player_id: str,
    db: Session = Depends(get_db_dep),
):
    """参加中（部屋もメンバーシップも active）の部屋一覧"""
    return room_registry.list_active_rooms_for(db, player_id)
