# app/api/v1/rooms.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.deps import get_db_dep
from ...schemas.room import RoomCreate, RoomJoinRequest, RoomOut
from ...services import rooms as room_registry

router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
)


# -----------------------------
# 部屋の作成・取得・終了
# -----------------------------

@router.post("", response_model=RoomOut)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db_dep),
):
    return room_registry.create_room(db, data.creator_id, data.name)


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: int, db: Session = Depends(get_db_dep)):
    return room_registry.get_active_room(db, room_id)


@router.delete("/{room_id}", status_code=204)
def close_room(
    room_id: int,
    requester_id: str,
    db: Session = Depends(get_db_dep),
):
    """作成者だけが部屋を閉じられる（履歴は残す）"""
    room_registry.deactivate_room(db, room_id, requester_id)


# -----------------------------
# 参加・退出
# -----------------------------

@router.post("/{room_id}/join", response_model=RoomOut)
def join_room(
    room_id: int,
    data: RoomJoinRequest,
    db: Session = Depends(get_db_dep),
):
    """参加（退出済みなら再参加）"""
    return room_registry.join_room(db, data.player_id, room_id)


@router.post("/{room_id}/leave", status_code=204)
def leave_room(
    room_id: int,
    data: RoomJoinRequest,
    db: Session = Depends(get_db_dep),
):
    room_registry.leave_room(db, data.player_id, room_id)
