# app/services/rooms.py
"""
部屋とメンバーシップの管理。

- 部屋は削除せず is_active=False にする
- 退出も行削除ではなく RoomMember.is_active=False（再参加で True に戻す）
- (room_id, user_id) の一意制約が同時参加の競合を最終的に解決する
"""
import logging
import random
import uuid
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.room import Room, RoomMember
from .players import _get_player
from .store import require_text, run_in_store, store_call

logger = logging.getLogger(__name__)


def generate_room_id() -> int:
    settings = get_settings()
    return random.randint(settings.room_id_min, settings.room_id_max)


def _find_membership(db: Session, player_id: str, room_id: int) -> Optional[RoomMember]:
    return (
        db.query(RoomMember)
        .filter(
            RoomMember.room_id == room_id,
            RoomMember.user_id == player_id,
        )
        .one_or_none()
    )


def _get_active_room(db: Session, room_id: int) -> Room:
    room = db.get(Room, room_id)
    if room is None or not room.is_active:
        raise NotFoundError(f"Room {room_id} not found")
    return room


# -----------------------------
# 作成
# -----------------------------

def _insert_room(db: Session, room_id: int, name: str, creator_id: str) -> Optional[Room]:
    """部屋と作成者のメンバー行を1トランザクションで入れる。ID が埋まっていたら None"""
    if db.get(Room, room_id) is not None:
        return None

    room = Room(id=room_id, name=name, created_by=creator_id, is_active=True)
    db.add(room)
    # 作成者は自動でメンバー
    db.add(
        RoomMember(
            id=str(uuid.uuid4()),
            room_id=room_id,
            user_id=creator_id,
            is_active=True,
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # 別リクエストが同じIDを先に取った
        db.rollback()
        return None
    return room


def create_room(
    db: Session,
    creator_id: str,
    name: str,
    *,
    id_factory: Callable[[], int] = generate_room_id,
) -> Room:
    name = require_text(name, "room name")
    run_in_store(db, lambda: _get_player(db, creator_id), label="create_room")

    max_attempts = max(1, get_settings().room_id_max_attempts)
    for attempt in range(1, max_attempts + 1):
        room_id = id_factory()
        room = run_in_store(
            db, lambda: _insert_room(db, room_id, name, creator_id), label="create_room"
        )
        if room is None:
            logger.warning(
                "room id %s already taken (attempt %d/%d)", room_id, attempt, max_attempts
            )
            continue

        # commit 済みなので、ここから先のリトライは読み直しだけ
        run_in_store(db, lambda: db.refresh(room), label="create_room")
        logger.info("room created: id=%s creator=%s", room.id, creator_id)
        return room

    raise ConflictError(f"Could not allocate a free room id after {max_attempts} attempts")


# -----------------------------
# 参加・退出
# -----------------------------

@store_call("join_room")
def join_room(db: Session, player_id: str, room_id: int) -> Room:
    room = _get_active_room(db, room_id)
    _get_player(db, player_id)

    member = _find_membership(db, player_id, room_id)
    if member is None:
        db.add(
            RoomMember(
                id=str(uuid.uuid4()),
                room_id=room_id,
                user_id=player_id,
                is_active=True,
            )
        )
        try:
            db.commit()
            logger.info("player %s joined room %s", player_id, room_id)
        except IntegrityError:
            # 同じプレイヤーの同時参加：先に入った行を使う
            db.rollback()
            member = _find_membership(db, player_id, room_id)
            if member is None:
                raise ConflictError(f"Could not join room {room_id}")

    if member is not None and not member.is_active:
        member.is_active = True
        db.commit()
        logger.info("player %s reactivated membership in room %s", player_id, room_id)

    db.refresh(room)
    return room


@store_call("leave_room")
def leave_room(db: Session, player_id: str, room_id: int) -> None:
    member = _find_membership(db, player_id, room_id)
    if member is None:
        raise NotFoundError(f"Player {player_id} is not a member of room {room_id}")

    if member.is_active:
        member.is_active = False
        db.commit()
        logger.info("player %s left room %s", player_id, room_id)


@store_call("deactivate_room")
def deactivate_room(db: Session, room_id: int, requester_id: str) -> None:
    room = db.get(Room, room_id)
    if room is None:
        raise NotFoundError(f"Room {room_id} not found")
    if room.created_by != requester_id:
        raise ValidationError("Only the room creator can close the room")

    if room.is_active:
        room.is_active = False
        db.commit()
        logger.info("room %s deactivated by %s", room_id, requester_id)


# -----------------------------
# 参照
# -----------------------------

@store_call("list_active_rooms_for")
def list_active_rooms_for(db: Session, player_id: str) -> list[Room]:
    return (
        db.query(Room)
        .join(RoomMember, RoomMember.room_id == Room.id)
        .filter(
            RoomMember.user_id == player_id,
            RoomMember.is_active == True,  # noqa: E712
            Room.is_active == True,  # noqa: E712
        )
        .order_by(RoomMember.joined_at)
        .all()
    )


@store_call("get_active_room")
def get_active_room(db: Session, room_id: int) -> Room:
    return _get_active_room(db, room_id)


def is_active_member(db: Session, player_id: str, room_id: int) -> bool:
    member = _find_membership(db, player_id, room_id)
    if member is None or not member.is_active:
        return False
    room = db.get(Room, room_id)
    return room is not None and room.is_active
