# app/models/room.py
from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    ForeignKey,
    Boolean,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from ..db import Base


class Room(Base):
    __tablename__ = "rooms"

    # 6桁のランダムID（アプリ側で採番）
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)

    created_by = Column(String, ForeignKey("players.id"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    members = relationship("RoomMember", back_populates="room")


class RoomMember(Base):
    __tablename__ = "room_members"

    id = Column(String, primary_key=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("players.id"), nullable=False, index=True)
    # 退出は削除ではなく False にする（再参加で True に戻す）
    is_active = Column(Boolean, default=True, nullable=False)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    room = relationship("Room", back_populates="members")

    __table_args__ = (
        UniqueConstraint("room_id", "user_id", name="uq_room_member_once"),
    )
