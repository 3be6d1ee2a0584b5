# app/models/guess.py
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from ..db import Base


class Guess(Base):
    __tablename__ = "game_stats"

    id = Column(String, primary_key=True, index=True)

    # 当てた人
    player_id = Column(String, ForeignKey("players.id"), nullable=False, index=True)
    # 当てられた人（ファクトの提出者）
    aim_id = Column(String, ForeignKey("players.id"), nullable=False, index=True)

    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    date = Column(String(10), nullable=False)

    chosen_fact = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # 同じ相手には1日1回だけ
    __table_args__ = (
        UniqueConstraint(
            "player_id", "aim_id", "room_id", "date",
            name="uq_guess_once_per_target_per_day",
        ),
    )
