# app/models/fact.py
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from ..db import Base


class FactSet(Base):
    __tablename__ = "facts"

    id = Column(String, primary_key=True, index=True)
    player_id = Column(String, ForeignKey("players.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)

    # UTC の日付キー 'YYYY-MM-DD'
    date = Column(String(10), nullable=False)

    fact1 = Column(Text, nullable=False)
    fact2 = Column(Text, nullable=False)
    fact3 = Column(Text, nullable=False)  # ★ 嘘は常に3番目

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # 1人1部屋1日1回まで
    __table_args__ = (
        UniqueConstraint(
            "player_id", "room_id", "date",
            name="uq_facts_once_per_day",
        ),
    )

    @property
    def statements(self) -> list[str]:
        return [self.fact1, self.fact2, self.fact3]

    @property
    def false_statement(self) -> str:
        return self.fact3
