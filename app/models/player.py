# app/models/player.py

from sqlalchemy import Column, String, DateTime
from datetime import datetime

from ..db import Base


class Player(Base):
    __tablename__ = "players"

    # Telegram 等の外部IDをそのまま主キーにする
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    surname = Column(String, nullable=True)
    position = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
