# app/schemas/player.py

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class PlayerRegister(BaseModel):
    """POST /api/players/register 用"""
    user: dict  # 境界で TelegramUser として検証する
    name: str
    surname: Optional[str] = None
    position: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: str
    surname: Optional[str] = None
    position: Optional[str] = None


class PlayerOut(BaseModel):
    id: str
    name: str
    surname: Optional[str] = None
    position: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True
