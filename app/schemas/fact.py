# app/schemas/fact.py

from pydantic import BaseModel
from typing import Optional


class FactSubmit(BaseModel):
    player_id: str
    fact1: str
    fact2: str
    fact3: str  # 嘘
    date: Optional[str] = None


class FactSetOut(BaseModel):
    id: str
    player_id: str
    room_id: int
    date: str
    fact1: str
    fact2: str
    fact3: str

    class Config:
        from_attributes = True


class PlayerWithFacts(BaseModel):
    """提出済みプレイヤー一覧の1行（facts は表示用にシャッフル済み）"""
    player_id: str
    name: str
    surname: Optional[str] = None
    position: Optional[str] = None
    facts: list[str]
