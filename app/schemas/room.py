# app/schemas/room.py
from pydantic import BaseModel


class RoomCreate(BaseModel):
    creator_id: str
    name: str


class RoomJoinRequest(BaseModel):
    player_id: str


class RoomOut(BaseModel):
    id: int
    name: str
    created_by: str
    is_active: bool

    class Config:
        from_attributes = True
