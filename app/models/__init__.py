from .player import Player
from .room import Room, RoomMember
from .fact import FactSet
from .guess import Guess

__all__ = [
    "Player",
    "Room",
    "RoomMember",
    "FactSet",
    "Guess",
]
