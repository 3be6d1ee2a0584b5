# app/services/players.py
import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models.player import Player
from ..schemas.identity import ProfileSeed, TelegramUser, parse_identity
from .store import optional_text, require_text, store_call

logger = logging.getLogger(__name__)


def seed_profile(identity: TelegramUser) -> ProfileSeed:
    """登録フォームの初期値（Telegram の名前をそのまま使う）"""
    return ProfileSeed(
        name=identity.first_name,
        surname=optional_text(identity.last_name),
    )


def _get_player(db: Session, player_id: str) -> Player:
    player = db.get(Player, player_id)
    if player is None:
        raise NotFoundError(f"Player {player_id} not found")
    return player


@store_call("register_player")
def register_player(
    db: Session,
    identity: Union[TelegramUser, dict],
    name: str,
    surname: Optional[str] = None,
    position: Optional[str] = None,
) -> Player:
    """
    初回登録。すでに同じ ID がいれば名前などを上書きする（upsert）。
    """
    if not isinstance(identity, TelegramUser):
        identity = parse_identity(identity)
    name = require_text(name, "name")

    player = db.get(Player, identity.id)
    now = datetime.utcnow()
    if player is None:
        player = Player(
            id=identity.id,
            name=name,
            surname=optional_text(surname),
            position=optional_text(position),
            created_at=now,
            updated_at=now,
        )
        db.add(player)
        logger.info("player registered: id=%s", identity.id)
    else:
        player.name = name
        player.surname = optional_text(surname)
        player.position = optional_text(position)
        player.updated_at = now
        logger.info("player re-registered: id=%s", identity.id)

    db.commit()
    db.refresh(player)
    return player


@store_call("get_player")
def get_player(db: Session, player_id: str) -> Player:
    return _get_player(db, player_id)


def find_player(db: Session, player_id: str) -> Optional[Player]:
    return db.get(Player, player_id)


@store_call("update_profile")
def update_profile(
    db: Session,
    player_id: str,
    name: str,
    surname: Optional[str] = None,
    position: Optional[str] = None,
) -> Player:
    name = require_text(name, "name")
    player = _get_player(db, player_id)

    player.name = name
    player.surname = optional_text(surname)
    player.position = optional_text(position)
    player.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(player)
    logger.info("profile updated: id=%s", player_id)
    return player
