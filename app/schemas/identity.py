# app/schemas/identity.py
"""
Telegram WebApp の initDataUnsafe.user を受け取る境界モデル。
形が崩れた payload はここで弾く（中身を信用しない）。
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError


class TelegramUser(BaseModel):
    id: str
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v):
        # Telegram は数値で送ってくるので文字列にそろえる
        if isinstance(v, bool) or not isinstance(v, (int, str)):
            raise ValueError("id must be an integer or a string")
        v = str(v).strip()
        if not v:
            raise ValueError("id must not be empty")
        return v

    @field_validator("first_name")
    @classmethod
    def _first_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("first_name must not be empty")
        return v.strip()


class ProfileSeed(BaseModel):
    name: str
    surname: Optional[str] = None


def parse_identity(payload: dict) -> TelegramUser:
    """外部 payload を検証して TelegramUser に変換する"""
    if not isinstance(payload, dict):
        raise ValidationError("identity payload must be an object")
    try:
        return TelegramUser.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid identity payload: {e.errors()[0]['msg']}") from e
