# app/config.py
"""
環境変数からアプリ設定を読み込む。
.env があれば python-dotenv で先に読み込んでおく。
"""
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key, str(default)).split("#")[0].strip()
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Invalid {key} value: '{os.getenv(key)}'. Must be an integer.") from e


def _float_env(key: str, default: float) -> float:
    raw = os.getenv(key, str(default)).split("#")[0].strip()
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"Invalid {key} value: '{os.getenv(key)}'. Must be a number.") from e


class Settings:
    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./two_truths.db")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")

        # 部屋ID（6桁）
        self.room_id_min: int = _int_env("ROOM_ID_MIN", 100000)
        self.room_id_max: int = _int_env("ROOM_ID_MAX", 999999)
        self.room_id_max_attempts: int = _int_env("ROOM_ID_MAX_ATTEMPTS", 5)

        # DB 一時障害時のリトライ
        self.store_retry_attempts: int = _int_env("STORE_RETRY_ATTEMPTS", 3)
        self.store_retry_backoff_sec: float = _float_env("STORE_RETRY_BACKOFF_SEC", 0.1)

        self.enable_debug_routes: bool = os.getenv("ENABLE_DEBUG_ROUTES", "false").lower() == "true"

        if self.room_id_min > self.room_id_max:
            raise ValueError("ROOM_ID_MIN must not be greater than ROOM_ID_MAX")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
