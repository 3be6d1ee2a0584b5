# app/services/store.py
"""
DB 呼び出しの共通ラッパー。

- 一時的な接続エラー（OperationalError など）は指数バックオフで数回リトライ
- それでもダメなら StoreUnavailableError に変換
- IntegrityError とドメインエラーはそのまま呼び出し側へ
"""
import functools
import logging
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..errors import GameError, StoreUnavailableError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_in_store(db: Session, work: Callable[[], T], *, label: str) -> T:
    settings = get_settings()
    attempts = max(1, settings.store_retry_attempts)

    for attempt in range(1, attempts + 1):
        try:
            return work()
        except (GameError, IntegrityError):
            raise
        except DBAPIError as e:
            db.rollback()
            if attempt == attempts:
                logger.error("%s failed after %d attempts: %s", label, attempts, e)
                raise StoreUnavailableError(f"{label} failed: store unavailable") from e
            delay = settings.store_retry_backoff_sec * (2 ** (attempt - 1))
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.2fs: %s",
                label, attempt, attempts, delay, e,
            )
            time.sleep(delay)

    # attempts >= 1 なのでここには来ない
    raise StoreUnavailableError(f"{label} failed: store unavailable")


def store_call(label: str):
    """run_in_store を関数単位でかけるデコレータ（第1引数は db）"""
    def deco(fn):
        @functools.wraps(fn)
        def wrapper(db: Session, *args, **kwargs):
            return run_in_store(db, lambda: fn(db, *args, **kwargs), label=label)
        return wrapper
    return deco


def require_text(value: str | None, field: str) -> str:
    """空文字・空白のみは ValidationError。前後の空白は落として返す"""
    if value is None or not value.strip():
        raise ValidationError(f"{field} must not be empty")
    return value.strip()


def optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
