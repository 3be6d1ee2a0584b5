# app/api/deps.py

from collections.abc import Generator
from sqlalchemy.orm import Session

from app.db import SessionLocal


def get_db_dep() -> Generator[Session, None, None]:
    """
    FastAPI の Depends で使う DB セッション依存関数。
    エンドポイント側では `db: Session = Depends(get_db_dep)` で利用。
    1リクエスト = 1セッション。
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
