# tests/conftest.py
import os

# app をインポートする前にテスト用 DB を指定する
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_two_truths.db")
os.environ.setdefault("ENABLE_DEBUG_ROUTES", "true")

import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db import Base, engine, SessionLocal  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture(scope="function")
def db() -> Session:
    """
    テストごとにクリーンな DB を用意するフィクスチャ。
    アプリ本体と同じ engine を使う。
    """
    # 既存テーブルを全部削除してから、再作成
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> TestClient:
    """
    通常の FastAPI app をそのまま使う TestClient。
    DI の上書きは行わない（db フィクスチャでテーブルは作り直し済み）。
    """
    with TestClient(app) as c:
        yield c
