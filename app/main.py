import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .db import Base, engine
from .errors import GameError
from .logging_config import setup_logging
from . import models  # noqa: F401  テーブル定義を Base に登録
from .api.v1 import api_router as api_v1_router

setup_logging()
logger = logging.getLogger(__name__)

# モデルからテーブル作成（開発用）
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Two Truths and a Lie API",
    version="0.1.0",
)


# ドメインエラー → HTTP ステータス
@app.exception_handler(GameError)
def handle_game_error(request: Request, exc: GameError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


app.include_router(api_v1_router, prefix="/api")


@app.get("/")
def read_root():
    return {"message": "Two Truths and a Lie API is running"}
