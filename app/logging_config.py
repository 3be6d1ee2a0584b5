# app/logging_config.py
import logging
import sys

from .config import get_settings


def setup_logging() -> None:
    """アプリ全体のログ設定（起動時に1回だけ呼ぶ）"""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # SQL のログは必要なときだけ
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configuration initialized")
