# app/errors.py
"""
ドメインエラー一覧。

サービス層はここで定義した例外だけを投げる。
HTTP ステータスへの変換は app.main の exception handler が担当する。
"""


class GameError(Exception):
    status_code = 500
    code = "game_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    """必須項目が空、ルール違反など"""
    status_code = 400
    code = "validation_error"


class InvalidTransitionError(ValidationError):
    """今の画面状態からは許可されていない遷移"""
    code = "invalid_transition"


class NotFoundError(GameError):
    status_code = 404
    code = "not_found"


class DuplicateSubmissionError(GameError):
    status_code = 409
    code = "duplicate_submission"


class AlreadyGuessedError(GameError):
    status_code = 409
    code = "already_guessed"


class ConflictError(GameError):
    status_code = 409
    code = "conflict"


class StoreUnavailableError(GameError):
    status_code = 503
    code = "store_unavailable"
