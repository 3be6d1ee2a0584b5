# app/schemas/flow.py
"""
画面遷移の状態型。

kind を判別子にした tagged union。文字列比較の switch ではなく、
どの状態からどの遷移ができるかは app.services.flow 側で型ごとに決まる。
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .fact import PlayerWithFacts
from .player import PlayerOut
from .room import RoomOut
from .stats import Results


class SessionContext(BaseModel):
    """1クライアント分のセッション情報（グローバルには持たない）"""
    player_id: Optional[str] = None
    room_id: Optional[int] = None
    # このセッション中に当てた相手（DB のチェックに加えた二重ガード）
    guessed_in_session: frozenset[str] = frozenset()

    model_config = ConfigDict(frozen=True)


class RegistrationState(BaseModel):
    kind: Literal["registration"] = "registration"


class RoomSelectionState(BaseModel):
    kind: Literal["room_selection"] = "room_selection"
    rooms: list[RoomOut] = []


class ProfileSettingsState(BaseModel):
    kind: Literal["profile_settings"] = "profile_settings"
    player: PlayerOut


class RoomState(BaseModel):
    kind: Literal["room"] = "room"
    room: RoomOut
    has_submitted: bool
    submitted_players: list[PlayerWithFacts] = []


class GuessingState(BaseModel):
    kind: Literal["guessing"] = "guessing"
    room: RoomOut
    roster: list[PlayerWithFacts] = []
    last_result: Optional[bool] = None


class ResultsState(BaseModel):
    kind: Literal["results"] = "results"
    room: RoomOut
    results: Results


GameState = Annotated[
    Union[
        RegistrationState,
        RoomSelectionState,
        ProfileSettingsState,
        RoomState,
        GuessingState,
        ResultsState,
    ],
    Field(discriminator="kind"),
]


class FlowStep(BaseModel):
    state: GameState
    session: SessionContext


# --- /api/flow/* のリクエスト ---

class FlowRequest(BaseModel):
    state: GameState
    session: SessionContext
    date: Optional[str] = None  # 省略時は UTC の今日


class RegisterAction(FlowRequest):
    user: dict
    name: str
    surname: Optional[str] = None
    position: Optional[str] = None


class ProfileAction(FlowRequest):
    name: str
    surname: Optional[str] = None
    position: Optional[str] = None


class EnterRoomAction(FlowRequest):
    room_id: int


class SubmitFactsAction(FlowRequest):
    fact1: str
    fact2: str
    fact3: str


class GuessAction(FlowRequest):
    target_id: str
    chosen_fact: str


class CreateRoomAction(FlowRequest):
    name: str
