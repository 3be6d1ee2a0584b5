# app/services/flow.py
"""
画面遷移（ステートマシン）。

    Registration → RoomSelection ⇄ ProfileSettings
    RoomSelection → Room → Guessing → Results
    Results / Room → Room（部屋の切り替え）

各遷移は (db, state, ctx, ...) を受け取り、新しい FlowStep を返す。
引数の state / ctx は書き換えない。途中でエラーになったら例外がそのまま
呼び出し側に上がり、状態は遷移前のまま。
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..errors import AlreadyGuessedError, InvalidTransitionError, NotFoundError
from ..schemas.flow import (
    FlowStep,
    GuessingState,
    ProfileSettingsState,
    RegistrationState,
    ResultsState,
    RoomSelectionState,
    RoomState,
    SessionContext,
)
from ..schemas.fact import PlayerWithFacts
from ..schemas.player import PlayerOut
from ..schemas.room import RoomOut
from . import facts as fact_store
from . import guesses as guess_ledger
from . import players as player_registry
from . import rooms as room_registry
from .scoring import room_results

logger = logging.getLogger(__name__)


def _expect(state, action: str, *allowed: type):
    if not isinstance(state, allowed):
        raise InvalidTransitionError(f"Cannot {action} from '{state.kind}'")


def _player_id(ctx: SessionContext) -> str:
    if not ctx.player_id:
        raise InvalidTransitionError("No registered player in session")
    return ctx.player_id


def _room_id(ctx: SessionContext) -> int:
    if ctx.room_id is None:
        raise InvalidTransitionError("No room selected in session")
    return ctx.room_id


def _room_selection(db: Session, player_id: str) -> RoomSelectionState:
    rooms = room_registry.list_active_rooms_for(db, player_id)
    return RoomSelectionState(rooms=[RoomOut.model_validate(r) for r in rooms])


def _room_state(db: Session, player_id: str, room_id: int, date: str) -> RoomState:
    room = room_registry.get_active_room(db, room_id)
    if not room_registry.is_active_member(db, player_id, room_id):
        raise NotFoundError(f"Player {player_id} is not an active member of room {room_id}")
    mine = fact_store.get_facts(db, player_id, room_id, date)
    return RoomState(
        room=RoomOut.model_validate(room),
        has_submitted=mine is not None,
        submitted_players=fact_store.list_submitted_today(db, room_id, date),
    )


def guessable_roster(
    db: Session, ctx: SessionContext, date: Optional[str] = None
) -> list[PlayerWithFacts]:
    """
    当てっこ対象 = 今日の提出者 − 自分 − 当て済み（DB）− 当て済み（セッション内）
    """
    player_id = _player_id(ctx)
    room_id = _room_id(ctx)
    submitted = fact_store.list_submitted_today(db, room_id, date)
    done = guess_ledger.guessed_target_ids(db, player_id, room_id, date)
    return [
        p
        for p in submitted
        if p.player_id != player_id
        and p.player_id not in done
        and p.player_id not in ctx.guessed_in_session
    ]


# -----------------------------
# 開始・登録
# -----------------------------

def initial_step(db: Session, player_id: Optional[str]) -> FlowStep:
    """起動時：登録済みなら部屋選択、未登録なら登録画面"""
    if player_id and player_registry.find_player(db, player_id) is not None:
        ctx = SessionContext(player_id=player_id)
        return FlowStep(state=_room_selection(db, player_id), session=ctx)
    return FlowStep(state=RegistrationState(), session=SessionContext())


def register(
    db: Session,
    state,
    ctx: SessionContext,
    user: dict,
    name: str,
    surname: Optional[str] = None,
    position: Optional[str] = None,
) -> FlowStep:
    _expect(state, "register", RegistrationState)
    player = player_registry.register_player(db, user, name, surname, position)
    new_ctx = ctx.model_copy(update={"player_id": player.id})
    return FlowStep(state=_room_selection(db, player.id), session=new_ctx)


# -----------------------------
# プロフィール設定
# -----------------------------

def open_profile(db: Session, state, ctx: SessionContext) -> FlowStep:
    _expect(state, "open profile", RoomSelectionState)
    player = player_registry.get_player(db, _player_id(ctx))
    return FlowStep(
        state=ProfileSettingsState(player=PlayerOut.model_validate(player)),
        session=ctx,
    )


def save_profile(
    db: Session,
    state,
    ctx: SessionContext,
    name: str,
    surname: Optional[str] = None,
    position: Optional[str] = None,
) -> FlowStep:
    _expect(state, "save profile", ProfileSettingsState)
    player = player_registry.update_profile(db, _player_id(ctx), name, surname, position)
    return FlowStep(
        state=ProfileSettingsState(player=PlayerOut.model_validate(player)),
        session=ctx,
    )


def close_profile(db: Session, state, ctx: SessionContext) -> FlowStep:
    _expect(state, "close profile", ProfileSettingsState)
    return FlowStep(state=_room_selection(db, _player_id(ctx)), session=ctx)


# -----------------------------
# 部屋
# -----------------------------

def create_room(
    db: Session, state, ctx: SessionContext, name: str, date: Optional[str] = None
) -> FlowStep:
    _expect(state, "create room", RoomSelectionState)
    player_id = _player_id(ctx)
    room = room_registry.create_room(db, player_id, name)
    new_ctx = ctx.model_copy(update={"room_id": room.id, "guessed_in_session": frozenset()})
    return FlowStep(
        state=_room_state(db, player_id, room.id, fact_store.check_date_key(date)),
        session=new_ctx,
    )


def enter_room(
    db: Session, state, ctx: SessionContext, room_id: int, date: Optional[str] = None
) -> FlowStep:
    """部屋に入る（未参加なら参加、退出済みなら再参加）"""
    _expect(state, "enter room", RoomSelectionState, RoomState, ResultsState)
    player_id = _player_id(ctx)
    room_registry.join_room(db, player_id, room_id)

    guessed = ctx.guessed_in_session if ctx.room_id == room_id else frozenset()
    new_ctx = ctx.model_copy(update={"room_id": room_id, "guessed_in_session": guessed})
    return FlowStep(
        state=_room_state(db, player_id, room_id, fact_store.check_date_key(date)),
        session=new_ctx,
    )


def leave_room(db: Session, state, ctx: SessionContext) -> FlowStep:
    _expect(state, "leave room", RoomState)
    player_id = _player_id(ctx)
    room_registry.leave_room(db, player_id, _room_id(ctx))
    new_ctx = ctx.model_copy(update={"room_id": None, "guessed_in_session": frozenset()})
    return FlowStep(state=_room_selection(db, player_id), session=new_ctx)


def back_to_rooms(db: Session, state, ctx: SessionContext) -> FlowStep:
    _expect(state, "go back to room list", RoomState, ResultsState)
    return FlowStep(state=_room_selection(db, _player_id(ctx)), session=ctx)


def submit_facts(
    db: Session,
    state,
    ctx: SessionContext,
    fact1: str,
    fact2: str,
    fact3: str,
    date: Optional[str] = None,
) -> FlowStep:
    _expect(state, "submit facts", RoomState)
    date = fact_store.check_date_key(date)
    player_id = _player_id(ctx)
    room_id = _room_id(ctx)
    fact_store.submit_facts(db, player_id, room_id, date, fact1, fact2, fact3)
    return FlowStep(state=_room_state(db, player_id, room_id, date), session=ctx)


# -----------------------------
# 当てっこ・結果
# -----------------------------

def _same_room(state, room_id: int):
    # state はクライアントから来るので、セッションの部屋と一致するか確かめる
    if state.room.id != room_id:
        raise InvalidTransitionError(
            f"State is for room {state.room.id}, but session is in room {room_id}"
        )


def _require_own_facts(db: Session, player_id: str, room_id: int, date: str):
    # 自分が出す前に他人のは当てられない
    if fact_store.get_facts(db, player_id, room_id, date) is None:
        raise InvalidTransitionError("Submit your own facts before guessing")


def start_guessing(
    db: Session, state, ctx: SessionContext, date: Optional[str] = None
) -> FlowStep:
    _expect(state, "start guessing", RoomState)
    date = fact_store.check_date_key(date)
    player_id = _player_id(ctx)
    room_id = _room_id(ctx)
    _require_own_facts(db, player_id, room_id, date)

    room = room_registry.get_active_room(db, room_id)
    return FlowStep(
        state=GuessingState(
            room=RoomOut.model_validate(room),
            roster=guessable_roster(db, ctx, date),
        ),
        session=ctx,
    )


def guess(
    db: Session,
    state,
    ctx: SessionContext,
    target_id: str,
    chosen_fact: str,
    date: Optional[str] = None,
) -> FlowStep:
    _expect(state, "guess", GuessingState)
    date = fact_store.check_date_key(date)
    player_id = _player_id(ctx)
    room_id = _room_id(ctx)
    _same_room(state, room_id)

    # GuessingState だけでは start_guessing を通った証拠にならない
    if not room_registry.is_active_member(db, player_id, room_id):
        raise NotFoundError(f"Player {player_id} is not an active member of room {room_id}")
    _require_own_facts(db, player_id, room_id, date)

    if target_id in ctx.guessed_in_session:
        raise AlreadyGuessedError("You have already guessed this player's facts today")

    result = guess_ledger.record_guess(db, player_id, target_id, room_id, date, chosen_fact)
    new_ctx = ctx.model_copy(
        update={"guessed_in_session": ctx.guessed_in_session | {target_id}}
    )
    return FlowStep(
        state=GuessingState(
            room=state.room,
            roster=guessable_roster(db, new_ctx, date),
            last_result=result.is_correct,
        ),
        session=new_ctx,
    )


def finish(db: Session, state, ctx: SessionContext, date: Optional[str] = None) -> FlowStep:
    _expect(state, "finish guessing", GuessingState)
    room_id = _room_id(ctx)
    _same_room(state, room_id)
    results = room_results(db, _player_id(ctx), room_id, date)
    logger.info("player %s finished guessing in room %s", ctx.player_id, room_id)
    return FlowStep(state=ResultsState(room=state.room, results=results), session=ctx)
