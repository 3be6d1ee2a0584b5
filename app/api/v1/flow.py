# app/api/v1/flow.py
"""
画面遷移 API。

サーバー側にはセッションを持たない。クライアントは今の state と session を
毎回送り、次の state と session を受け取る。
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.deps import get_db_dep
from ...schemas.flow import (
    CreateRoomAction,
    EnterRoomAction,
    FlowRequest,
    FlowStep,
    GuessAction,
    ProfileAction,
    RegisterAction,
    SubmitFactsAction,
)
from ...services import flow

router = APIRouter(prefix="/flow", tags=["flow"])


@router.get("/start", response_model=FlowStep)
def start(
    player_id: Optional[str] = None,
    db: Session = Depends(get_db_dep),
):
    return flow.initial_step(db, player_id)


@router.post("/register", response_model=FlowStep)
def register(data: RegisterAction, db: Session = Depends(get_db_dep)):
    return flow.register(
        db, data.state, data.session, data.user, data.name, data.surname, data.position
    )


# -----------------------------
# プロフィール
# -----------------------------

@router.post("/profile/open", response_model=FlowStep)
def open_profile(data: FlowRequest, db: Session = Depends(get_db_dep)):
    return flow.open_profile(db, data.state, data.session)


@router.post("/profile/save", response_model=FlowStep)
def save_profile(data: ProfileAction, db: Session = Depends(get_db_dep)):
    return flow.save_profile(
        db, data.state, data.session, data.name, data.surname, data.position
    )


@router.post("/profile/close", response_model=FlowStep)
def close_profile(data: FlowRequest, db: Session = Depends(get_db_dep)):
    return flow.close_profile(db, data.state, data.session)


# -----------------------------
# 部屋
# -----------------------------

@router.post("/rooms/create", response_model=FlowStep)
def create_room(data: CreateRoomAction, db: Session = Depends(get_db_dep)):
    return flow.create_room(db, data.state, data.session, data.name, data.date)


@router.post("/rooms/enter", response_model=FlowStep)
def enter_room(data: EnterRoomAction, db: Session = Depends(get_db_dep)):
    return flow.enter_room(db, data.state, data.session, data.room_id, data.date)


@router.post("/rooms/leave", response_model=FlowStep)
def leave_room(data: FlowRequest, db: Session = Depends(get_db_dep)):
    return flow.leave_room(db, data.state, data.session)


@router.post("/rooms/back", response_model=FlowStep)
def back_to_rooms(data: FlowRequest, db: Session = Depends(get_db_dep)):
    return flow.back_to_rooms(db, data.state, data.session)


@router.post("/facts", response_model=FlowStep)
def submit_facts(data: SubmitFactsAction, db: Session = Depends(get_db_dep)):
    return flow.submit_facts(
        db, data.state, data.session, data.fact1, data.fact2, data.fact3, data.date
    )


# -----------------------------
# 当てっこ・結果
# -----------------------------

@router.post("/guessing/start", response_model=FlowStep)
def start_guessing(data: FlowRequest, db: Session = Depends(get_db_dep)):
    return flow.start_guessing(db, data.state, data.session, data.date)


@router.post("/guess", response_model=FlowStep)
def guess(data: GuessAction, db: Session = Depends(get_db_dep)):
    return flow.guess(
        db, data.state, data.session, data.target_id, data.chosen_fact, data.date
    )


@router.post("/finish", response_model=FlowStep)
def finish(data: FlowRequest, db: Session = Depends(get_db_dep)):
    return flow.finish(db, data.state, data.session, data.date)
