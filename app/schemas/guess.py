# app/schemas/guess.py

from pydantic import BaseModel
from typing import Optional


class GuessCreate(BaseModel):
    guesser_id: str
    target_id: str
    chosen_fact: str
    date: Optional[str] = None


class GuessResult(BaseModel):
    is_correct: bool


class HasGuessedOut(BaseModel):
    guesser_id: str
    target_id: str
    has_guessed: bool
