# app/schemas/stats.py

from pydantic import BaseModel


class MyStats(BaseModel):
    total: int
    correct: int
    accuracy_pct: int


class FactGuess(BaseModel):
    guesser_name: str
    is_correct: bool


class FactStats(BaseModel):
    statement: str
    guesses: list[FactGuess]
    total_guesses: int
    correct_guesses: int


class Results(BaseModel):
    room_id: int
    date: str
    my_stats: MyStats
    facts: list[FactStats]
