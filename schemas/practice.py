# schemas/practice.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.questions import Question, QuestionType


class DailyPractice(BaseModel):
    day: str
    questions: List[Question]


class WeeklyPractice(BaseModel):
    session_id: str
    generated_at: datetime
    days: List[DailyPractice]
    pupil_alias: Optional[str] = None


class PracticeState(BaseModel):
    type: QuestionType
    correct_in_a_row: int = Field(default=0, ge=0)


class PracticeAnswerRequest(BaseModel):
    state: Optional[PracticeState] = None
    question: Question
    answer: str
    timed_out: bool = False


class PracticeAnswerResponse(BaseModel):
    correct: bool
    state: Optional[PracticeState] = None
    next_question: Question


class PercentageComponentOut(BaseModel):
    value: int
    count: int


class PercentageStrategyOut(BaseModel):
    method: str
    components: List[PercentageComponentOut]
    base: int
    target: int
