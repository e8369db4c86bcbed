# schemas/marking.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from schemas.questions import QuestionType

# ---------- Evaluate ----------


class EvaluateRequest(BaseModel):
    expr: str


class EvaluateResponse(BaseModel):
    ok: bool
    value: Optional[float] = None
    # exact form, "7/4" or "420"
    exact: Optional[str] = None
    feedback: Optional[str] = None


# ---------- Mark single ----------


class MarkRequest(BaseModel):
    answer: str = Field(max_length=100)
    correct_answer: str
    question_type: Optional[QuestionType] = None
    # lets "12.6" or "12 3/5" count for a "12 r 3" answer
    dividend: Optional[int] = None
    divisor: Optional[int] = None


class MarkResponse(BaseModel):
    correct: bool
    normalized: str
    expected: str
