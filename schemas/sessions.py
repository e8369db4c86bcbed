# schemas/sessions.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.questions import TestQuestion

CompletionReason = Literal["manual", "timeout"]


class ResponseEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_input: str
    normalized_input: str
    recorded_at: datetime


class ResponseLog(BaseModel):
    latest: ResponseEntry
    # superseded answers, oldest first
    history: List[ResponseEntry] = Field(default_factory=list)


class TestQuestionMark(BaseModel):
    __test__ = False

    model_config = ConfigDict(frozen=True)

    question_id: str
    slot_number: int
    marks_awarded: int


class TestSession(BaseModel):
    """One sitting of the paper. Fully JSON round-trippable."""

    __test__ = False

    session_id: str
    paper_version: str
    pupil_alias: Optional[str] = None
    started_at: datetime
    duration_seconds: int
    ends_at: datetime
    questions: List[TestQuestion]
    responses: Dict[str, ResponseLog] = Field(default_factory=dict)
    marks: Optional[List[TestQuestionMark]] = None
    total_marks_awarded: Optional[int] = None
    completed_at: Optional[datetime] = None
    completion_reason: Optional[CompletionReason] = None


# ---------- Requests / responses ----------


class StartSessionRequest(BaseModel):
    pupil_alias: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, ge=60, le=4 * 3600)


class ResponseIn(BaseModel):
    raw_input: str = Field(max_length=100)


class SessionSummary(BaseModel):
    session_id: str
    completed: bool
    seconds_remaining: int
    total_marks_awarded: Optional[int] = None
    total_marks_available: int
