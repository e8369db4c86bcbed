# routers/sessions.py
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import update
from sqlalchemy.orm import Session

from db import SessionLocal
from exam_session import (
    SessionFinalized,
    SessionNotFinalized,
    finalize_if_expired,
    finalize_session,
    record_response,
    seconds_remaining,
    start_session,
    total_marks_available,
)
from models import TestSessionRecord
from schemas.practice import WeeklyPractice
from schemas.sessions import (
    ResponseEntry,
    ResponseIn,
    SessionSummary,
    StartSessionRequest,
    TestSession,
)
from weekly_practice import generate_weekly_practice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


# --- Persistence helpers ----------------------------------------------------------


def _load(db: Session, session_id: str) -> TestSession:
    # row lock on postgres; sqlite ignores it and relies on the guarded write below
    row = db.get(TestSessionRecord, session_id, with_for_update=True)
    if not row:
        raise HTTPException(status_code=404, detail="Session not found")
    return TestSession.model_validate(row.payload)


def _insert(db: Session, session: TestSession) -> None:
    db.add(
        TestSessionRecord(
            id=session.session_id,
            created_at=session.started_at,
            payload=session.model_dump(mode="json"),
            completed_at=session.completed_at,
            total_marks_awarded=session.total_marks_awarded,
        )
    )
    db.commit()


def _save(db: Session, session: TestSession) -> bool:
    """
    Write the session back only while the stored row is still open.
    Returns False when another request finalised it first; nothing is written.
    """
    result = db.execute(
        update(TestSessionRecord)
        .where(
            TestSessionRecord.id == session.session_id,
            TestSessionRecord.completed_at.is_(None),
        )
        .values(
            payload=session.model_dump(mode="json"),
            completed_at=session.completed_at,
            total_marks_awarded=session.total_marks_awarded,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.info("session %s already finalised, write dropped", session.session_id)
        return False
    db.commit()
    return True


def _save_or_reload(db: Session, session: TestSession) -> TestSession:
    if _save(db, session):
        return session
    return _load(db, session.session_id)


def _summary(session: TestSession) -> SessionSummary:
    return SessionSummary(
        session_id=session.session_id,
        completed=session.completed_at is not None,
        seconds_remaining=seconds_remaining(session),
        total_marks_awarded=session.total_marks_awarded,
        total_marks_available=total_marks_available(session),
    )


# --- Endpoints --------------------------------------------------------------------


@router.post("", response_model=TestSession, status_code=201)
def create_session(req: StartSessionRequest):
    session = start_session(duration_seconds=req.duration_seconds, pupil_alias=req.pupil_alias)
    with SessionLocal() as db:
        _insert(db, session)
    return session


@router.get("/{session_id}", response_model=TestSession)
def get_session(session_id: str):
    with SessionLocal() as db:
        session = _load(db, session_id)
        if finalize_if_expired(session):
            session = _save_or_reload(db, session)
    return session


@router.get("/{session_id}/summary", response_model=SessionSummary)
def get_session_summary(session_id: str):
    with SessionLocal() as db:
        session = _load(db, session_id)
        if finalize_if_expired(session):
            session = _save_or_reload(db, session)
    return _summary(session)


@router.put("/{session_id}/responses/{question_id}", response_model=ResponseEntry)
def put_response(session_id: str, question_id: str, body: ResponseIn):
    with SessionLocal() as db:
        session = _load(db, session_id)
        if finalize_if_expired(session):
            _save(db, session)
            raise HTTPException(status_code=409, detail="Session time is up")
        try:
            entry = record_response(session, question_id, body.raw_input)
        except KeyError:
            raise HTTPException(status_code=404, detail="Question not in this session")
        except SessionFinalized:
            raise HTTPException(status_code=409, detail="Session already finalized")
        if not _save(db, session):
            raise HTTPException(status_code=409, detail="Session already finalized")
    return entry


@router.post("/{session_id}/finalize", response_model=SessionSummary)
def finalize(session_id: str):
    with SessionLocal() as db:
        session = _load(db, session_id)
        if finalize_if_expired(session) or finalize_session(session, "manual"):
            session = _save_or_reload(db, session)
    return _summary(session)


@router.get("/{session_id}/practice", response_model=WeeklyPractice)
def weekly_practice(session_id: str):
    with SessionLocal() as db:
        session = _load(db, session_id)
        if finalize_if_expired(session):
            session = _save_or_reload(db, session)
    try:
        return generate_weekly_practice(session)
    except SessionNotFinalized:
        raise HTTPException(status_code=409, detail="Session has not been finalized")
