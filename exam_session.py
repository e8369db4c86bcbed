from __future__ import annotations

import logging
import random
from datetime import UTC, datetime, timedelta
from typing import List, Optional

import config
from answer_matcher import mark_question, normalize_input
from paper import PAPER_VERSION, generate_test_paper
from rng import new_id, resolve
from schemas.questions import TestQuestion
from schemas.sessions import CompletionReason, ResponseEntry, ResponseLog, TestSession

logger = logging.getLogger(__name__)


class SessionFinalized(RuntimeError):
    """The session has already been marked; responses are read-only."""


class SessionNotFinalized(RuntimeError):
    """The session has not been marked yet."""


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(UTC)


def start_session(
    questions: Optional[List[TestQuestion]] = None,
    *,
    duration_seconds: Optional[int] = None,
    pupil_alias: Optional[str] = None,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> TestSession:
    rng = resolve(rng)
    started = _now(now)
    duration = duration_seconds if duration_seconds is not None else config.TEST_DURATION_SECONDS
    session = TestSession(
        session_id=new_id(rng),
        paper_version=PAPER_VERSION,
        pupil_alias=pupil_alias,
        started_at=started,
        duration_seconds=duration,
        ends_at=started + timedelta(seconds=duration),
        questions=questions if questions is not None else generate_test_paper(rng),
    )
    logger.info("session %s started (%ds)", session.session_id, duration)
    return session


def is_completed(session: TestSession) -> bool:
    return session.completed_at is not None


def seconds_remaining(session: TestSession, now: Optional[datetime] = None) -> int:
    if is_completed(session):
        return 0
    left = (session.ends_at - _now(now)).total_seconds()
    return max(0, int(left))


def total_marks_available(session: TestSession) -> int:
    return sum(q.mark_value for q in session.questions)


def record_response(
    session: TestSession, question_id: str, raw_input: str, now: Optional[datetime] = None
) -> ResponseEntry:
    """
    Store the pupil's latest answer. Any previous answer moves to the end of
    the history, so the log only ever grows.
    """
    if is_completed(session):
        raise SessionFinalized(f"Session {session.session_id} is already finalized.")
    if not any(q.question_id == question_id for q in session.questions):
        raise KeyError(question_id)

    entry = ResponseEntry(
        raw_input=raw_input,
        normalized_input=normalize_input(raw_input),
        recorded_at=_now(now),
    )
    log = session.responses.get(question_id)
    if log is None:
        session.responses[question_id] = ResponseLog(latest=entry)
    else:
        log.history.append(log.latest)
        log.latest = entry
    logger.debug("session %s: response to %s recorded", session.session_id, question_id)
    return entry


def finalize_session(
    session: TestSession, reason: CompletionReason = "manual", now: Optional[datetime] = None
) -> bool:
    """
    Mark every question once and freeze the session. Returns False without
    touching anything when the session was already finalized, so a manual
    submit racing the timer cannot mark twice.
    """
    if is_completed(session):
        logger.debug("session %s already finalized; ignoring %s", session.session_id, reason)
        return False

    marks = []
    for q in session.questions:
        log = session.responses.get(q.question_id)
        marks.append(mark_question(q, log.latest.raw_input if log else None))

    session.marks = marks
    session.total_marks_awarded = sum(m.marks_awarded for m in marks)
    session.completed_at = _now(now)
    session.completion_reason = reason
    logger.info(
        "session %s finalized (%s): %d/%d",
        session.session_id,
        reason,
        session.total_marks_awarded,
        total_marks_available(session),
    )
    return True


def finalize_if_expired(session: TestSession, now: Optional[datetime] = None) -> bool:
    now = _now(now)
    if is_completed(session) or now < session.ends_at:
        return False
    return finalize_session(session, "timeout", now)
