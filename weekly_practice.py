from __future__ import annotations

import logging
import random
from datetime import UTC, datetime
from typing import Callable, Dict, List, Optional

import paper
import paper_generators as pg
from exam_session import SessionNotFinalized
from generators import generate_question_by_type
from rng import resolve
from schemas.practice import DailyPractice, WeeklyPractice
from schemas.questions import Question, TestQuestion
from schemas.sessions import TestSession

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
QUESTIONS_PER_DAY = 6
WEEKLY_TOTAL = QUESTIONS_PER_DAY * len(WEEKDAYS)

# below this many errors the plan repeats error templates before adding challenges
FEW_ERRORS = 10
ERROR_PAD_TARGET = 15
# first slot of the harder half of the paper
CHALLENGE_FROM_SLOT = 19

# flag -> the generator that produces exactly that shape
_FLAG_GENERATORS: Dict[str, Callable[[random.Random], Question]] = {
    paper.MULTIPLY_BY_POWERS_OF_10: pg.multiply_by_powers_of_10,
    paper.DIVIDE_BY_POWERS_OF_10_DECIMAL: pg.divide_by_powers_of_10_decimal,
    paper.MULTIPLICATION_2OR3_DIGIT: pg.multiplication_2or3_digit,
    paper.MISSING_SUBTRAHEND: pg.missing_subtrahend,
    paper.INVERSE_ADDITION: pg.inverse_addition,
    paper.MISSING_SUBTRAHEND_OR_INVERSE_ADDITION: paper.missing_subtrahend_or_inverse_addition,
    paper.DIFFERENT_DECIMAL_PLACES: pg.decimal_addition_different_places,
    paper.MIXED_BIDMAS_LEVELS: pg.bidmas_different_levels,
    paper.DIVISION_REMAINDER_POSSIBLE: pg.division_3or4_digit_by_1_digit,
    paper.DECIMAL_SUBTRACTION_CONSTRAINT: pg.decimal_subtraction_constrained,
    paper.THREE_NUMBERS_ONE_TWO_DIGIT: pg.multiplication_3_numbers_with_two_digit,
    paper.PROPER_FRACTION_BY_LARGE_INTEGER: pg.proper_fraction_times_large_int,
    paper.THREE_FRACTIONS_RELATED: pg.fraction_addition_three_related,
    paper.DECIMAL_1DP_BY_2DIGIT: pg.decimal_multiplication_2digit,
    paper.UNLIKE_DENOMINATORS_MIXED_OPTIONAL: pg.fraction_addition_unlike_with_mixed,
    paper.LONG_DIVISION_3BY2: pg.long_division_3digit_by_2digit,
    paper.LONG_MULTIPLICATION_4BY2: pg.long_multiplication_4digit_by_2digit,
    paper.LONG_DIVISION_4BY2: pg.long_division_4digit_by_2digit,
}


def analyze_errors(session: TestSession) -> List[TestQuestion]:
    """Questions that lost marks, earliest slot first. Empty until the session is marked."""
    if session.marks is None:
        return []
    awarded = {m.question_id: m.marks_awarded for m in session.marks}
    # a question with no mark record is unmarked, not wrong
    wrong = [
        q
        for q in session.questions
        if q.question_id in awarded and awarded[q.question_id] < q.mark_value
    ]
    return sorted(wrong, key=lambda q: q.slot_number)


def generate_variation(template: TestQuestion, rng: Optional[random.Random] = None) -> Question:
    """A fresh question of the same shape as ``template``."""
    rng = resolve(rng)
    # the specific pair flags come after the combined slot-9 flag, so search from the end
    for flag in reversed(template.constraint_flags):
        if flag in _FLAG_GENERATORS:
            return _FLAG_GENERATORS[flag](rng)
        if flag.startswith(paper.KNOWN_FACTS_PREFIX):
            return pg.known_facts_division(flag[len(paper.KNOWN_FACTS_PREFIX) :], rng)
        if flag.startswith(paper.PERCENTAGE_PREFIX):
            return pg.percentage_question_for(flag[len(paper.PERCENTAGE_PREFIX) :], rng)
    return generate_question_by_type(template.type, rng=rng)


def _fill_pool(
    errors: List[TestQuestion], questions: List[TestQuestion], rng: random.Random
) -> List[Question]:
    pool = [generate_variation(q, rng) for q in errors]

    if errors and len(errors) < FEW_ERRORS:
        while len(pool) < ERROR_PAD_TARGET:
            pool.append(generate_variation(rng.choice(errors), rng))

    challenges = [q for q in questions if q.slot_number >= CHALLENGE_FROM_SLOT]
    while challenges and len(pool) < WEEKLY_TOTAL:
        pool.append(generate_variation(rng.choice(challenges), rng))

    return pool[:WEEKLY_TOTAL]


def generate_weekly_practice(
    session: TestSession,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> WeeklyPractice:
    """
    Five days of six questions built from a marked session: one variation per
    error, padded with repeats of the errors and then with harder paper questions.
    Day order keeps the pool order so the week runs from mistakes to challenges.
    """
    if session.marks is None:
        raise SessionNotFinalized(f"Session {session.session_id} has not been marked yet.")
    rng = resolve(rng)

    errors = analyze_errors(session)
    pool = _fill_pool(errors, session.questions, rng)
    days = [
        DailyPractice(
            day=day,
            questions=pool[i * QUESTIONS_PER_DAY : (i + 1) * QUESTIONS_PER_DAY],
        )
        for i, day in enumerate(WEEKDAYS)
    ]
    logger.info(
        "weekly practice for session %s: %d errors, %d questions",
        session.session_id,
        len(errors),
        len(pool),
    )
    return WeeklyPractice(
        session_id=session.session_id,
        generated_at=now if now is not None else datetime.now(UTC),
        days=days,
        pupil_alias=session.pupil_alias,
    )
