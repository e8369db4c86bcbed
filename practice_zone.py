from __future__ import annotations

import logging
import random
from typing import Optional

from generators import generate_new_question, generate_question_by_type
from schemas.practice import PracticeState
from schemas.questions import Question, QuestionType

logger = logging.getLogger(__name__)

# correct answers in a row before a focused type is released
MASTERY_STREAK = 3


def next_question(
    state: Optional[PracticeState] = None,
    exclude_type: Optional[QuestionType] = None,
    rng: Optional[random.Random] = None,
) -> Question:
    """Random type while roaming; the focused type, harder each streak step, otherwise."""
    if state is None:
        return generate_new_question(exclude_type, rng)
    return generate_question_by_type(state.type, difficulty=state.correct_in_a_row, rng=rng)


def record_result(
    state: Optional[PracticeState], question_type: QuestionType, correct: bool
) -> Optional[PracticeState]:
    """
    Returns the next state. A miss focuses practice on that type; a focused
    type is released (None) after MASTERY_STREAK correct answers in a row.
    """
    if not correct:
        if state is None or state.type is not question_type:
            logger.debug("focusing practice on %s", question_type.value)
        return PracticeState(type=question_type, correct_in_a_row=0)
    if state is None:
        return None
    streak = state.correct_in_a_row + 1
    if streak >= MASTERY_STREAK:
        logger.debug("%s mastered, back to random practice", state.type.value)
        return None
    return PracticeState(type=state.type, correct_in_a_row=streak)
