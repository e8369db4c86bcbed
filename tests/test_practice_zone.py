import random

from practice_zone import MASTERY_STREAK, next_question, record_result
from schemas.practice import PracticeState
from schemas.questions import QuestionType

PCT = QuestionType.Percentages


def test_wrong_answer_focuses_the_type():
    state = record_result(None, QuestionType.LongDivision, correct=False)
    assert state == PracticeState(type=QuestionType.LongDivision, correct_in_a_row=0)


def test_correct_answers_in_random_mode_stay_random():
    assert record_result(None, QuestionType.Addition, correct=True) is None


def test_streak_releases_after_mastery():
    state = record_result(None, PCT, correct=False)
    for expected in range(1, MASTERY_STREAK):
        state = record_result(state, PCT, correct=True)
        assert state.correct_in_a_row == expected
    assert record_result(state, PCT, correct=True) is None


def test_miss_resets_the_streak():
    state = PracticeState(type=PCT, correct_in_a_row=2)
    assert record_result(state, PCT, correct=False).correct_in_a_row == 0


def test_next_question_uses_focused_type_and_streak():
    rng = random.Random(2)
    q = next_question(PracticeState(type=QuestionType.FractionDivision), rng=rng)
    assert q.type is QuestionType.FractionDivision
    # the streak raises the percentage tier
    for _ in range(20):
        q = next_question(PracticeState(type=PCT, correct_in_a_row=2), rng=rng)
        assert int(q.operands[0]) % 5 == 0


def test_next_question_random_mode_excludes_last_type():
    rng = random.Random(3)
    for _ in range(100):
        assert next_question(None, exclude_type=QuestionType.Addition, rng=rng).type is not (
            QuestionType.Addition
        )
