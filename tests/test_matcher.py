import random

from answer_matcher import (
    division_operands,
    fractions_equivalent,
    is_answer_correct,
    mark_question,
    normalize_input,
    normalize_numeric,
    parse_fraction,
    parse_remainder,
)
from fraction_kernel import SimpleFraction
from paper import generate_test_paper
from schemas.questions import Question, QuestionType

FRACTION_ADD = QuestionType.FractionAdditionSimpleDenominators


def test_empty_input_is_wrong():
    assert not is_answer_correct("420", "")
    assert not is_answer_correct("420", "   ")
    assert not is_answer_correct("420", None)


def test_numeric_canonical_forms():
    assert normalize_numeric("007") == "7"
    assert normalize_numeric("1.50") == "1.5"
    assert normalize_numeric("420.0") == "420"
    assert normalize_numeric("abc") == "abc"
    assert is_answer_correct("1.5", "1.50")
    assert is_answer_correct("7", "007")
    assert is_answer_correct("12345", "12,345")
    assert is_answer_correct("300,000", "300000")
    assert not is_answer_correct("420", "42")


def test_normalize_input():
    assert normalize_input("  1,234   5/6 ") == "1234 5/6"


def test_parse_fraction_forms():
    assert parse_fraction("3/4") == SimpleFraction(3, 4)
    assert parse_fraction("1 3/4") == SimpleFraction(7, 4)
    assert parse_fraction("5") == SimpleFraction(5, 1)
    assert parse_fraction("3/0") is None
    assert parse_fraction("0.5") is None
    assert parse_fraction("1 2") is None


def test_fraction_equivalence():
    assert is_answer_correct("1/2", "2/4", FRACTION_ADD)
    assert is_answer_correct("1 1/2", "3/2", FRACTION_ADD)
    assert is_answer_correct("2", "4/2", FRACTION_ADD)
    # fraction questions do not accept decimals
    assert not is_answer_correct("1/2", "0.5", FRACTION_ADD)
    assert not is_answer_correct("1/2", "1/3", FRACTION_ADD)


def test_fraction_fallback_compares_text():
    assert fractions_equivalent("abc", "abc")
    assert not fractions_equivalent("abc", "1/2")


def test_remainder_three_ways():
    division = (63, 5)
    assert parse_remainder("12 R. 3") == (12, 3)
    assert is_answer_correct("12 r 3", "12 r 3", QuestionType.Division, division)
    assert is_answer_correct("12 r 3", "12 remainder 3", QuestionType.Division, division)
    assert is_answer_correct("12 r 3", "12.6", QuestionType.Division, division)
    assert is_answer_correct("12 r 3", "12 3/5", QuestionType.Division, division)
    assert is_answer_correct("12 r 3", "63/5", QuestionType.Division, division)
    assert not is_answer_correct("12 r 3", "12 r 2", QuestionType.Division, division)
    assert not is_answer_correct("12 r 3", "12", QuestionType.Division, division)


def test_remainder_without_division_only_accepts_literal():
    assert is_answer_correct("12 r 3", "12 r 3")
    assert not is_answer_correct("12 r 3", "12.6")


def test_division_operands_from_question():
    q = Question(
        type=QuestionType.Division,
        text="63 ÷ 5 =",
        answer="12 r 3",
        operands=["63", "5"],
        operator="÷",
    )
    assert division_operands(q) == (63, 5)
    blank_first = Question(type=QuestionType.Division, text="_ = 1,250 ÷ 5", answer="250")
    assert division_operands(blank_first) == (1250, 5)


def test_marking_slot_one():
    q = generate_test_paper(random.Random(8))[0]
    assert mark_question(q, q.answer).marks_awarded == q.mark_value == 1
    assert mark_question(q, q.answer + "1").marks_awarded == 0
    assert mark_question(q, None).marks_awarded == 0


def test_marking_uses_mark_value():
    q = generate_test_paper(random.Random(8))[35]
    mark = mark_question(q, q.answer)
    assert mark.marks_awarded == 2
    assert mark.slot_number == 36
    assert mark.question_id == q.question_id


def test_huge_exponents_are_wrong_not_errors():
    assert normalize_numeric("1e999999999") == "1e999999999"
    assert normalize_numeric("0e999999999") == "0"
    assert not is_answer_correct("420", "1e999999999")
    assert not is_answer_correct("420", "9e-999999999")
    assert not is_answer_correct("12 r 3", "1e999999999", QuestionType.Division, (63, 5))
