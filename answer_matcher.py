from __future__ import annotations

import math
import re
from decimal import Decimal, DecimalException
from typing import Optional, Tuple

from fraction_kernel import SimpleFraction
from schemas.questions import Question, QuestionType, TestQuestion
from schemas.sessions import TestQuestionMark

# Questions whose answers are checked by fraction equivalence rather than string form.
FRACTION_TYPES = frozenset(
    {
        QuestionType.FractionAdditionSimpleDenominators,
        QuestionType.FractionAdditionUnlikeDenominators,
        QuestionType.FractionAdditionMixedNumbers,
        QuestionType.FractionSubtractionSimpleDenominators,
        QuestionType.FractionSubtractionUnlikeDenominators,
        QuestionType.FractionSubtractionMixedNumbers,
        QuestionType.FractionMultiplication,
        QuestionType.FractionMultiplicationMixedNumbers,
        QuestionType.FractionMultiplication2Digit,
        QuestionType.FractionDivision,
    }
)

QUOTIENT_TOLERANCE = 1e-9
# no paper answer comes close; larger exponents are compared as text
MAX_EXPONENT = 100

_INT_RE = re.compile(r"^[+-]?\d+$")
_DEN_RE = re.compile(r"^\d+$")
# "12 r 3", "12 r. 3", "12 rem 3", "12 remainder 3"
_REMAINDER_RE = re.compile(r"^\s*(\d+)\s*(?:r\.?|rem\.?|remainder)\s*(\d+)\s*$", re.IGNORECASE)
_DIVISION_RE = re.compile(r"(\d[\d,]*)\s*÷\s*(\d[\d,]*)")


# --- Normalisation ----------------------------------------------------------------


def normalize_input(raw: Optional[str]) -> str:
    """Strip thousands separators and collapse runs of whitespace."""
    if not raw:
        return ""
    return " ".join(raw.replace(",", "").split())


def normalize_numeric(s: str) -> str:
    """
    Canonical numeric string: "007" -> "7", "1.50" -> "1.5", "420.0" -> "420".
    Text that is not a number comes back cleaned but otherwise unchanged.
    """
    cleaned = s.replace(",", "").strip()
    try:
        value = Decimal(cleaned)
    except DecimalException:
        return cleaned
    if not value.is_finite():
        return cleaned
    if value.is_zero():
        return "0"
    if abs(value.adjusted()) > MAX_EXPONENT:
        return cleaned
    try:
        return format(value.normalize(), "f")
    except DecimalException:
        return cleaned


# --- Parsing ----------------------------------------------------------------------


def parse_fraction(s: str) -> Optional[SimpleFraction]:
    """
    Parse "W N/D", "N/D" or a bare integer. Returns None for anything else,
    including a zero denominator.
    """
    parts = s.split()
    whole = 0
    if len(parts) == 2:
        if "/" not in parts[1] or not _INT_RE.match(parts[0]):
            return None
        whole = int(parts[0])
        frac = parts[1]
    elif len(parts) == 1:
        frac = parts[0]
    else:
        return None

    if "/" not in frac:
        if not _INT_RE.match(frac):
            return None
        return SimpleFraction(whole + int(frac), 1)

    pieces = frac.split("/")
    if len(pieces) != 2 or not _INT_RE.match(pieces[0]) or not _DEN_RE.match(pieces[1]):
        return None
    num, den = int(pieces[0]), int(pieces[1])
    if den == 0:
        return None
    return SimpleFraction(whole * den + num, den)


def parse_remainder(s: str) -> Optional[Tuple[int, int]]:
    m = _REMAINDER_RE.match(s)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def division_operands(question: Question) -> Optional[Tuple[int, int]]:
    """(dividend, divisor) from structured operands, falling back to the prompt text."""
    if question.operator == "÷" and question.operands and len(question.operands) == 2:
        a, b = (o.replace(",", "") for o in question.operands)
        if _INT_RE.match(a) and _INT_RE.match(b):
            return int(a), int(b)
    m = _DIVISION_RE.search(question.text)
    if not m:
        return None
    return int(m.group(1).replace(",", "")), int(m.group(2).replace(",", ""))


# --- Equivalence checks -----------------------------------------------------------


def fractions_equivalent(user: str, correct: str) -> bool:
    user_frac = parse_fraction(user)
    correct_frac = parse_fraction(correct)
    if user_frac is None or correct_frac is None:
        return user.strip() == correct.strip()
    return user_frac.n * correct_frac.d == correct_frac.n * user_frac.d


def _close_to(value: float, target: float) -> bool:
    return math.isclose(value, target, rel_tol=0, abs_tol=QUOTIENT_TOLERANCE)


def _remainder_answer_matches(
    expected: Tuple[int, int], user: str, division: Optional[Tuple[int, int]]
) -> bool:
    # 1) the same quotient and remainder
    if parse_remainder(user) == expected:
        return True
    if division is None or division[1] == 0:
        return False
    true_quotient = division[0] / division[1]

    # 2) the quotient written as a decimal
    try:
        as_decimal = Decimal(user)
    except DecimalException:
        as_decimal = None
    if (
        as_decimal is not None
        and as_decimal.is_finite()
        and as_decimal.adjusted() <= MAX_EXPONENT
    ):
        if _close_to(float(as_decimal), true_quotient):
            return True

    # 3) the quotient written as a fraction or mixed number
    as_fraction = parse_fraction(user)
    if as_fraction is not None and _close_to(as_fraction.n / as_fraction.d, true_quotient):
        return True
    return False


def is_answer_correct(
    correct_answer: str,
    raw_input: Optional[str],
    question_type: Optional[QuestionType] = None,
    division: Optional[Tuple[int, int]] = None,
) -> bool:
    """
    Decide whether a pupil's free-text answer matches the canonical answer.
    ``division`` is the (dividend, divisor) pair used to accept decimal or
    fractional forms of a remainder answer.
    """
    if raw_input is None or not raw_input.strip():
        return False
    user = normalize_input(raw_input)

    if question_type in FRACTION_TYPES:
        return fractions_equivalent(user, correct_answer)

    expected_remainder = parse_remainder(correct_answer)
    if expected_remainder is not None:
        return _remainder_answer_matches(expected_remainder, user, division)

    return normalize_numeric(user) == normalize_numeric(correct_answer)


def check_answer(question: Question, raw_input: Optional[str]) -> bool:
    return is_answer_correct(
        question.answer, raw_input, question.type, division_operands(question)
    )


def mark_question(question: TestQuestion, raw_input: Optional[str]) -> TestQuestionMark:
    correct = check_answer(question, raw_input)
    return TestQuestionMark(
        question_id=question.question_id,
        slot_number=question.slot_number,
        marks_awarded=question.mark_value if correct else 0,
    )
