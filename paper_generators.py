"""
Generators for the specific difficulty shapes used on the arithmetic paper.

Each function is pinned to one QuestionType and one difficulty band, so a
remediation question drawn from the same function matches the shape of the
paper question a pupil got wrong.
"""

from __future__ import annotations

import random
from typing import Literal, Optional

from bidmas import generate_bidmas
from fraction_kernel import (
    MixedNumber,
    SimpleFraction,
    add,
    lcm,
    mixed_to_string,
    multiply,
    to_improper,
    to_mixed,
)
from generators import (
    canonical_number,
    fixed,
    fraction_operand,
    percentage_question,
    proper_fraction,
    random_decimal,
)
from rng import rejection_sample, resolve
from schemas.questions import Question, QuestionType

KnownFactsDifficulty = Literal["easy", "medium", "hard"]
PercentageConstraint = Literal["small", "large-non-multiple", "standard"]

KNOWN_FACTS_DIFFICULTIES = ("easy", "medium", "hard")
PERCENTAGE_CONSTRAINTS = ("small", "large-non-multiple", "standard")

# difficulty -> (fact range, multiple range, power-of-ten exponent range)
_KNOWN_FACTS_RANGES = {
    "easy": ((2, 5), (2, 9), (1, 1)),
    "medium": ((3, 9), (2, 9), (1, 2)),
    "hard": ((6, 12), (3, 12), (2, 3)),
}


def _digits(n: int) -> int:
    return len(str(abs(n)))


def _binary(qtype: QuestionType, a, op: str, b, answer: str, text: Optional[str] = None) -> Question:
    return Question(
        type=qtype,
        text=text if text is not None else f"{a} {op} {b} =",
        answer=answer,
        operands=[str(a), str(b)],
        operator=op,
    )


# --- Place value and powers of ten ------------------------------------------------


def multiply_by_powers_of_10(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    num = random_decimal(rng, 1, 100, rng.randint(1, 2))
    power = rng.choice([10, 100, 1000])
    return _binary(
        QuestionType.MultiplyBy10_100_1000, num, "×", power, canonical_number(num * power)
    )


def divide_by_powers_of_10_decimal(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    num = random_decimal(rng, 1, 1000, 1)
    power = rng.choice([10, 100, 1000])
    return _binary(
        QuestionType.DivideBy10_100_1000, num, "÷", power, canonical_number(num / power)
    )


# --- Whole number operations ------------------------------------------------------


def multiplication_2or3_digit(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a = rng.randint(10, 99) if rng.random() < 0.5 else rng.randint(100, 999)
    b = rng.randint(2, 9)
    return _binary(QuestionType.Multiplication, a, "×", b, str(a * b))


def missing_subtrahend(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    minuend = rng.randint(1000, 9999)
    subtrahend = rng.randint(100, minuend - 100)
    difference = minuend - subtrahend
    return _binary(
        QuestionType.Subtraction,
        minuend,
        "-",
        difference,
        str(subtrahend),
        text=f"{minuend} - _ = {difference}",
    )


def inverse_addition(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    total = rng.randint(10, 99) * 100
    addend = rng.randint(100, total - 100)
    return _binary(
        QuestionType.Addition,
        addend,
        "+",
        total,
        str(total - addend),
        text=f"_ + {addend} = {total}",
    )


def division_3or4_digit_by_1_digit(rng: Optional[random.Random] = None) -> Question:
    """Quotient of at least two digits; a remainder is allowed and written ``Q r R``."""
    rng = resolve(rng)

    def draw():
        dividend = rng.randint(100, 999) if rng.random() < 0.5 else rng.randint(1000, 9999)
        return dividend, rng.randint(3, 9)

    dividend, divisor = rejection_sample(
        draw, lambda pair: pair[0] // pair[1] >= 10, what="short division"
    )
    quotient, remainder = divmod(dividend, divisor)
    answer = f"{quotient} r {remainder}" if remainder else str(quotient)
    return _binary(QuestionType.Division, dividend, "÷", divisor, answer)


def known_facts_division(
    difficulty: KnownFactsDifficulty = "medium", rng: Optional[random.Random] = None
) -> Question:
    """dividend = fact × multiple × 10^k, so the sum reduces to a times-table fact."""
    rng = resolve(rng)
    if difficulty not in _KNOWN_FACTS_RANGES:
        raise ValueError(f"Unknown known-facts difficulty: {difficulty!r}")
    fact_range, multiple_range, exponent_range = _KNOWN_FACTS_RANGES[difficulty]
    fact = rng.randint(*fact_range)
    multiple = rng.randint(*multiple_range)
    scale = 10 ** rng.randint(*exponent_range)
    return _binary(
        QuestionType.DivisionWithKnownFacts,
        fact * multiple * scale,
        "÷",
        fact,
        str(multiple * scale),
    )


def bidmas_different_levels(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    level = rng.choice(["plain", "brackets", "indices"])
    return generate_bidmas(
        rng, require_brackets=level == "brackets", require_indices=level == "indices"
    )


def multiplication_3_numbers_with_two_digit(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    nums = [rng.randint(11, 99), rng.randint(2, 9), rng.randint(2, 9)]
    rng.shuffle(nums)
    return Question(
        type=QuestionType.Multiplication3Numbers,
        text=" × ".join(str(n) for n in nums) + " =",
        answer=str(nums[0] * nums[1] * nums[2]),
        operands=[str(n) for n in nums],
        operator="×",
    )


def long_multiplication_4digit_by_2digit(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a, b = rejection_sample(
        lambda: (rng.randint(1000, 9999), rng.randint(11, 99)),
        lambda pair: _digits(pair[0] * pair[1]) <= 6,
        what="4-digit by 2-digit product",
    )
    return _binary(QuestionType.LongMultiplication, a, "×", b, str(a * b))


def _long_division(rng: random.Random, low: int, high: int, max_quotient: int) -> Question:
    divisor, quotient = rejection_sample(
        lambda: (rng.randint(12, 99), rng.randint(2, max_quotient)),
        lambda pair: low <= pair[0] * pair[1] <= high,
        what="long division",
    )
    return _binary(QuestionType.LongDivision, divisor * quotient, "÷", divisor, str(quotient))


def long_division_3digit_by_2digit(rng: Optional[random.Random] = None) -> Question:
    return _long_division(resolve(rng), 100, 999, 83)


def long_division_4digit_by_2digit(rng: Optional[random.Random] = None) -> Question:
    return _long_division(resolve(rng), 1000, 9999, 833)


# --- Decimals ---------------------------------------------------------------------


def decimal_addition_different_places(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    places1, places2 = rng.sample([0, 1, 2], 2)
    a = random_decimal(rng, 1, 100, places1)
    b = random_decimal(rng, 1, 100, places2)
    return _binary(QuestionType.DecimalAddition, a, "+", b, fixed(a + b, max(places1, places2)))


def decimal_subtraction_constrained(rng: Optional[random.Random] = None) -> Question:
    """Whole number or 1 dp minuend take away a 2 dp subtrahend."""
    rng = resolve(rng)
    places = rng.randint(0, 1)
    a, b = rejection_sample(
        lambda: (random_decimal(rng, 2, 30, places), random_decimal(rng, 1, 30, 2)),
        lambda pair: pair[0] > pair[1],
        what="decimal subtraction",
    )
    return _binary(QuestionType.DecimalSubtraction, a, "-", b, fixed(a - b, 2))


def decimal_multiplication_2digit(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a = random_decimal(rng, 1, 10, 1)
    b = rng.randint(12, 99)
    return _binary(QuestionType.DecimalMultiplication2Digit, a, "×", b, fixed(a * b, 1))


# --- Fractions --------------------------------------------------------------------


def proper_fraction_times_large_int(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    f = proper_fraction(rng, 3, 9)
    whole = rng.randint(100, 999)
    product = multiply(f, SimpleFraction(whole, 1))
    return _binary(
        QuestionType.FractionMultiplication,
        fraction_operand(f),
        "×",
        whole,
        mixed_to_string(to_mixed(product)),
    )


def fraction_addition_three_related(rng: Optional[random.Random] = None) -> Question:
    """Three fractions whose denominators are all multiples of one base."""
    rng = resolve(rng)
    base = rng.randint(2, 4)
    factors = rng.sample([1, 2, 3, 4], 3)
    fractions = [proper_fraction(rng, base * k, base * k) for k in factors]
    total = fractions[0]
    for f in fractions[1:]:
        total = add(total, f)
    operands = [fraction_operand(f) for f in fractions]
    return Question(
        type=QuestionType.FractionAdditionSimpleDenominators,
        text=" + ".join(operands) + " =",
        answer=mixed_to_string(to_mixed(total)),
        operands=operands,
        operator="+",
    )


def fraction_addition_unlike_with_mixed(rng: Optional[random.Random] = None) -> Question:
    """Unlike denominators, neither a multiple of the other; the first operand may be mixed."""
    rng = resolve(rng)
    f1, f2 = rejection_sample(
        lambda: (proper_fraction(rng, 3, 9), proper_fraction(rng, 3, 9)),
        lambda pair: lcm(pair[0].d, pair[1].d) not in (pair[0].d, pair[1].d),
        what="unlike denominators",
    )
    whole = rng.randint(1, 3) if rng.random() < 0.5 else 0
    first = MixedNumber(whole, f1.n, f1.d)
    total = add(to_improper(first), f2)
    return _binary(
        QuestionType.FractionAdditionUnlikeDenominators,
        mixed_to_string(first),
        "+",
        fraction_operand(f2),
        mixed_to_string(to_mixed(total)),
    )


# --- Percentages ------------------------------------------------------------------


def percentage_question_for(
    constraint: PercentageConstraint = "standard", rng: Optional[random.Random] = None
) -> Question:
    rng = resolve(rng)
    if constraint == "standard":
        percentage = rng.choice([10, 20, 25, 50, 75])
        amount = rng.randint(2, 20) * 20
    elif constraint == "small":
        percentage = rng.randint(1, 9)
        amount = rng.randint(2, 9) * 100
    elif constraint == "large-non-multiple":
        percentage = rejection_sample(lambda: rng.randint(51, 99), lambda p: p % 5 != 0)
        amount = rng.randint(2, 9) * 100
    else:
        raise ValueError(f"Unknown percentage constraint: {constraint!r}")
    return percentage_question(percentage, amount)

