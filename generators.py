from __future__ import annotations

import random
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from bidmas import generate_bidmas
from fraction_kernel import (
    MixedNumber,
    SimpleFraction,
    add,
    compare,
    fraction_to_string,
    mixed_to_string,
    multiply,
    simplify,
    subtract,
    to_improper,
    to_mixed,
)
from rng import rejection_sample, resolve
from schemas.questions import Question, QuestionType

Generator = Callable[[random.Random], Question]

# --- Number helpers ---------------------------------------------------------------

_TEN_PLACES = Decimal("1e-10")


def canonical_number(value: Decimal) -> str:
    """Round to 10 decimal places and drop trailing zeros: 420.00 -> "420", 0.50 -> "0.5"."""
    q = value.quantize(_TEN_PLACES).normalize()
    return format(q, "f")


def fixed(value: Decimal, places: int) -> str:
    return f"{value:.{places}f}"


def format_with_commas(n: int) -> str:
    return f"{n:,}"


def random_decimal(rng: random.Random, low: int, high: int, places: int) -> Decimal:
    """A value in [low, high) showing exactly ``places`` decimal places."""
    scale = 10**places

    def draw() -> Optional[int]:
        units = rng.randint(low * scale, high * scale - 1)
        if places and units % 10 == 0:
            return None
        return units

    units = rejection_sample(draw, what="decimal operand")
    return Decimal(units).scaleb(-places)


def either_form(rng: random.Random, expr: str) -> str:
    """``expr =`` or the answer-first form ``_ = expr``."""
    return f"{expr} =" if rng.random() < 0.5 else f"_ = {expr}"


def random_mixed_number(rng: random.Random) -> MixedNumber:
    return MixedNumber(rng.randint(1, 4), rng.randint(1, 4), rng.randint(5, 9))


def proper_fraction(rng: random.Random, low_den: int, high_den: int) -> SimpleFraction:
    d = rng.randint(low_den, high_den)
    return SimpleFraction(rng.randint(1, d - 1), d)


def fraction_operand(f: SimpleFraction) -> str:
    return f"{f.n}/{f.d}"


# --- Whole number operations ------------------------------------------------------


def generate_addition(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a, b = rng.randint(100, 9999), rng.randint(100, 9999)
    return Question(
        type=QuestionType.Addition,
        text=either_form(rng, f"{a} + {b}"),
        answer=str(a + b),
        operands=[str(a), str(b)],
        operator="+",
    )


def generate_subtraction(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a = rng.randint(1000, 9999)
    b = rng.randint(100, a - 10)
    return Question(
        type=QuestionType.Subtraction,
        text=either_form(rng, f"{a} - {b}"),
        answer=str(a - b),
        operands=[str(a), str(b)],
        operator="-",
    )


def generate_subtraction_with_regrouping(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    # a round thousand forces a borrow through every column
    a = rng.randint(1, 9) * 1000
    b = rng.randint(100, a - 100)
    return Question(
        type=QuestionType.SubtractionWithRegrouping,
        text=f"{a} - {b} =",
        answer=str(a - b),
        operands=[str(a), str(b)],
        operator="-",
    )


def generate_multiplication(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a, b = rng.randint(10, 99), rng.randint(2, 9)
    return Question(
        type=QuestionType.Multiplication,
        text=either_form(rng, f"{a} × {b}"),
        answer=str(a * b),
        operands=[str(a), str(b)],
        operator="×",
    )


def generate_long_multiplication(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a, b = rejection_sample(
        lambda: (rng.randint(100, 999), rng.randint(10, 99)),
        lambda pair: 1000 <= pair[0] * pair[1] <= 99999,
        what="3-digit by 2-digit product",
    )
    return Question(
        type=QuestionType.LongMultiplication,
        text=f"{a} × {b} =",
        answer=str(a * b),
        operands=[str(a), str(b)],
        operator="×",
    )


def generate_multiplication_3_numbers(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    nums = [rng.randint(2, 10), rng.randint(2, 10), rng.randint(0, 10)]
    rng.shuffle(nums)
    return Question(
        type=QuestionType.Multiplication3Numbers,
        text=" × ".join(str(n) for n in nums) + " =",
        answer=str(nums[0] * nums[1] * nums[2]),
        operands=[str(n) for n in nums],
        operator="×",
    )


def generate_division(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    divisor, quotient = rng.randint(2, 9), rng.randint(10, 99)
    dividend = divisor * quotient
    return Question(
        type=QuestionType.Division,
        text=either_form(rng, f"{dividend} ÷ {divisor}"),
        answer=str(quotient),
        operands=[str(dividend), str(divisor)],
        operator="÷",
    )


def generate_long_division(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    divisor, quotient = rng.randint(11, 40), rng.randint(11, 99)
    dividend = divisor * quotient
    return Question(
        type=QuestionType.LongDivision,
        text=f"{dividend} ÷ {divisor} =",
        answer=str(quotient),
        operands=[str(dividend), str(divisor)],
        operator="÷",
    )


def generate_division_with_known_facts(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    fact = rng.randint(2, 12)
    multiple = rng.randint(2, 9)
    scale = 10 ** rng.randint(1, 3)
    dividend = fact * multiple * scale
    return Question(
        type=QuestionType.DivisionWithKnownFacts,
        text=f"{dividend} ÷ {fact} =",
        answer=str(multiple * scale),
        operands=[str(dividend), str(fact)],
        operator="÷",
    )


def generate_bidmas_question(rng: Optional[random.Random] = None) -> Question:
    return generate_bidmas(rng)


# --- Place value, powers of 10, indices -------------------------------------------


def _place_value_parts(rng: random.Random) -> Optional[tuple]:
    num = rng.randint(1_000_000, 9_999_999)
    digits = str(num)
    parts = [
        int(ch) * 10 ** (len(digits) - 1 - i) for i, ch in enumerate(digits) if ch != "0"
    ]
    if len(parts) < 2:
        return None
    return num, parts


def generate_place_value(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    num, parts = rejection_sample(lambda: _place_value_parts(rng), what="place value number")
    blank_index = rng.randint(0, len(parts) - 1)
    answer = parts[blank_index]
    shown = [format_with_commas(p) for i, p in enumerate(parts) if i != blank_index] + ["_"]
    rng.shuffle(shown)
    return Question(
        type=QuestionType.PlaceValue,
        text=f"{format_with_commas(num)} = {' + '.join(shown)}",
        answer=format_with_commas(answer),
    )


def _powers_of_ten_operand(rng: random.Random) -> Decimal:
    return random_decimal(rng, 1, 100, rng.randint(1, 2))


def generate_multiply_by_powers_of_10(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    power = rng.choice([10, 100, 1000])
    num = _powers_of_ten_operand(rng)
    return Question(
        type=QuestionType.MultiplyBy10_100_1000,
        text=f"{num} × {power} =",
        answer=canonical_number(num * power),
        operands=[str(num), str(power)],
        operator="×",
    )


def generate_divide_by_powers_of_10(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    power = rng.choice([10, 100, 1000])
    num = _powers_of_ten_operand(rng)
    return Question(
        type=QuestionType.DivideBy10_100_1000,
        text=f"{num} ÷ {power} =",
        answer=canonical_number(num / power),
        operands=[str(num), str(power)],
        operator="÷",
    )


_POWER_CHARS = {2: "²", 3: "³"}


def generate_powers_indices(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    base, power = rng.randint(2, 10), rng.randint(2, 3)
    return Question(
        type=QuestionType.PowersIndices,
        text=f"{base}{_POWER_CHARS[power]} =",
        answer=str(base**power),
        operands=[str(base), str(power)],
        operator="^",
    )


# --- Decimals ---------------------------------------------------------------------


def generate_decimal_addition(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    places1, places2 = rng.randint(1, 3), rng.randint(1, 3)
    a = random_decimal(rng, 0, 50, places1)
    b = random_decimal(rng, 0, 50, places2)
    return Question(
        type=QuestionType.DecimalAddition,
        text=f"{a} + {b} =",
        answer=fixed(a + b, max(places1, places2)),
        operands=[str(a), str(b)],
        operator="+",
    )


def generate_decimal_subtraction(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    places1, places2 = rng.randint(1, 3), rng.randint(1, 3)
    a = random_decimal(rng, 50, 100, places1)
    b = random_decimal(rng, 0, 50, places2)
    return Question(
        type=QuestionType.DecimalSubtraction,
        text=f"{a} - {b} =",
        answer=fixed(a - b, max(places1, places2)),
        operands=[str(a), str(b)],
        operator="-",
    )


def generate_decimal_multiplication(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    a = random_decimal(rng, 1, 10, 1)
    b = rng.randint(1, 9)
    return Question(
        type=QuestionType.DecimalMultiplication,
        text=f"{a} × {b} =",
        answer=fixed(a * b, 1),
        operands=[str(a), str(b)],
        operator="×",
    )


def generate_decimal_multiplication_2digit(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    # ones.tenths, e.g. 4.8
    a = Decimal(f"{rng.randint(1, 9)}.{rng.randint(1, 9)}")
    b = rng.randint(10, 99)
    return Question(
        type=QuestionType.DecimalMultiplication2Digit,
        text=f"{a} × {b} =",
        answer=fixed(a * b, 1),
        operands=[str(a), str(b)],
        operator="×",
    )


# --- Fractions --------------------------------------------------------------------


def _fraction_question(
    qtype: QuestionType, left: str, op: str, right: str, answer: str
) -> Question:
    return Question(
        type=qtype,
        text=f"{left} {op} {right} =",
        answer=answer,
        operands=[left, right],
        operator=op,
    )


def generate_fraction_addition_simple_denominators(
    rng: Optional[random.Random] = None,
) -> Question:
    rng = resolve(rng)
    f1 = proper_fraction(rng, 2, 6)
    d2 = f1.d * rng.randint(2, 4)
    f2 = SimpleFraction(rng.randint(1, d2 - 1), d2)
    return _fraction_question(
        QuestionType.FractionAdditionSimpleDenominators,
        fraction_operand(f1),
        "+",
        fraction_operand(f2),
        fraction_to_string(add(f1, f2)),
    )


def generate_fraction_addition_unlike_denominators(
    rng: Optional[random.Random] = None,
) -> Question:
    rng = resolve(rng)
    f1 = proper_fraction(rng, 3, 7)
    f2 = rejection_sample(lambda: proper_fraction(rng, 3, 7), lambda f: f.d != f1.d)
    return _fraction_question(
        QuestionType.FractionAdditionUnlikeDenominators,
        fraction_operand(f1),
        "+",
        fraction_operand(f2),
        fraction_to_string(add(f1, f2)),
    )


def generate_fraction_addition_mixed_numbers(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    m1, m2 = random_mixed_number(rng), random_mixed_number(rng)
    total = add(to_improper(m1), to_improper(m2))
    return _fraction_question(
        QuestionType.FractionAdditionMixedNumbers,
        mixed_to_string(m1),
        "+",
        mixed_to_string(m2),
        mixed_to_string(to_mixed(total)),
    )


def _ordered_pair(a: SimpleFraction, b: SimpleFraction) -> tuple:
    """Swap so the larger fraction comes first and the difference is non-negative."""
    return (b, a) if compare(a, b) < 0 else (a, b)


def generate_fraction_subtraction_simple_denominators(
    rng: Optional[random.Random] = None,
) -> Question:
    rng = resolve(rng)

    def draw() -> Optional[tuple]:
        f1 = proper_fraction(rng, 2, 6)
        d2 = f1.d * rng.randint(2, 4)
        f2 = SimpleFraction(rng.randint(1, d2 - 1), d2)
        top, bottom = _ordered_pair(f1, f2)
        diff = subtract(top, bottom)
        return None if diff.n == 0 else (top, bottom, diff)

    top, bottom, diff = rejection_sample(draw, what="non-zero fraction difference")
    return _fraction_question(
        QuestionType.FractionSubtractionSimpleDenominators,
        fraction_operand(top),
        "-",
        fraction_operand(bottom),
        fraction_to_string(diff),
    )


def generate_fraction_subtraction_unlike_denominators(
    rng: Optional[random.Random] = None,
) -> Question:
    rng = resolve(rng)

    def draw() -> Optional[tuple]:
        top, bottom = _ordered_pair(proper_fraction(rng, 3, 10), proper_fraction(rng, 3, 10))
        diff = subtract(top, bottom)
        return None if diff.n == 0 else (top, bottom, diff)

    top, bottom, diff = rejection_sample(draw, what="non-zero fraction difference")
    return _fraction_question(
        QuestionType.FractionSubtractionUnlikeDenominators,
        fraction_operand(top),
        "-",
        fraction_operand(bottom),
        fraction_to_string(diff),
    )


def generate_fraction_subtraction_mixed_numbers(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)

    def draw() -> Optional[tuple]:
        m1, m2 = random_mixed_number(rng), random_mixed_number(rng)
        if compare(to_improper(m1), to_improper(m2)) < 0:
            m1, m2 = m2, m1
        diff = subtract(to_improper(m1), to_improper(m2))
        return None if diff.n == 0 else (m1, m2, diff)

    m1, m2, diff = rejection_sample(draw, what="non-zero mixed number difference")
    return _fraction_question(
        QuestionType.FractionSubtractionMixedNumbers,
        mixed_to_string(m1),
        "-",
        mixed_to_string(m2),
        mixed_to_string(to_mixed(diff)),
    )


def generate_fraction_multiplication(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    f1, f2 = proper_fraction(rng, 2, 8), proper_fraction(rng, 2, 8)
    return _fraction_question(
        QuestionType.FractionMultiplication,
        fraction_operand(f1),
        "×",
        fraction_operand(f2),
        fraction_to_string(multiply(f1, f2)),
    )


def generate_fraction_multiplication_mixed_numbers(
    rng: Optional[random.Random] = None,
) -> Question:
    rng = resolve(rng)
    m1 = random_mixed_number(rng)
    m2 = MixedNumber(0, rng.randint(1, 5), rng.randint(6, 10))
    product = multiply(to_improper(m1), to_improper(m2))
    return _fraction_question(
        QuestionType.FractionMultiplicationMixedNumbers,
        mixed_to_string(m1),
        "×",
        mixed_to_string(m2),
        mixed_to_string(to_mixed(product)),
    )


def generate_fraction_multiplication_2digit(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    n = rng.randint(1, 5)
    m = MixedNumber(rng.randint(1, 4), n, rng.randint(n + 1, 9))
    multiplier = rng.randint(10, 99)
    product = multiply(to_improper(m), SimpleFraction(multiplier, 1))
    return _fraction_question(
        QuestionType.FractionMultiplication2Digit,
        mixed_to_string(m),
        "×",
        str(multiplier),
        mixed_to_string(to_mixed(product)),
    )


def generate_fraction_division(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    f = proper_fraction(rng, 2, 10)
    divisor = rng.randint(2, 5)
    quotient = simplify(SimpleFraction(f.n, f.d * divisor))
    return _fraction_question(
        QuestionType.FractionDivision,
        fraction_operand(f),
        "÷",
        str(divisor),
        fraction_to_string(quotient),
    )


def generate_fractions_of_amounts(rng: Optional[random.Random] = None) -> Question:
    rng = resolve(rng)
    f = proper_fraction(rng, 2, 10)
    amount = f.d * rng.randint(2, 12)
    return Question(
        type=QuestionType.FractionsOfAmounts,
        text=f"{f.n}/{f.d} of {amount} =",
        answer=str(amount // f.d * f.n),
        operands=[fraction_operand(f), str(amount)],
        operator="of",
    )


# --- Percentages ------------------------------------------------------------------


def percentage_for_difficulty(rng: random.Random, difficulty: int) -> int:
    """Tier 0: friendly percentages; 1: multiples of 10; 2: multiples of 5; 3+: anything else."""
    if difficulty < 1:
        return rng.choice([10, 20, 25, 50, 75])
    if difficulty < 2:
        return rng.randint(2, 9) * 10
    if difficulty < 3:
        return rng.randint(3, 19) * 5
    return rejection_sample(lambda: rng.randint(1, 99), lambda p: p % 5 != 0)


def percentage_question(percentage: int, amount: int) -> Question:
    return Question(
        type=QuestionType.Percentages,
        text=f"{percentage}% of {amount} =",
        answer=canonical_number(Decimal(percentage) * amount / 100),
        operands=[str(percentage), str(amount)],
        operator="%",
    )


def generate_percentages(rng: Optional[random.Random] = None, difficulty: int = 0) -> Question:
    rng = resolve(rng)
    percentage = percentage_for_difficulty(rng, difficulty)
    return percentage_question(percentage, rng.randint(2, 20) * 10)


# --- Registry ---------------------------------------------------------------------

GENERATORS: Dict[QuestionType, Generator] = {
    QuestionType.Addition: generate_addition,
    QuestionType.Subtraction: generate_subtraction,
    QuestionType.SubtractionWithRegrouping: generate_subtraction_with_regrouping,
    QuestionType.Multiplication: generate_multiplication,
    QuestionType.LongMultiplication: generate_long_multiplication,
    QuestionType.Multiplication3Numbers: generate_multiplication_3_numbers,
    QuestionType.Division: generate_division,
    QuestionType.LongDivision: generate_long_division,
    QuestionType.DivisionWithKnownFacts: generate_division_with_known_facts,
    QuestionType.BIDMAS: generate_bidmas_question,
    QuestionType.PlaceValue: generate_place_value,
    QuestionType.MultiplyBy10_100_1000: generate_multiply_by_powers_of_10,
    QuestionType.DivideBy10_100_1000: generate_divide_by_powers_of_10,
    QuestionType.PowersIndices: generate_powers_indices,
    QuestionType.DecimalAddition: generate_decimal_addition,
    QuestionType.DecimalSubtraction: generate_decimal_subtraction,
    QuestionType.DecimalMultiplication: generate_decimal_multiplication,
    QuestionType.DecimalMultiplication2Digit: generate_decimal_multiplication_2digit,
    QuestionType.FractionAdditionSimpleDenominators: generate_fraction_addition_simple_denominators,
    QuestionType.FractionAdditionUnlikeDenominators: generate_fraction_addition_unlike_denominators,
    QuestionType.FractionAdditionMixedNumbers: generate_fraction_addition_mixed_numbers,
    QuestionType.FractionSubtractionSimpleDenominators: generate_fraction_subtraction_simple_denominators,
    QuestionType.FractionSubtractionUnlikeDenominators: generate_fraction_subtraction_unlike_denominators,
    QuestionType.FractionSubtractionMixedNumbers: generate_fraction_subtraction_mixed_numbers,
    QuestionType.FractionMultiplication: generate_fraction_multiplication,
    QuestionType.FractionMultiplicationMixedNumbers: generate_fraction_multiplication_mixed_numbers,
    QuestionType.FractionMultiplication2Digit: generate_fraction_multiplication_2digit,
    QuestionType.FractionDivision: generate_fraction_division,
    QuestionType.FractionsOfAmounts: generate_fractions_of_amounts,
    QuestionType.Percentages: generate_percentages,
}


def _ensure_every_type_has_generator() -> None:
    missing = [t.name for t in QuestionType if t not in GENERATORS]
    if missing:
        raise RuntimeError(f"Question types without a generator: {missing}")


_ensure_every_type_has_generator()

QUESTION_TYPES: List[QuestionType] = list(QuestionType)


def generate_question_by_type(
    qtype: QuestionType, difficulty: int = 0, rng: Optional[random.Random] = None
) -> Question:
    rng = resolve(rng)
    if qtype is QuestionType.Percentages:
        return generate_percentages(rng, difficulty)
    return GENERATORS[qtype](rng)


def generate_new_question(
    exclude_type: Optional[QuestionType] = None, rng: Optional[random.Random] = None
) -> Question:
    rng = resolve(rng)
    available = [t for t in QUESTION_TYPES if t is not exclude_type]
    return GENERATORS[rng.choice(available)](rng)
