import random
from decimal import Decimal
from fractions import Fraction
from functools import reduce

import pytest

from answer_matcher import check_answer, parse_fraction
from bidmas import replay_steps
from expression import evaluate_expression, rederive_answer
from generators import (
    GENERATORS,
    QUESTION_TYPES,
    canonical_number,
    fixed,
    generate_new_question,
    generate_percentages,
    generate_question_by_type,
    random_decimal,
)
from rng import GenerationExhausted, new_id, rejection_sample
from schemas.questions import QuestionType

SEEDS = range(25)

FRACTION_DIFFERENCES = {
    QuestionType.FractionSubtractionSimpleDenominators,
    QuestionType.FractionSubtractionUnlikeDenominators,
    QuestionType.FractionSubtractionMixedNumbers,
}


def test_every_type_has_a_generator():
    assert set(GENERATORS) == set(QuestionType)
    assert len(QUESTION_TYPES) == 30


@pytest.mark.parametrize("qtype", list(QuestionType), ids=lambda t: t.name)
def test_answers_match_the_question_text(qtype):
    for seed in SEEDS:
        q = generate_question_by_type(qtype, rng=random.Random(seed))
        assert q.type is qtype
        assert q.text.strip()
        assert rederive_answer(q.text) == evaluate_expression(q.answer), q.text


def test_same_seed_same_question():
    for qtype in QuestionType:
        a = generate_question_by_type(qtype, rng=random.Random(42))
        b = generate_question_by_type(qtype, rng=random.Random(42))
        assert a == b


def test_whole_number_operations_carry_operands():
    rng = random.Random(3)
    for qtype, op in [
        (QuestionType.Addition, "+"),
        (QuestionType.Subtraction, "-"),
        (QuestionType.Multiplication, "×"),
        (QuestionType.Division, "÷"),
        (QuestionType.LongDivision, "÷"),
    ]:
        q = generate_question_by_type(qtype, rng=rng)
        assert q.operator == op
        assert len(q.operands) == 2


def test_subtraction_results_not_negative():
    for seed in SEEDS:
        rng = random.Random(seed)
        for qtype in (
            QuestionType.Subtraction,
            QuestionType.SubtractionWithRegrouping,
            QuestionType.DecimalSubtraction,
        ):
            q = generate_question_by_type(qtype, rng=rng)
            assert Decimal(q.answer) >= 0


def test_fraction_differences_are_positive():
    for seed in SEEDS:
        rng = random.Random(seed)
        for qtype in FRACTION_DIFFERENCES:
            q = generate_question_by_type(qtype, rng=rng)
            assert evaluate_expression(q.answer) > 0


def test_decimal_addition_answer_keeps_widest_places():
    for seed in SEEDS:
        q = generate_question_by_type(QuestionType.DecimalAddition, rng=random.Random(seed))
        places = max(len(o.split(".")[1]) if "." in o else 0 for o in q.operands)
        assert len(q.answer.split(".")[1]) == places


def test_place_value_has_one_blank():
    for seed in SEEDS:
        q = generate_question_by_type(QuestionType.PlaceValue, rng=random.Random(seed))
        assert q.text.count("_") == 1
        assert "," in q.text


def test_powers_use_superscripts():
    q = generate_question_by_type(QuestionType.PowersIndices, rng=random.Random(1))
    assert q.text[-3] in "²³"


def test_percentage_difficulty_tiers():
    for seed in SEEDS:
        easy = generate_percentages(random.Random(seed), difficulty=0)
        assert int(easy.operands[0]) in (10, 20, 25, 50, 75)
        tens = generate_percentages(random.Random(seed), difficulty=1)
        assert int(tens.operands[0]) % 10 == 0
        fives = generate_percentages(random.Random(seed), difficulty=2)
        assert int(fives.operands[0]) % 5 == 0
        hard = generate_percentages(random.Random(seed), difficulty=3)
        assert int(hard.operands[0]) % 5 != 0


def test_generate_new_question_respects_exclusion():
    rng = random.Random(9)
    for _ in range(200):
        q = generate_new_question(exclude_type=QuestionType.BIDMAS, rng=rng)
        assert q.type is not QuestionType.BIDMAS


def test_canonical_number():
    assert canonical_number(Decimal("4.2") * 100) == "420"
    assert canonical_number(Decimal("0.50")) == "0.5"
    assert canonical_number(Decimal("4.5") / 1000) == "0.0045"
    assert fixed(Decimal("12.3") - Decimal("2.30"), 2) == "10.00"


def test_random_decimal_shows_exact_places():
    rng = random.Random(5)
    for places in (1, 2, 3):
        for _ in range(50):
            d = random_decimal(rng, 1, 10, places)
            assert -d.as_tuple().exponent == places
            assert str(d)[-1] != "0"


def test_rejection_sample_is_bounded():
    with pytest.raises(GenerationExhausted):
        rejection_sample(lambda: 1, lambda _: False, what="impossible", max_attempts=5)
    assert rejection_sample(lambda: 4, lambda n: n % 2 == 0) == 4


def test_new_id_is_seeded():
    assert new_id(random.Random(1)) == new_id(random.Random(1))
    assert new_id(random.Random(1)) != new_id(random.Random(2))


SWEEP_DRAWS = 10_000


def _exact(text):
    text = text.replace(",", "")
    f = parse_fraction(text)
    if f is not None:
        return Fraction(f.n, f.d)
    return Fraction(Decimal(text))


def _expected_from_operands(q):
    values = [_exact(o) for o in q.operands]
    if q.operator == "+":
        return values[0] + values[1]
    if q.operator == "-":
        return values[0] - values[1]
    if q.operator == "×":
        return reduce(lambda x, y: x * y, values)
    if q.operator == "÷":
        return values[0] / values[1]
    if q.operator == "^":
        return values[0] ** int(values[1])
    if q.operator == "of":
        return values[0] * values[1]
    if q.operator == "%":
        return values[0] * values[1] / 100
    raise AssertionError(f"unexpected operator {q.operator!r}")


def _place_value_balances(q):
    total, parts = q.text.split(" = ")
    shown = [p for p in parts.split(" + ") if p != "_"]
    return _exact(total) == sum(_exact(p) for p in shown) + _exact(q.answer)


def test_many_random_draws_are_consistent():
    rng = random.Random(2024)
    seen = set()
    for _ in range(SWEEP_DRAWS):
        q = generate_new_question(rng=rng)
        seen.add(q.type)
        assert check_answer(q, q.answer), q.text
        if q.type is QuestionType.BIDMAS:
            steps = q.bidmas_metadata.execution_steps
            assert replay_steps(q.text, steps) == Fraction(q.answer), q.text
        elif q.type is QuestionType.PlaceValue:
            assert _place_value_balances(q), q.text
        else:
            assert _expected_from_operands(q) == _exact(q.answer), q.text
    assert seen == set(QuestionType)
