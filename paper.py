from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import paper_generators as pg
from generators import generate_question_by_type
from rng import new_id, resolve
from schemas.questions import Question, QuestionType, TestQuestion

logger = logging.getLogger(__name__)

PAPER_VERSION = "ks2-sats-arithmetic-v1"
SLOT_COUNT = 36

# --- Constraint flags -------------------------------------------------------------
# Shared with weekly_practice: these strings are persisted on every TestQuestion.

MULTIPLY_BY_POWERS_OF_10 = "multiplyBy10_100_1000"
DIVIDE_BY_POWERS_OF_10_DECIMAL = "divideBy10_100_1000DecimalDividend"
MULTIPLICATION_2OR3_DIGIT = "2or3DigitBy1Digit"
MISSING_SUBTRAHEND_OR_INVERSE_ADDITION = "missingSubtrahendOrInverseAddition"
MISSING_SUBTRAHEND = "missingSubtrahend"
INVERSE_ADDITION = "inverseAddition"
DIFFERENT_DECIMAL_PLACES = "differentDecimalPlaces"
MIXED_BIDMAS_LEVELS = "mixedBidmasLevels"
DIVISION_REMAINDER_POSSIBLE = "3or4DigitDivisionRemainderPossible"
DECIMAL_SUBTRACTION_CONSTRAINT = "decimalSubtractionConstraint"
THREE_NUMBERS_ONE_TWO_DIGIT = "threeNumbersOneTwoDigit"
PROPER_FRACTION_BY_LARGE_INTEGER = "properFractionByLargeInteger"
THREE_FRACTIONS_RELATED = "threeFractionsRelatedDenominators"
DECIMAL_1DP_BY_2DIGIT = "1dpBy2Digit"
UNLIKE_DENOMINATORS_MIXED_OPTIONAL = "unlikeDenominatorsMixedOptional"
LONG_DIVISION_3BY2 = "3digitBy2digitDivision"
LONG_MULTIPLICATION_4BY2 = "4digitBy2digitMultiplication"
LONG_DIVISION_4BY2 = "4digitBy2digitDivision"
KNOWN_FACTS_PREFIX = "knownFacts:"
PERCENTAGE_PREFIX = "percentage:"

SlotGenerator = Callable[[random.Random], Question]


@dataclass(frozen=True)
class Slot:
    slot_number: int
    mark_value: int
    generator: SlotGenerator
    constraint_flags: Tuple[str, ...] = field(default_factory=tuple)


def _by_type(qtype: QuestionType) -> SlotGenerator:
    return lambda rng: generate_question_by_type(qtype, rng=rng)


def missing_subtrahend_or_inverse_addition(rng: random.Random) -> Question:
    return pg.missing_subtrahend(rng) if rng.random() < 0.5 else pg.inverse_addition(rng)


def build_slots(rng: Optional[random.Random] = None) -> List[Slot]:
    """
    The fixed 36-slot blueprint. Tiered slots draw from shuffled pools so each
    percentage tier appears exactly once and the known-facts tiers appear as
    easy, medium, medium, hard in some order.
    """
    rng = resolve(rng)
    percentages = list(pg.PERCENTAGE_CONSTRAINTS)
    rng.shuffle(percentages)
    known_facts = ["easy", "medium", "hard", "medium"]
    rng.shuffle(known_facts)

    def percentage_slot(n: int, tier: str) -> Slot:
        return Slot(
            n,
            1,
            lambda r: pg.percentage_question_for(tier, r),
            (f"{PERCENTAGE_PREFIX}{tier}",),
        )

    def known_facts_slot(n: int, tier: str) -> Slot:
        return Slot(
            n,
            1,
            lambda r: pg.known_facts_division(tier, r),
            (f"{KNOWN_FACTS_PREFIX}{tier}",),
        )

    return [
        Slot(1, 1, pg.multiply_by_powers_of_10, (MULTIPLY_BY_POWERS_OF_10,)),
        Slot(2, 1, _by_type(QuestionType.PlaceValue)),
        Slot(3, 1, _by_type(QuestionType.Addition)),
        Slot(4, 1, pg.divide_by_powers_of_10_decimal, (DIVIDE_BY_POWERS_OF_10_DECIMAL,)),
        Slot(5, 1, _by_type(QuestionType.Subtraction)),
        known_facts_slot(6, known_facts[0]),
        Slot(7, 1, _by_type(QuestionType.SubtractionWithRegrouping)),
        Slot(8, 1, pg.multiplication_2or3_digit, (MULTIPLICATION_2OR3_DIGIT,)),
        Slot(
            9,
            1,
            missing_subtrahend_or_inverse_addition,
            (MISSING_SUBTRAHEND_OR_INVERSE_ADDITION,),
        ),
        Slot(10, 1, pg.decimal_addition_different_places, (DIFFERENT_DECIMAL_PLACES,)),
        known_facts_slot(11, known_facts[1]),
        Slot(12, 1, pg.bidmas_different_levels, (MIXED_BIDMAS_LEVELS,)),
        Slot(13, 1, _by_type(QuestionType.FractionSubtractionSimpleDenominators)),
        Slot(14, 1, pg.division_3or4_digit_by_1_digit, (DIVISION_REMAINDER_POSSIBLE,)),
        Slot(15, 1, pg.decimal_subtraction_constrained, (DECIMAL_SUBTRACTION_CONSTRAINT,)),
        percentage_slot(16, percentages[0]),
        Slot(17, 1, _by_type(QuestionType.FractionMultiplication)),
        Slot(
            18, 1, pg.multiplication_3_numbers_with_two_digit, (THREE_NUMBERS_ONE_TWO_DIGIT,)
        ),
        known_facts_slot(19, known_facts[2]),
        Slot(20, 1, pg.proper_fraction_times_large_int, (PROPER_FRACTION_BY_LARGE_INTEGER,)),
        Slot(21, 1, _by_type(QuestionType.FractionDivision)),
        Slot(22, 1, pg.fraction_addition_three_related, (THREE_FRACTIONS_RELATED,)),
        Slot(23, 1, pg.division_3or4_digit_by_1_digit, (DIVISION_REMAINDER_POSSIBLE,)),
        Slot(24, 1, pg.decimal_multiplication_2digit, (DECIMAL_1DP_BY_2DIGIT,)),
        Slot(
            25, 1, pg.fraction_addition_unlike_with_mixed, (UNLIKE_DENOMINATORS_MIXED_OPTIONAL,)
        ),
        percentage_slot(26, percentages[1]),
        Slot(27, 1, _by_type(QuestionType.FractionAdditionMixedNumbers)),
        known_facts_slot(28, known_facts[3]),
        Slot(29, 1, _by_type(QuestionType.FractionSubtractionMixedNumbers)),
        Slot(30, 1, pg.bidmas_different_levels, (MIXED_BIDMAS_LEVELS,)),
        Slot(31, 2, _by_type(QuestionType.LongMultiplication)),
        percentage_slot(32, percentages[2]),
        Slot(33, 2, pg.long_division_3digit_by_2digit, (LONG_DIVISION_3BY2,)),
        Slot(34, 1, _by_type(QuestionType.FractionMultiplication2Digit)),
        Slot(35, 2, pg.long_multiplication_4digit_by_2digit, (LONG_MULTIPLICATION_4BY2,)),
        Slot(36, 2, pg.long_division_4digit_by_2digit, (LONG_DIVISION_4BY2,)),
    ]


def build_test_question(
    slot_number: int,
    mark_value: int,
    question: Question,
    constraint_flags: List[str],
    rng: Optional[random.Random] = None,
) -> TestQuestion:
    return TestQuestion(
        **question.model_dump(),
        question_id=new_id(rng),
        slot_number=slot_number,
        mark_value=mark_value,
        constraint_flags=constraint_flags,
    )


def generate_test_paper(rng: Optional[random.Random] = None) -> List[TestQuestion]:
    rng = resolve(rng)
    paper: List[TestQuestion] = []
    for slot in build_slots(rng):
        question = slot.generator(rng)
        flags = list(slot.constraint_flags)
        if MISSING_SUBTRAHEND_OR_INVERSE_ADDITION in flags:
            # record which of the two generators ran so remediation can repeat it
            flags.append(
                INVERSE_ADDITION if question.type is QuestionType.Addition else MISSING_SUBTRAHEND
            )
        paper.append(build_test_question(slot.slot_number, slot.mark_value, question, flags, rng))
    logger.debug("generated %s paper with %d questions", PAPER_VERSION, len(paper))
    return paper


_ADJECTIVES = [
    "Swift", "Brave", "Clever", "Happy", "Bright",
    "Quick", "Calm", "Wise", "Strong", "Bold",
    "Kind", "Sharp", "Grand", "Great", "Super",
    "Mighty", "Proud", "Magic", "Golden", "Silver",
]  # fmt: skip
_ANIMALS = [
    "Panda", "Tiger", "Eagle", "Dolphin", "Lion",
    "Wolf", "Bear", "Hawk", "Lynx", "Otter",
    "Falcon", "Fox", "Whale", "Owl", "Rhino",
    "Shark", "Rabbit", "Turtle", "Deer", "Badger",
]  # fmt: skip


def generate_pupil_alias(rng: Optional[random.Random] = None) -> str:
    """Anonymous display name for printed sheets, e.g. "Swift Panda"."""
    rng = resolve(rng)
    return f"{rng.choice(_ADJECTIVES)} {rng.choice(_ANIMALS)}"
