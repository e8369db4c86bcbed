import random
from collections import Counter

import paper
from expression import evaluate_expression, rederive_answer
from paper import SLOT_COUNT, generate_pupil_alias, generate_test_paper
from schemas.questions import QuestionType


def _flags_with(prefix, questions):
    return [f[len(prefix) :] for q in questions for f in q.constraint_flags if f.startswith(prefix)]


def test_paper_shape():
    questions = generate_test_paper(random.Random(0))
    assert len(questions) == SLOT_COUNT
    assert [q.slot_number for q in questions] == list(range(1, 37))
    assert {q.slot_number for q in questions if q.mark_value == 2} == {31, 33, 35, 36}
    assert sum(q.mark_value for q in questions) == 40
    assert len({q.question_id for q in questions}) == SLOT_COUNT


def test_same_seed_same_paper():
    a = generate_test_paper(random.Random(11))
    b = generate_test_paper(random.Random(11))
    assert [q.model_dump() for q in a] == [q.model_dump() for q in b]


def test_tiered_slots_cover_every_tier():
    for seed in range(30):
        questions = generate_test_paper(random.Random(seed))
        percentages = _flags_with(paper.PERCENTAGE_PREFIX, questions)
        assert sorted(percentages) == ["large-non-multiple", "small", "standard"]
        known_facts = _flags_with(paper.KNOWN_FACTS_PREFIX, questions)
        assert Counter(known_facts) == Counter({"easy": 1, "medium": 2, "hard": 1})


def test_percentage_tiers_have_the_right_shape():
    for seed in range(30):
        for q in generate_test_paper(random.Random(seed)):
            tiers = _flags_with(paper.PERCENTAGE_PREFIX, [q])
            if not tiers:
                continue
            p = int(q.operands[0])
            if tiers[0] == "small":
                assert 1 <= p <= 9
            elif tiers[0] == "large-non-multiple":
                assert 51 <= p <= 99 and p % 5 != 0


def test_slot_nine_records_which_form_was_used():
    seen = set()
    for seed in range(30):
        q = generate_test_paper(random.Random(seed))[8]
        assert q.constraint_flags[0] == paper.MISSING_SUBTRAHEND_OR_INVERSE_ADDITION
        if q.type is QuestionType.Addition:
            assert q.constraint_flags[1] == paper.INVERSE_ADDITION
        else:
            assert q.constraint_flags[1] == paper.MISSING_SUBTRAHEND
        assert "_" in q.text
        seen.add(q.constraint_flags[1])
    assert seen == {paper.INVERSE_ADDITION, paper.MISSING_SUBTRAHEND}


def test_long_division_and_multiplication_sizes():
    for seed in range(30):
        questions = generate_test_paper(random.Random(seed))
        by_slot = {q.slot_number: q for q in questions}
        assert len(by_slot[33].operands[0]) == 3
        assert len(by_slot[36].operands[0]) == 4
        assert len(by_slot[35].answer) <= 6
        for slot in (14, 23):
            quotient = int(by_slot[slot].answer.split(" r ")[0])
            assert quotient >= 10


def test_every_answer_is_correct():
    for seed in range(30):
        for q in generate_test_paper(random.Random(seed)):
            if " r " in q.answer:
                dividend, divisor = (int(o) for o in q.operands)
                quotient, remainder = divmod(dividend, divisor)
                assert q.answer == f"{quotient} r {remainder}"
            else:
                assert rederive_answer(q.text) == evaluate_expression(q.answer), q.text


def test_slot_one_is_a_power_of_ten_product():
    q = generate_test_paper(random.Random(4))[0]
    assert q.type is QuestionType.MultiplyBy10_100_1000
    assert q.constraint_flags == [paper.MULTIPLY_BY_POWERS_OF_10]
    assert q.operands[1] in ("10", "100", "1000")


def test_pupil_alias():
    alias = generate_pupil_alias(random.Random(2))
    adjective, animal = alias.split(" ")
    assert adjective[0].isupper() and animal[0].isupper()


def test_thousand_papers_keep_the_blueprint():
    rng = random.Random(1000)
    for _ in range(1000):
        questions = generate_test_paper(rng)
        assert [q.slot_number for q in questions] == list(range(1, 37))
        assert sum(q.mark_value for q in questions) == 40
        percentages = _flags_with(paper.PERCENTAGE_PREFIX, questions)
        assert sorted(percentages) == ["large-non-multiple", "small", "standard"]
        known_facts = _flags_with(paper.KNOWN_FACTS_PREFIX, questions)
        assert Counter(known_facts) == Counter({"easy": 1, "medium": 2, "hard": 1})
