import pytest

from percentage_strategy import PercentageComponent, decompose, percentage_strategy


def test_decompose_is_greedy():
    assert decompose(35) == [PercentageComponent(25, 1), PercentageComponent(10, 1)]
    assert decompose(3) == [PercentageComponent(1, 3)]
    assert decompose(0) == []


def test_addition_when_cheapest():
    s = percentage_strategy(35)
    assert s.method == "addition"
    assert s.base == 0 and s.target == 35


def test_subtraction_from_100():
    s = percentage_strategy(95)
    assert s.method == "subtraction"
    assert s.base == 100
    assert s.components == [PercentageComponent(5, 1)]


def test_subtraction_from_50():
    s = percentage_strategy(45)
    assert s.method == "subtractionFrom50"
    assert s.base == 50
    assert s.components == [PercentageComponent(5, 1)]


def test_ties_keep_addition():
    # 60 = 50 + 10 (two chunks); 100 - 40 = 100 - 25 - 10 - 5 (four)
    assert percentage_strategy(60).method == "addition"
    # 75 = 50 + 25 (two); 100 - 25 (one chunk plus a step) ties, addition kept
    assert percentage_strategy(75).method == "addition"


def test_out_of_range():
    with pytest.raises(ValueError):
        percentage_strategy(101)
