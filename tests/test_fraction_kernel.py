from fraction_kernel import (
    MixedNumber,
    SimpleFraction,
    add,
    compare,
    fraction_to_string,
    gcd,
    lcm,
    mixed_to_string,
    multiply,
    simplify,
    subtract,
    to_improper,
    to_mixed,
    value,
)


def test_gcd_and_lcm():
    assert gcd(12, 8) == 4
    assert gcd(7, 0) == 7
    assert gcd(0, 5) == 5
    assert lcm(4, 6) == 12
    assert lcm(3, 9) == 9


def test_simplify():
    assert simplify(SimpleFraction(6, 8)) == SimpleFraction(3, 4)
    assert simplify(SimpleFraction(-6, 8)) == SimpleFraction(-3, 4)
    assert simplify(SimpleFraction(0, 7)) == SimpleFraction(0, 1)
    assert simplify(SimpleFraction(5, 5)) == SimpleFraction(1, 1)


def test_mixed_conversions():
    assert to_mixed(SimpleFraction(7, 4)) == MixedNumber(1, 3, 4)
    assert to_mixed(SimpleFraction(3, 4)) == MixedNumber(0, 3, 4)
    assert to_improper(MixedNumber(2, 1, 3)) == SimpleFraction(7, 3)
    assert to_improper(to_mixed(SimpleFraction(22, 5))) == SimpleFraction(22, 5)


def test_arithmetic_is_reduced():
    assert add(SimpleFraction(1, 4), SimpleFraction(1, 4)) == SimpleFraction(1, 2)
    assert add(SimpleFraction(1, 2), SimpleFraction(1, 3)) == SimpleFraction(5, 6)
    assert subtract(SimpleFraction(3, 4), SimpleFraction(1, 4)) == SimpleFraction(1, 2)
    assert subtract(SimpleFraction(1, 3), SimpleFraction(1, 3)) == SimpleFraction(0, 1)
    assert multiply(SimpleFraction(2, 3), SimpleFraction(3, 4)) == SimpleFraction(1, 2)


def test_compare_and_value():
    assert compare(SimpleFraction(1, 2), SimpleFraction(2, 4)) == 0
    assert compare(SimpleFraction(1, 3), SimpleFraction(1, 2)) == -1
    assert compare(SimpleFraction(3, 4), SimpleFraction(2, 3)) == 1
    assert value(SimpleFraction(3, 4)) == 0.75


def test_display():
    assert fraction_to_string(SimpleFraction(3, 4)) == "3/4"
    assert fraction_to_string(SimpleFraction(5, 1)) == "5"
    assert mixed_to_string(MixedNumber(0, 3, 4)) == "3/4"
    assert mixed_to_string(MixedNumber(2, 0, 5)) == "2"
    assert mixed_to_string(MixedNumber(1, 3, 4)) == "1 3/4"


def test_mixed_round_trip_over_a_grid():
    for w in range(21):
        for d in range(1, 13):
            for n in range(d):
                m = MixedNumber(w, n, d)
                assert to_mixed(to_improper(m)) == m


def test_simplify_is_idempotent_and_lowest_terms():
    for n in range(-40, 41):
        for d in range(1, 41):
            once = simplify(SimpleFraction(n, d))
            assert simplify(once) == once
            assert once.d > 0
            assert gcd(abs(once.n), once.d) == 1
            assert once.n * d == n * once.d
