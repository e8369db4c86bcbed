from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimpleFraction:
    n: int
    d: int


@dataclass(frozen=True)
class MixedNumber:
    w: int
    n: int
    d: int


def gcd(a: int, b: int) -> int:
    return gcd(b, a % b) if b else a


def lcm(a: int, b: int) -> int:
    return a * b // gcd(a, b)


def simplify(f: SimpleFraction) -> SimpleFraction:
    # d > 0 is the caller's responsibility
    common = gcd(abs(f.n), f.d)
    return SimpleFraction(f.n // common, f.d // common)


def to_improper(m: MixedNumber) -> SimpleFraction:
    return SimpleFraction(m.w * m.d + m.n, m.d)


def to_mixed(f: SimpleFraction) -> MixedNumber:
    return MixedNumber(f.n // f.d, f.n % f.d, f.d)


# --- Arithmetic (results always reduced) ------------------------------------------


def add(a: SimpleFraction, b: SimpleFraction) -> SimpleFraction:
    common = lcm(a.d, b.d)
    return simplify(SimpleFraction(a.n * (common // a.d) + b.n * (common // b.d), common))


def subtract(a: SimpleFraction, b: SimpleFraction) -> SimpleFraction:
    common = lcm(a.d, b.d)
    return simplify(SimpleFraction(a.n * (common // a.d) - b.n * (common // b.d), common))


def multiply(a: SimpleFraction, b: SimpleFraction) -> SimpleFraction:
    return simplify(SimpleFraction(a.n * b.n, a.d * b.d))


def compare(a: SimpleFraction, b: SimpleFraction) -> int:
    left, right = a.n * b.d, b.n * a.d
    return (left > right) - (left < right)


def value(f: SimpleFraction) -> float:
    return f.n / f.d


# --- Display ----------------------------------------------------------------------


def fraction_to_string(f: SimpleFraction) -> str:
    if f.d == 1:
        return str(f.n)
    return f"{f.n}/{f.d}"


def mixed_to_string(m: MixedNumber) -> str:
    if m.w == 0:
        return f"{m.n}/{m.d}"
    if m.n == 0:
        return str(m.w)
    return f"{m.w} {m.n}/{m.d}"
