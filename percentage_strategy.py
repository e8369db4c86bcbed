from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

Method = Literal["addition", "subtraction", "subtractionFrom50"]

STANDARD_PARTS = (50, 25, 10, 5, 1)


@dataclass(frozen=True)
class PercentageComponent:
    value: int
    count: int


@dataclass(frozen=True)
class PercentageStrategy:
    method: Method
    components: List[PercentageComponent] = field(default_factory=list)
    base: int = 0
    target: int = 0


def decompose(target: int) -> List[PercentageComponent]:
    """Greedy split into 50/25/10/5/1 chunks, e.g. 35 -> 25 + 10."""
    remaining = target
    components: List[PercentageComponent] = []
    for part in STANDARD_PARTS:
        count, remaining = divmod(remaining, part)
        if count:
            components.append(PercentageComponent(part, count))
    return components


def chunk_count(components: List[PercentageComponent]) -> int:
    return sum(c.count for c in components)


def percentage_strategy(percentage: int) -> PercentageStrategy:
    """
    Cheapest way to build ``percentage`` from friendly chunks: straight
    addition, 100% take away the rest, or (below 50%) 50% take away the rest.
    The subtracting methods pay one extra step. Ties keep the earlier method.
    """
    if not 0 <= percentage <= 100:
        raise ValueError(f"Percentage must be between 0 and 100, got {percentage}.")

    candidates = [("addition", decompose(percentage), 0, 0)]
    candidates.append(("subtraction", decompose(100 - percentage), 100, 1))
    if percentage < 50:
        candidates.append(("subtractionFrom50", decompose(50 - percentage), 50, 1))

    # min() keeps the first of equal-cost candidates
    method, components, base, _ = min(candidates, key=lambda c: chunk_count(c[1]) + c[3])
    return PercentageStrategy(method=method, components=components, base=base, target=percentage)
