from __future__ import annotations

import logging
import random
import uuid
from typing import Callable, Optional, TypeVar

import config

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DEFAULT = random.Random()


class GenerationExhausted(RuntimeError):
    """A rejection loop ran out of attempts; the draw ranges cannot satisfy the constraint."""


def resolve(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else _DEFAULT


def new_id(rng: Optional[random.Random] = None) -> str:
    """UUID4 string drawn from ``rng`` so seeded runs produce stable ids."""
    bits = resolve(rng).getrandbits(128)
    return str(uuid.UUID(int=bits, version=4))


def rejection_sample(
    draw: Callable[[], Optional[T]],
    accept: Callable[[T], bool] = lambda _: True,
    *,
    what: str = "question",
    max_attempts: Optional[int] = None,
) -> T:
    """
    Call ``draw`` until it returns a candidate that ``accept`` approves.
    ``draw`` may return None to reject a candidate early.
    """
    limit = max_attempts if max_attempts is not None else config.MAX_GENERATION_ATTEMPTS
    for _ in range(limit):
        candidate = draw()
        if candidate is not None and accept(candidate):
            return candidate
    logger.error("rejection sampling exhausted after %d attempts (%s)", limit, what)
    raise GenerationExhausted(f"Could not generate a valid {what} in {limit} attempts.")
