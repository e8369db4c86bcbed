from __future__ import annotations

import operator
import random
from fractions import Fraction
from typing import Callable, Dict, List, Optional, Sequence

from rng import rejection_sample, resolve
from schemas.questions import BidmasMetadata, BidmasStep, Question, QuestionType

SQUARE = "²"
POW = "pow"
OPERATORS = ("+", "-", "×", "÷", POW)
BRACKET_CHANCE = 0.35

_BINARY: Dict[str, Callable[[Fraction, Fraction], Fraction]] = {
    "+": operator.add,
    "-": operator.sub,
    "×": operator.mul,
    "÷": operator.truediv,
}


def _fmt(value: Fraction) -> str:
    return str(value.numerator) if value.denominator == 1 else str(value)


# --- Evaluation -------------------------------------------------------------------


def _apply(tokens: List[str], index: int, steps: List[BidmasStep]) -> None:
    left, op, right = tokens[index - 1], tokens[index], tokens[index + 1]
    result = _fmt(_BINARY[op](Fraction(left), Fraction(right)))
    steps.append(
        BidmasStep(
            expression=" ".join(tokens),
            active_expression=f"{left} {op} {right}",
            operation=op,
            operands=[left, right],
            result=result,
        )
    )
    tokens[index - 1 : index + 2] = [result]


def _reduce(tokens: List[str], start: int, end: int, steps: List[BidmasStep]) -> int:
    """Reduce tokens[start:end] to one value in BIDMAS order; returns the new end index."""
    for i in range(start, end):
        if tokens[i].endswith(SQUARE):
            base = tokens[i][: -len(SQUARE)]
            result = _fmt(Fraction(base) ** 2)
            steps.append(
                BidmasStep(
                    expression=" ".join(tokens),
                    active_expression=tokens[i],
                    operation="^",
                    operands=[base, "2"],
                    result=result,
                )
            )
            tokens[i] = result

    for group in (("×", "÷"), ("+", "-")):
        i = start
        while i < end:
            if tokens[i] in group:
                _apply(tokens, i, steps)
                end -= 2
            else:
                i += 1
    return end


def evaluate(tokens: List[str], steps: List[BidmasStep]) -> Fraction:
    """
    Evaluate a token list in place, appending one BidmasStep per reduction.
    Innermost brackets first, then squares, then × ÷ and + - left to right.
    """
    while "(" in tokens:
        close = tokens.index(")")
        open_ = max(i for i in range(close) if tokens[i] == "(")
        close = _reduce(tokens, open_ + 1, close, steps)
        inner = tokens[open_ + 1]
        steps.append(
            BidmasStep(
                expression=" ".join(tokens),
                active_expression=f"( {inner} )",
                operation="()",
                operands=[inner],
                result=inner,
            )
        )
        tokens[open_ : close + 1] = [inner]
    _reduce(tokens, 0, len(tokens), steps)
    return Fraction(tokens[0])


# --- Replay -----------------------------------------------------------------------


def _find(tokens: Sequence[str], needle: Sequence[str]) -> Optional[int]:
    n = len(needle)
    for i in range(len(tokens) - n + 1):
        if list(tokens[i : i + n]) == list(needle):
            return i
    return None


def _recompute(step: BidmasStep) -> Fraction:
    if step.operation == "()":
        return Fraction(step.operands[0])
    if step.operation == "^":
        return Fraction(step.operands[0]) ** int(step.operands[1])
    left, right = step.operands
    return _BINARY[step.operation](Fraction(left), Fraction(right))


def replay_steps(expression: str, steps: Sequence[BidmasStep]) -> Fraction:
    """Re-apply a step log to the question text and return the final value."""
    tokens = expression.replace("=", " ").split()
    for step in steps:
        active = step.active_expression.split()
        at = _find(tokens, active)
        if at is None:
            raise ValueError(
                f"Step {step.active_expression!r} not found in {' '.join(tokens)!r}."
            )
        tokens[at : at + len(active)] = [_fmt(_recompute(step))]
    if len(tokens) != 1:
        raise ValueError(f"Expression not fully reduced: {' '.join(tokens)!r}.")
    return Fraction(tokens[0])


# --- Synthesis --------------------------------------------------------------------


def _pick_operations(rng: random.Random) -> Optional[List[str]]:
    ops = rng.sample(OPERATORS, 2)
    # a power only pairs with + or -
    if POW in ops and any(op not in (POW, "+", "-") for op in ops):
        return None
    return ops


def _draw(
    rng: random.Random, require_brackets: bool, require_indices: bool
) -> Optional[Question]:
    ops = _pick_operations(rng)
    if ops is None:
        return None
    if require_indices and POW not in ops:
        return None
    first, second = ops

    a, b, c = rng.randint(2, 12), rng.randint(2, 12), rng.randint(2, 12)
    left = f"{a}{SQUARE}" if first == POW else str(a)
    right = f"{c}{SQUARE}" if second == POW else str(c)

    wrap = first != POW and (require_brackets or rng.random() < BRACKET_CHANCE)
    if require_brackets and not wrap:
        return None

    tokens: List[str] = []
    if wrap:
        tokens.append("(")
    tokens += [left, "×" if first == POW else first, str(b)]
    if wrap:
        tokens.append(")")
    tokens += ["×" if second == POW else second, right]
    expression = " ".join(tokens)

    steps: List[BidmasStep] = []
    try:
        result = evaluate(list(tokens), steps)
    except ZeroDivisionError:
        return None

    if result < 0 or result.denominator != 1:
        return None
    if any(s.operation == "÷" and Fraction(s.result).denominator != 1 for s in steps):
        return None

    return Question(
        type=QuestionType.BIDMAS,
        text=f"{expression} =",
        answer=_fmt(result),
        bidmas_metadata=BidmasMetadata(
            operations=[s.operation for s in steps if s.operation != "()"],
            execution_steps=steps,
            has_brackets=wrap,
            has_indices=POW in ops,
        ),
    )


def generate_bidmas(
    rng: Optional[random.Random] = None,
    *,
    require_brackets: bool = False,
    require_indices: bool = False,
) -> Question:
    rng = resolve(rng)
    return rejection_sample(
        lambda: _draw(rng, require_brackets, require_indices),
        what="BIDMAS expression",
    )
