"""
Exact evaluation of questions as they are displayed to pupils.

Display text uses ×, ÷, ², ³, mixed numbers ("2 3/4"), "P% of X", "of" and
"_" for the blank. Everything is rewritten to sympy syntax and evaluated with
rationals, so decimals and fractions come out exact.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from sympy import Eq, Rational, Symbol, nan, nsimplify, oo, solve, zoo
from sympy.core.power import Pow
from sympy.parsing.sympy_parser import (
    convert_xor,
    parse_expr,
    rationalize,
    standard_transformations,
)

LEN_LIMIT = 100
INVALID_CHARS_MSG = (
    "Only arithmetic expressions using digits, spaces, + - × ÷ * / ^ ² ³ % . "
    "parentheses and 'of' are allowed."
)
NON_FINITE_MSG = "Expression is not finite (e.g., division by zero)."
TOO_COMPLEX_MSG = "Expression is too complex."
NO_SOLUTION_MSG = "Expression has no single solution for the blank."

_ALLOWED_RE = re.compile(r"^(?:[0-9+\-*/^().,\s×÷²³%=_]|of)+$")
_MIXED_RE = re.compile(r"(\d+)\s+(\d+)\s*/\s*(\d+)")
_PERCENT_OF_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%\s*of")

TRANSFORMS = standard_transformations + (convert_xor, rationalize)

_BLANK = Symbol("blank")

_MAX_OPS = 200
_MAX_EXPONENT_ABS = 100


def validate_expression_text(s: str) -> Optional[str]:
    if s is None or not s.strip():
        return "Expression required."
    if len(s) > LEN_LIMIT:
        return f"Expression too long (> {LEN_LIMIT})."
    if _ALLOWED_RE.fullmatch(s) is None:
        return INVALID_CHARS_MSG
    return None


def to_sympy_syntax(text: str) -> str:
    """'2 1/2 × 3² =' -> '(2+1/2) * 3**2'."""
    s = text.replace(",", "").replace("=", " ").strip()
    s = _MIXED_RE.sub(r"(\1+\2/\3)", s)
    s = _PERCENT_OF_RE.sub(r"(\1/100)*", s)
    s = s.replace("of", "*")
    s = s.replace("×", "*").replace("÷", "/")
    s = s.replace("²", "**2").replace("³", "**3")
    s = s.replace("_", _BLANK.name)
    return s


def _assert_finite_sym(val: Any) -> None:
    finite = getattr(val, "is_finite", None)
    if finite is False:
        raise ValueError(NON_FINITE_MSG)
    if val in (oo, -oo, zoo, nan):
        raise ValueError(NON_FINITE_MSG)


def _assert_expr_complexity(sym: Any) -> None:
    if sym.count_ops() > _MAX_OPS:
        raise ValueError(TOO_COMPLEX_MSG)
    for node in sym.atoms(Pow):
        exp = node.exp
        if exp.is_number and abs(exp) > _MAX_EXPONENT_ABS:
            raise ValueError(TOO_COMPLEX_MSG)


def _parse(side: str):
    sym = parse_expr(
        to_sympy_syntax(side),
        local_dict={_BLANK.name: _BLANK},
        transformations=TRANSFORMS,
        evaluate=True,
    )
    _assert_expr_complexity(sym)
    return sym


def evaluate_expression(text: str) -> Rational:
    """Exact value of a display expression with no blank, e.g. '3/4 of 120 ='."""
    sym = _parse(text)
    if sym.free_symbols:
        raise ValueError(NO_SOLUTION_MSG)
    val = nsimplify(sym)
    _assert_finite_sym(val)
    return val


def rederive_answer(text: str) -> Rational:
    """
    Work a question out from its text alone. A question with a blank
    ("_ + 420 = 1000", "5600 - _ = 2315") is solved for the blank; otherwise the
    expression before "=" is evaluated.
    """
    if "_" not in text:
        return evaluate_expression(text.split("=")[0])
    left, _, right = text.partition("=")
    solutions = solve(Eq(_parse(left), _parse(right)), _BLANK)
    if len(solutions) != 1:
        raise ValueError(NO_SOLUTION_MSG)
    val = nsimplify(solutions[0])
    _assert_finite_sym(val)
    return val


def format_exact(val: Rational) -> str:
    """'7/4' for fractions, '420' for whole numbers."""
    if val.q == 1:
        return str(val.p)
    return f"{val.p}/{val.q}"
