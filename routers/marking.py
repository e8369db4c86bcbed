from __future__ import annotations

import logging

from fastapi import APIRouter

from answer_matcher import is_answer_correct, normalize_input
from expression import INVALID_CHARS_MSG, evaluate_expression, format_exact, validate_expression_text
from schemas.marking import EvaluateRequest, EvaluateResponse, MarkRequest, MarkResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["marking"])


# --- Endpoints --------------------------------------------------------------------


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(req: EvaluateRequest):
    err = validate_expression_text(req.expr)
    if err:
        return {"ok": False, "value": None, "feedback": err}
    try:
        val = evaluate_expression(req.expr)
        return {"ok": True, "value": float(val), "exact": format_exact(val)}
    except ValueError as e:
        return {"ok": False, "value": None, "feedback": str(e)}
    except Exception:
        logger.debug("could not evaluate %r", req.expr, exc_info=True)
        return {"ok": False, "value": None, "feedback": INVALID_CHARS_MSG}


@router.post("/mark", response_model=MarkResponse)
def mark(req: MarkRequest):
    division = None
    if req.dividend is not None and req.divisor is not None:
        division = (req.dividend, req.divisor)
    correct = is_answer_correct(req.correct_answer, req.answer, req.question_type, division)
    return {
        "correct": correct,
        "normalized": normalize_input(req.answer),
        "expected": req.correct_answer,
    }
