from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Path

from answer_matcher import check_answer
from percentage_strategy import percentage_strategy
from practice_zone import next_question, record_result
from schemas.practice import PercentageStrategyOut, PracticeAnswerRequest, PracticeAnswerResponse

router = APIRouter(tags=["practice"])


@router.post("/practice-zone/answer", response_model=PracticeAnswerResponse)
def practice_zone_answer(req: PracticeAnswerRequest):
    # running out of time counts as a miss
    correct = not req.timed_out and check_answer(req.question, req.answer)
    state = record_result(req.state, req.question.type, correct)
    # back in random mode, don't repeat the type just answered
    exclude = req.question.type if state is None else None
    return {
        "correct": correct,
        "state": state,
        "next_question": next_question(state, exclude_type=exclude),
    }


@router.get("/percentages/{percentage}/strategy", response_model=PercentageStrategyOut)
def get_percentage_strategy(percentage: int = Path(ge=0, le=100)):
    return asdict(percentage_strategy(percentage))
