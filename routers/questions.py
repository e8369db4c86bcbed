from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from generators import QUESTION_TYPES, generate_new_question, generate_question_by_type
from schemas.questions import Question, QuestionType, QuestionTypeOut

router = APIRouter(tags=["questions"])


def _lookup_type(name: str) -> QuestionType:
    # path and query parameters use the member name; labels contain "/"
    try:
        return QuestionType[name]
    except KeyError:
        raise HTTPException(status_code=422, detail=f"unknown question type: {name}")


@router.get("/question-types", response_model=List[QuestionTypeOut])
def list_question_types():
    return [{"name": t.name, "label": t.value} for t in QUESTION_TYPES]


@router.get("/questions/random", response_model=Question)
def random_question(exclude: Optional[str] = None):
    exclude_type = _lookup_type(exclude) if exclude else None
    return generate_new_question(exclude_type)


@router.get("/questions/{type_name}", response_model=Question)
def question_of_type(
    type_name: str,
    difficulty: int = Query(default=0, ge=0, le=10),
):
    return generate_question_by_type(_lookup_type(type_name), difficulty)
