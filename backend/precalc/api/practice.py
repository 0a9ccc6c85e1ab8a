"""Answer checking, trig practice generators and chapter review checks."""
from __future__ import annotations
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from precalc.domain.answers.normalizer import QuestionAnswer, check_question_answer, is_answer_acceptable
from precalc.domain.practice.review import check_quadrant_signs, check_special_values_table
from precalc.domain.practice.trig import (
    build_evaluating_problem,
    build_even_odd_problem,
    build_inverse_trig_problem,
    evaluate_trig,
)

router = APIRouter(tags=["practice"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class AnswerCheckBody(BaseModel):
    acceptableAnswers: List[str] = []
    studentInput: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None


class SpecialValuesBody(BaseModel):
    answers: Dict[str, str] = {}


class SignAssignment(BaseModel):
    positive: List[str] = []
    negative: List[str] = []


class QuadrantSignsBody(BaseModel):
    labels: Dict[str, str] = {}
    assignments: Dict[str, SignAssignment] = {}


# ------------------------------------------------------------------
# Free-text answers
# ------------------------------------------------------------------
@router.post("/api/questions/check")
def check_answer(body: AnswerCheckBody):
    """Plain ``studentInput`` is checked as one value; otherwise the two-part ``x``/``y`` form is used."""
    if body.studentInput is not None:
        is_correct = is_answer_acceptable(body.studentInput, body.acceptableAnswers)
    else:
        answer = QuestionAnswer(x=body.x or "", y=body.y or "")
        is_correct = check_question_answer(answer, body.acceptableAnswers)
    return {"isCorrect": is_correct, "submitted": True}


# ------------------------------------------------------------------
# Generators
# ------------------------------------------------------------------
@router.get("/api/practice/evaluating")
def evaluating_problem(problemId: int = 1):
    return asdict(build_evaluating_problem(problemId))


@router.get("/api/practice/even-odd")
def even_odd_problem(problemId: int = 1):
    return asdict(build_even_odd_problem(problemId))


@router.get("/api/practice/inverse")
def inverse_trig_problem(problemId: int = 1):
    return asdict(build_inverse_trig_problem(problemId))


@router.get("/api/practice/evaluate")
def evaluate(angle: str = Query(..., min_length=1), fn: str = Query(..., min_length=1)):
    answer = evaluate_trig(angle, fn)
    if answer is None:
        raise HTTPException(status_code=400, detail=f"Unsupported angle '{angle}' or function '{fn}'.")
    return {"angle": angle, "function": fn, "answer": answer}


# ------------------------------------------------------------------
# Review checks
# ------------------------------------------------------------------
@router.post("/api/review/special-values")
def review_special_values(body: SpecialValuesBody):
    review = check_special_values_table(body.answers)
    return {"isCorrect": review.is_correct, "incorrectCells": review.incorrect_cells}


@router.post("/api/review/quadrant-signs")
def review_quadrant_signs(body: QuadrantSignsBody):
    assignments = {quadrant: a.model_dump() for quadrant, a in body.assignments.items()}
    review = check_quadrant_signs(body.labels, assignments)
    return {
        "labelsCorrect": review.labels_correct,
        "signsCorrect": review.signs_correct,
        "isCorrect": review.is_correct,
    }
