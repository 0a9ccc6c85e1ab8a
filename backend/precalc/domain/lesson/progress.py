"""Per-student, per-lesson viewer snapshot and its defensive parser.

Persisted progress is untrusted input just like lesson JSON: every field
that is missing or has the wrong shape falls back to its default instead of
failing the whole snapshot. There is no schema version.
"""
from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from precalc.domain.answers.normalizer import QuestionAnswer


@dataclass
class QuestionResult:
    is_correct: bool = False
    submitted: bool = False


@dataclass
class LessonProgress:
    page_index: int = 0
    question_answers: Dict[str, QuestionAnswer] = field(default_factory=dict)
    visible_hints: Dict[str, bool] = field(default_factory=dict)
    question_results: Dict[str, QuestionResult] = field(default_factory=dict)
    desmos_graph_status: Dict[str, bool] = field(default_factory=dict)
    desmos_graph_states: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageIndex": self.page_index,
            "questionAnswers": {qid: {"x": a.x, "y": a.y} for qid, a in self.question_answers.items()},
            "visibleHints": dict(self.visible_hints),
            "questionResults": {
                qid: {"isCorrect": r.is_correct, "submitted": r.submitted}
                for qid, r in self.question_results.items()
            },
            "desmosGraphStatus": dict(self.desmos_graph_status),
            "desmosGraphStates": copy.deepcopy(self.desmos_graph_states),
        }


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def progress_from_raw(value: Any) -> Optional[LessonProgress]:
    """Build a LessonProgress from parsed JSON; None when the value is not an object at all."""
    if not isinstance(value, dict):
        return None

    page_index = value.get("pageIndex")
    if not isinstance(page_index, int) or isinstance(page_index, bool) or page_index < 0:
        page_index = 0

    answers = {}
    for question_id, answer in _mapping(value.get("questionAnswers")).items():
        if not isinstance(answer, dict):
            continue
        x, y = answer.get("x"), answer.get("y")
        answers[question_id] = QuestionAnswer(
            x=x if isinstance(x, str) else "",
            y=y if isinstance(y, str) else "",
        )

    results = {}
    for question_id, result in _mapping(value.get("questionResults")).items():
        if not isinstance(result, dict):
            continue
        results[question_id] = QuestionResult(
            is_correct=result.get("isCorrect") is True,
            submitted=result.get("submitted") is True,
        )

    return LessonProgress(
        page_index=page_index,
        question_answers=answers,
        visible_hints={qid: shown is True for qid, shown in _mapping(value.get("visibleHints")).items()},
        question_results=results,
        desmos_graph_status={
            key: done is True for key, done in _mapping(value.get("desmosGraphStatus")).items()
        },
        desmos_graph_states={
            key: state for key, state in _mapping(value.get("desmosGraphStates")).items() if isinstance(state, dict)
        },
    )
