"""Lesson viewer state machine: page position, answers, hints and graph completion.

Pure domain object, no I/O. The application layer restores it from stored
progress, applies one action and writes ``viewer.progress`` back.
"""
from __future__ import annotations
import re
from typing import Any, Dict, List, Optional

from precalc.domain.answers.normalizer import QuestionAnswer, check_question_answer
from precalc.domain.common.result import Result
from precalc.domain.lesson.models import DesmosBlock, LessonDocument, LessonPage, QuestionBlock, TextBlock
from precalc.domain.lesson.progress import LessonProgress, QuestionResult
from precalc.domain.lesson.serialize import serialize_block
from precalc.domain.lesson.validator import split_inline_math

ANSWER_REQUIRED_MESSAGE = "Answer the required question correctly before moving on."
GRAPH_REQUIRED_MESSAGE = "Complete the required graph before moving on."

UNIT_CIRCLE_EQUATION = "x^2+y^2=1"
_LATEX_NOISE = re.compile(r"[\\{}\s]")


def graph_block_key(page_id: str, block_index: int) -> str:
    return f"{page_id}:desmos-{block_index}"


def _saved_expressions(state: Dict[str, Any]) -> List[Any]:
    # Calculator state nests them as {"expressions": {"list": [...]}}; a bare list is accepted too.
    expressions = state.get("expressions")
    if isinstance(expressions, dict):
        expressions = expressions.get("list")
    return expressions if isinstance(expressions, list) else []


def has_student_graph(state: Dict[str, Any]) -> bool:
    """True when some saved expression, with backslashes, braces and whitespace removed, contains x^2+y^2=1."""
    for expression in _saved_expressions(state):
        latex = expression.get("latex") if isinstance(expression, dict) else None
        if isinstance(latex, str) and UNIT_CIRCLE_EQUATION in _LATEX_NOISE.sub("", latex).lower():
            return True
    return False


class LessonViewer:
    def __init__(self, document: LessonDocument, progress: Optional[LessonProgress] = None):
        self.document = document
        self.progress = progress or LessonProgress()
        self.progress.page_index = self._clamp(self.progress.page_index)

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------
    @property
    def page_count(self) -> int:
        return self.document.page_count

    @property
    def page_index(self) -> int:
        return self.progress.page_index

    @property
    def current_page(self) -> Optional[LessonPage]:
        if not self.document.pages:
            return None
        return self.document.pages[self.progress.page_index]

    def _clamp(self, index: int) -> int:
        return max(0, min(index, self.page_count - 1))

    # ------------------------------------------------------------------
    # Advancement gate
    # ------------------------------------------------------------------
    def _unanswered_questions(self) -> List[str]:
        page = self.current_page
        if page is None:
            return []
        missing = []
        for block in page.blocks:
            if isinstance(block, QuestionBlock) and block.require_correct_before_advance:
                result = self.progress.question_results.get(block.id)
                if not (result and result.is_correct):
                    missing.append(block.id)
        return missing

    def _incomplete_graphs(self) -> List[str]:
        page = self.current_page
        if page is None:
            return []
        missing = []
        for index, block in enumerate(page.blocks):
            if isinstance(block, DesmosBlock) and block.require_student_graph_before_advance:
                key = graph_block_key(page.id, index)
                if not self.progress.desmos_graph_status.get(key):
                    missing.append(key)
        return missing

    def missing_requirements(self) -> List[str]:
        """Question ids and graph keys on the current page that still block advancement."""
        return self._unanswered_questions() + self._incomplete_graphs()

    def next_page(self) -> Result[int]:
        if self.progress.page_index >= self.page_count - 1:
            return Result.fail("Already on the last page.", value=self.progress.page_index)
        if self._unanswered_questions():
            return Result.fail(ANSWER_REQUIRED_MESSAGE, value=self.progress.page_index)
        if self._incomplete_graphs():
            return Result.fail(GRAPH_REQUIRED_MESSAGE, value=self.progress.page_index)

        self.progress.page_index += 1
        return Result.ok(self.progress.page_index)

    def previous_page(self) -> Result[int]:
        if self.progress.page_index <= 0:
            return Result.fail("Already on the first page.", value=self.progress.page_index)
        self.progress.page_index -= 1
        return Result.ok(self.progress.page_index)

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------
    def find_question(self, question_id: str) -> Optional[QuestionBlock]:
        for page in self.document.pages:
            for block in page.blocks:
                if isinstance(block, QuestionBlock) and block.id == question_id:
                    return block
        return None

    def set_answer(self, question_id: str, x: Optional[str] = None, y: Optional[str] = None) -> QuestionAnswer:
        answer = self.progress.question_answers.get(question_id, QuestionAnswer())
        updated = QuestionAnswer(x=answer.x if x is None else x, y=answer.y if y is None else y)
        self.progress.question_answers[question_id] = updated
        if updated != answer:
            # The cached verdict was for the previous text.
            self.progress.question_results.pop(question_id, None)
        return updated

    def submit_answer(self, question_id: str) -> Result[QuestionResult]:
        question = self.find_question(question_id)
        if question is None:
            return Result.fail(f"Question '{question_id}' not found in this lesson.")

        answer = self.progress.question_answers.get(question_id, QuestionAnswer())
        result = QuestionResult(
            is_correct=check_question_answer(answer, question.acceptable_answers),
            submitted=True,
        )
        self.progress.question_results[question_id] = result
        return Result.ok(result)

    def toggle_hint(self, question_id: str) -> bool:
        shown = not self.progress.visible_hints.get(question_id, False)
        self.progress.visible_hints[question_id] = shown
        return shown

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------
    def set_graph_complete(self, block_key: str, complete: bool = True) -> Result[bool]:
        """Clearing always works; marking complete needs a saved state that draws the unit circle."""
        if complete and not has_student_graph(self.progress.desmos_graph_states.get(block_key, {})):
            return Result.fail(GRAPH_REQUIRED_MESSAGE, value=False)
        self.progress.desmos_graph_status[block_key] = complete
        return Result.ok(complete)

    def save_graph_state(self, block_key: str, state: Dict[str, Any]) -> bool:
        """Store the calculator state and recompute the block's completion from it."""
        self.progress.desmos_graph_states[block_key] = dict(state)
        complete = has_student_graph(state)
        self.progress.desmos_graph_status[block_key] = complete
        return complete

    # ------------------------------------------------------------------
    # Rendering description
    # ------------------------------------------------------------------
    def render_current_page(self) -> Dict[str, Any]:
        page = self.current_page
        if page is None:
            return {
                "pageIndex": 0,
                "pageCount": 0,
                "page": None,
                "sections": [{"heading": s.heading, "content": s.content} for s in self.document.sections],
                "missingRequirements": [],
            }

        blocks = []
        for index, block in enumerate(page.blocks):
            data = serialize_block(block)
            if isinstance(block, TextBlock):
                data["segments"] = [{"kind": kind, "value": value} for kind, value in split_inline_math(block.text)]
            elif isinstance(block, DesmosBlock):
                key = graph_block_key(page.id, index)
                data["key"] = key
                data["complete"] = self.progress.desmos_graph_status.get(key, False)
            elif isinstance(block, QuestionBlock):
                result = self.progress.question_results.get(block.id)
                answer = self.progress.question_answers.get(block.id, QuestionAnswer())
                data["answer"] = {"x": answer.x, "y": answer.y}
                data["hintVisible"] = self.progress.visible_hints.get(block.id, False)
                data["result"] = {"isCorrect": result.is_correct, "submitted": result.submitted} if result else None
            blocks.append(data)

        return {
            "pageIndex": self.progress.page_index,
            "pageCount": self.page_count,
            "page": {"id": page.id, "title": page.title, "blocks": blocks},
            "sections": [],
            "missingRequirements": self.missing_requirements(),
        }
