"""Free-text math answer normalization and equivalence checks.

Student input is often LaTeX-flavoured (``\\dfrac{\\sqrt3}{2}``, ``π/6``,
``P(\\frac{1}{2}, ...)``). Both the input and every acceptable answer are run
through the same textual rules and compared as strings. There is no numeric
tolerance and no algebraic simplification.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Iterable

_WHITESPACE = re.compile(r"\s+")
_BARE_PI = re.compile(r"(?<!\\)pi")
_SIZING = re.compile(r"\\(?:left|right)")
_FRAC_VARIANTS = re.compile(r"\\[dt]frac")
_BARE_SQRT = re.compile(r"\\sqrt([0-9a-z])")


@dataclass
class QuestionAnswer:
    """Two-part answer as typed by the student. Single-value answers leave ``y`` empty."""

    x: str = ""
    y: str = ""

    def is_complete(self) -> bool:
        return bool(self.x.strip()) and bool(self.y.strip())

    def as_text(self) -> str:
        x, y = self.x.strip(), self.y.strip()
        if x and y:
            return f"({x},{y})"
        return x or y


def normalize_answer(value: str) -> str:
    text = value.strip().lower()
    text = _WHITESPACE.sub("", text)
    text = text.replace("π", "\\pi")
    text = _BARE_PI.sub(r"\\pi", text)
    text = _SIZING.sub("", text)
    text = _FRAC_VARIANTS.sub(r"\\frac", text)
    text = _BARE_SQRT.sub(r"\\sqrt{\1}", text)
    if text.startswith("p("):
        text = text[1:]
    return text


def is_answer_acceptable(student_input: str, acceptable_answers: Iterable[str]) -> bool:
    """Return True when ``student_input`` matches any acceptable answer after normalization.

    An empty list of acceptable answers means any non-blank attempt counts.
    """
    answers = list(acceptable_answers)
    if not answers:
        return bool(student_input.strip())

    normalized = normalize_answer(student_input)
    return any(normalize_answer(answer) == normalized for answer in answers)


def check_question_answer(answer: QuestionAnswer, acceptable_answers: Iterable[str]) -> bool:
    """Check a two-part answer; with no acceptable answers both parts must be filled in."""
    answers = list(acceptable_answers)
    if not answers:
        return answer.is_complete()
    return is_answer_acceptable(answer.as_text(), answers)
