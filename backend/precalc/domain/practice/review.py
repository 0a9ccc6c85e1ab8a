"""Chapter review checks: the special-values table and the quadrant sign chart."""
from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

FUNCTION_NAMES = ("sin", "cos", "tan", "csc", "sec", "cot")
QUADRANTS = ("I", "II", "III", "IV")

SPECIAL_TRIG_ROWS: List[tuple] = [
    ("0", {"sin": "0", "cos": "1", "tan": "0", "csc": "undefined", "sec": "1", "cot": "undefined"}),
    ("π/6", {"sin": "1/2", "cos": "√3/2", "tan": "√3/3", "csc": "2", "sec": "2√3/3", "cot": "√3"}),
    ("π/4", {"sin": "√2/2", "cos": "√2/2", "tan": "1", "csc": "√2", "sec": "√2", "cot": "1"}),
    ("π/3", {"sin": "√3/2", "cos": "1/2", "tan": "√3", "csc": "2√3/3", "sec": "2", "cot": "√3/3"}),
    ("π/2", {"sin": "1", "cos": "0", "tan": "undefined", "csc": "1", "sec": "undefined", "cot": "0"}),
    ("π", {"sin": "0", "cos": "-1", "tan": "0", "csc": "undefined", "sec": "-1", "cot": "undefined"}),
    ("3π/2", {"sin": "-1", "cos": "0", "tan": "undefined", "csc": "-1", "sec": "undefined", "cot": "0"}),
]

EXPECTED_SIGNS: Dict[str, Dict[str, Iterable[str]]] = {
    "I": {"positive": FUNCTION_NAMES, "negative": ()},
    "II": {"positive": ("sin", "csc"), "negative": ("cos", "sec", "tan", "cot")},
    "III": {"positive": ("tan", "cot"), "negative": ("sin", "csc", "cos", "sec")},
    "IV": {"positive": ("cos", "sec"), "negative": ("sin", "csc", "tan", "cot")},
}

_WHITESPACE = re.compile(r"\s+")
_UNDEFINED_SPELLINGS = re.compile(r"infinity|inf|undefined|undef|--|—")


@dataclass
class TableReview:
    is_correct: bool
    incorrect_cells: List[str] = field(default_factory=list)


@dataclass
class SignReview:
    labels_correct: bool
    signs_correct: bool

    @property
    def is_correct(self) -> bool:
        return self.labels_correct and self.signs_correct


def normalize_review_value(value: str) -> str:
    text = _WHITESPACE.sub("", value.strip().lower())
    text = text.replace("π", "pi").replace("sqrt", "√")
    return _UNDEFINED_SPELLINGS.sub("undefined", text)


def cell_key(angle: str, function_name: str) -> str:
    return f"{angle}:{function_name}"


def check_special_values_table(answers: Dict[str, str]) -> TableReview:
    """Compare every ``"<angle>:<fn>"`` cell with the expected exact value; blank cells are wrong."""
    incorrect = []
    for angle, values in SPECIAL_TRIG_ROWS:
        for function_name in FUNCTION_NAMES:
            key = cell_key(angle, function_name)
            expected = normalize_review_value(values[function_name])
            if normalize_review_value(answers.get(key, "")) != expected:
                incorrect.append(key)
    return TableReview(is_correct=not incorrect, incorrect_cells=incorrect)


def normalize_quadrant_label(value: str) -> str:
    return re.sub(r"^Q", "", value.strip().upper())


def check_quadrant_signs(labels: Dict[str, str], assignments: Dict[str, Dict[str, Iterable[str]]]) -> SignReview:
    """``labels`` maps quadrant -> typed label; ``assignments`` maps quadrant -> {positive, negative} names."""
    labels_correct = all(normalize_quadrant_label(labels.get(q, "")) == q for q in QUADRANTS)

    signs_correct = True
    for quadrant in QUADRANTS:
        actual = assignments.get(quadrant, {})
        for sign in ("positive", "negative"):
            if sorted(actual.get(sign, ())) != sorted(EXPECTED_SIGNS[quadrant][sign]):
                signs_correct = False
    return SignReview(labels_correct=labels_correct, signs_correct=signs_correct)
