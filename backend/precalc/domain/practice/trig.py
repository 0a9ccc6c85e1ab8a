"""Trig practice generators. They never grade free text; each one only reveals a canonical answer."""
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

EPSILON = 0.000001

ANGLES: List[Tuple[str, float]] = [
    ("0", 0.0),
    ("π/6", math.pi / 6),
    ("π/4", math.pi / 4),
    ("π/3", math.pi / 3),
    ("π/2", math.pi / 2),
    ("2π/3", 2 * math.pi / 3),
    ("3π/4", 3 * math.pi / 4),
    ("5π/6", 5 * math.pi / 6),
    ("π", math.pi),
    ("7π/6", 7 * math.pi / 6),
    ("5π/4", 5 * math.pi / 4),
    ("4π/3", 4 * math.pi / 3),
    ("3π/2", 3 * math.pi / 2),
    ("5π/3", 5 * math.pi / 3),
    ("7π/4", 7 * math.pi / 4),
    ("11π/6", 11 * math.pi / 6),
]
ANGLES_BY_LABEL: Dict[str, float] = dict(ANGLES)

TRIG_FUNCTIONS = ("sin", "cos", "tan")
VARIABLE_SYMBOLS = ("x", "θ", "t", "α")

# Checked in order; first match within EPSILON wins.
KNOWN_CONSTANTS: List[Tuple[float, str]] = [
    (0.0, "0"),
    (1.0, "1"),
    (-1.0, "-1"),
    (0.5, "1/2"),
    (-0.5, "-1/2"),
    (math.sqrt(2) / 2, "√2/2"),
    (-math.sqrt(2) / 2, "-√2/2"),
    (math.sqrt(3) / 2, "√3/2"),
    (-math.sqrt(3) / 2, "-√3/2"),
    (math.sqrt(3), "√3"),
    (-math.sqrt(3), "-√3"),
    (1 / math.sqrt(3), "√3/3"),
    (-1 / math.sqrt(3), "-√3/3"),
]

INVERSE_TRIG_VALUES: Dict[str, List[Tuple[str, str]]] = {
    "arcsin": [
        ("-1", "-π/2"),
        ("-√3/2", "-π/3"),
        ("-√2/2", "-π/4"),
        ("-1/2", "-π/6"),
        ("0", "0"),
        ("1/2", "π/6"),
        ("√2/2", "π/4"),
        ("√3/2", "π/3"),
        ("1", "π/2"),
    ],
    "arccos": [
        ("-1", "π"),
        ("-√3/2", "5π/6"),
        ("-√2/2", "3π/4"),
        ("-1/2", "2π/3"),
        ("0", "π/2"),
        ("1/2", "π/3"),
        ("√2/2", "π/4"),
        ("√3/2", "π/6"),
        ("1", "0"),
    ],
    "arctan": [
        ("-√3", "-π/3"),
        ("-1", "-π/4"),
        ("-√3/3", "-π/6"),
        ("0", "0"),
        ("√3/3", "π/6"),
        ("1", "π/4"),
        ("√3", "π/3"),
    ],
}


@dataclass(frozen=True)
class EvaluatingProblem:
    id: int
    angle_label: str
    radians: float
    trig_function: str
    answer: str


@dataclass(frozen=True)
class EvenOddProblem:
    id: int
    trig_function: str
    input_expression: str
    answer_expression: str
    parity_rule: str  # even | odd


@dataclass(frozen=True)
class InverseTrigProblem:
    id: int
    function_name: str
    value_label: str
    answer_label: str


def simplify_value(value: float) -> str:
    """Snap a float to the exact unit-circle constant it approximates."""
    if not math.isfinite(value):
        return "undefined"

    # Round half up, the way the answer tables were built.
    rounded = math.floor(value * 1_000_000 + 0.5) / 1_000_000
    for constant, label in KNOWN_CONSTANTS:
        if abs(rounded - constant) < EPSILON:
            return label

    if rounded.is_integer():
        return str(int(rounded))
    return repr(rounded)


def evaluate_trig(angle_label: str, trig_function: str) -> Optional[str]:
    """Exact answer for ``trig_function(angle_label)``; None for an unknown angle or function."""
    radians = ANGLES_BY_LABEL.get(angle_label)
    if radians is None or trig_function not in TRIG_FUNCTIONS:
        return None
    return simplify_value(_raw_trig_value(radians, trig_function))


def _raw_trig_value(radians: float, trig_function: str) -> float:
    if trig_function == "sin":
        return math.sin(radians)
    if trig_function == "cos":
        return math.cos(radians)
    if abs(math.cos(radians)) < EPSILON:
        return math.inf
    return math.tan(radians)


def build_evaluating_problem(problem_id: int, rng: Optional[random.Random] = None) -> EvaluatingProblem:
    rng = rng or random.Random()
    angle_label, radians = rng.choice(ANGLES)
    trig_function = rng.choice(TRIG_FUNCTIONS)
    return EvaluatingProblem(
        id=problem_id,
        angle_label=angle_label,
        radians=radians,
        trig_function=trig_function,
        answer=simplify_value(_raw_trig_value(radians, trig_function)),
    )


def build_even_odd_problem(problem_id: int, rng: Optional[random.Random] = None) -> EvenOddProblem:
    rng = rng or random.Random()
    trig_function = rng.choice(TRIG_FUNCTIONS)
    symbol = rng.choice(VARIABLE_SYMBOLS)
    coefficient = rng.randint(1, 9)
    inner = f"{'' if coefficient == 1 else coefficient}{symbol}"
    parity_rule = "even" if trig_function == "cos" else "odd"
    answer = f"{trig_function}({inner})" if parity_rule == "even" else f"-{trig_function}({inner})"
    return EvenOddProblem(
        id=problem_id,
        trig_function=trig_function,
        input_expression=f"{trig_function}(-{inner})",
        answer_expression=answer,
        parity_rule=parity_rule,
    )


def build_inverse_trig_problem(problem_id: int, rng: Optional[random.Random] = None) -> InverseTrigProblem:
    rng = rng or random.Random()
    function_name = rng.choice(sorted(INVERSE_TRIG_VALUES))
    value_label, answer_label = rng.choice(INVERSE_TRIG_VALUES[function_name])
    return InverseTrigProblem(
        id=problem_id,
        function_name=function_name,
        value_label=value_label,
        answer_label=answer_label,
    )
