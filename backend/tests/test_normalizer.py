import pytest

from precalc.domain.answers.normalizer import (
    QuestionAnswer,
    check_question_answer,
    is_answer_acceptable,
    normalize_answer,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Pi / 6 ", "\\pi/6"),
        ("π/6", "\\pi/6"),
        ("\\pi/6", "\\pi/6"),
        ("\\left(1, 2\\right)", "(1,2)"),
        ("\\dfrac{1}{2}", "\\frac{1}{2}"),
        ("\\tfrac{1}{2}", "\\frac{1}{2}"),
        ("\\sqrt3/2", "\\sqrt{3}/2"),
        ("\\sqrtx", "\\sqrt{x}"),
        ("P(1/2, 0)", "(1/2,0)"),
    ],
)
def test_normalize_answer(raw, expected):
    assert normalize_answer(raw) == expected


def test_pi_glyph_and_macro_compare_equal():
    assert is_answer_acceptable("π/6", ["\\pi/6"])


def test_case_insensitive_pi():
    assert is_answer_acceptable("PI/6", ["\\pi/6"])


def test_bare_sqrt_matches_brace_form():
    assert is_answer_acceptable("\\sqrt3/2", ["\\sqrt{3}/2"])


def test_empty_acceptable_list_accepts_any_attempt():
    assert is_answer_acceptable("anything", [])
    assert not is_answer_acceptable("   ", [])


def test_wrong_answer_rejected():
    assert not is_answer_acceptable("\\pi/3", ["\\pi/6", "30"])


def test_no_numeric_equivalence():
    # 0.5 and 1/2 are different strings; only textual rules apply.
    assert not is_answer_acceptable("0.5", ["1/2"])


def test_two_part_answer_with_point_prefix():
    answer = QuestionAnswer(x="\\dfrac{\\sqrt3}{2}", y="\\frac{1}{2}")
    assert check_question_answer(answer, ["P(\\frac{\\sqrt{3}}{2}, \\frac{1}{2})"])


def test_two_part_answer_any_attempt_needs_both_parts():
    assert check_question_answer(QuestionAnswer(x="1", y="2"), [])
    assert not check_question_answer(QuestionAnswer(x="1", y=""), [])


def test_single_value_answer_uses_filled_part():
    assert check_question_answer(QuestionAnswer(x="\\sqrt3"), ["\\sqrt{3}"])
