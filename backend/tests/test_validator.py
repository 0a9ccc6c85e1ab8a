import math

import pytest

from precalc.domain.answers.normalizer import QuestionAnswer, check_question_answer
from precalc.domain.lesson.models import (
    DesmosBlock,
    DesmosExpression,
    DesmosViewport,
    ImageBlock,
    KatexBlock,
    LessonDocument,
    QuestionBlock,
    TextBlock,
)
from precalc.domain.lesson.serialize import serialize_document
from precalc.domain.lesson.validator import (
    filter_lessons,
    normalize_block,
    parse_lesson_index,
    split_inline_math,
    validate_lesson,
)
from precalc.domain.lesson.viewer import LessonViewer


@pytest.mark.parametrize("raw", [None, 42, "lesson", [1, 2], True, 3.5])
def test_non_object_gives_empty_document(raw):
    document = validate_lesson(raw)
    assert document == LessonDocument()
    assert document.pages == ()
    assert document.objectives == ()
    assert document.sections == ()


def test_title_and_chapter_copied_only_when_types_match():
    assert validate_lesson({"title": "Unit Circle", "chapter": 5}).chapter == 5
    assert validate_lesson({"chapter": "Chapter 5"}).chapter == "Chapter 5"

    document = validate_lesson({"title": 12, "chapter": ["5"]})
    assert document.title is None
    assert document.chapter is None
    assert validate_lesson({"chapter": True}).chapter is None


def test_objectives_keep_only_strings_in_order():
    document = validate_lesson({"objectives": ["a", 1, None, "b", {"x": 1}]})
    assert document.objectives == ("a", "b")
    assert validate_lesson({"objectives": "not a list"}).objectives == ()


def test_invalid_blocks_dropped_and_siblings_keep_order():
    raw = {
        "pages": [
            {
                "id": "p1",
                "title": "Intro",
                "blocks": [
                    {"type": "text", "text": "first"},
                    {"type": "video", "src": "x.mp4"},
                    {"type": "katex"},
                    "loose string",
                    None,
                    {"type": "question", "id": "q1"},
                    {"type": "text", "text": "second"},
                    {"type": ["text"], "text": "unhashable type"},
                    {"type": "katex", "expression": "x^2"},
                ],
            }
        ]
    }
    page = validate_lesson(raw).pages[0]
    assert page.blocks == (
        TextBlock(text="first"),
        TextBlock(text="second"),
        KatexBlock(expression="x^2", display_mode=True),
    )


def test_pages_get_default_ids_and_titles_and_non_objects_dropped():
    document = validate_lesson({"pages": [{"blocks": []}, "junk", {"id": 3, "title": None}, {"id": "custom"}]})
    assert [(p.id, p.title) for p in document.pages] == [
        ("page-1", "Page 1"),
        ("page-3", "Page 3"),
        ("custom", "Page 4"),
    ]
    assert all(p.blocks == () for p in document.pages)


def test_katex_display_mode_coercion():
    assert normalize_block({"type": "katex", "expression": "x", "displayMode": False}).display_mode is False
    assert normalize_block({"type": "katex", "expression": "x", "displayMode": 0}).display_mode is False
    assert normalize_block({"type": "katex", "expression": "x", "displayMode": "yes"}).display_mode is True


def test_image_block_optional_fields():
    block = normalize_block({"type": "image", "src": "a.png", "alt": 3, "caption": "Cap", "maxWidth": 300})
    assert block == ImageBlock(src="a.png", alt=None, caption="Cap", max_width=300)
    assert normalize_block({"type": "image", "src": "a.png", "maxWidth": math.inf}).max_width is None
    assert normalize_block({"type": "image", "src": "a.png", "maxWidth": "300"}).max_width is None
    assert normalize_block({"type": "image", "alt": "no src"}) is None


def test_question_block_filters_answers_and_coerces_flag():
    block = normalize_block({
        "type": "question",
        "id": "q1",
        "prompt": "Find sin(π/6)",
        "explanation": 5,
        "acceptableAnswers": ["1/2", "", 0.5, "\\frac{1}{2}"],
        "requireCorrectBeforeAdvance": 1,
    })
    assert block == QuestionBlock(
        id="q1",
        prompt="Find sin(π/6)",
        explanation=None,
        acceptable_answers=("1/2", "\\frac{1}{2}"),
        require_correct_before_advance=True,
    )
    assert normalize_block({"type": "question", "id": "q2", "prompt": "?"}).acceptable_answers == ()


def test_desmos_expressions_and_viewport():
    block = normalize_block({
        "type": "desmos",
        "title": "Graph",
        "expressions": [
            "y=\\sin x",
            {"latex": "y=\\cos x", "label": "cos", "showLabel": True},
            {"label": "missing latex"},
            7,
            {"latex": "x=1", "showLabel": "yes"},
        ],
        "viewport": {"left": -10, "right": 10, "bottom": -2, "top": 2},
        "requireStudentGraphBeforeAdvance": True,
    })
    assert block == DesmosBlock(
        title="Graph",
        expressions=(
            DesmosExpression(latex="y=\\sin x"),
            DesmosExpression(latex="y=\\cos x", label="cos", show_label=True),
            DesmosExpression(latex="x=1"),
        ),
        viewport=DesmosViewport(left=-10, right=10, bottom=-2, top=2),
        require_student_graph_before_advance=True,
    )


def test_desmos_viewport_requires_all_four_bounds():
    block = normalize_block({"type": "desmos", "expressions": ["y=x"], "viewport": {"left": -1, "right": 1, "bottom": -1}})
    assert block.viewport is None
    block = normalize_block({
        "type": "desmos",
        "expressions": ["y=x"],
        "viewport": {"left": -1, "right": 1, "bottom": -1, "top": "1"},
    })
    assert block.viewport is None


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "desmos", "requireStudentGraphBeforeAdvance": True},
        {"type": "desmos", "expressions": []},
        {"type": "desmos", "expressions": "y=x"},
        {"type": "desmos", "expressions": [7, {"label": "no latex"}]},
    ],
)
def test_desmos_without_valid_expressions_dropped(raw):
    assert normalize_block(raw) is None


def test_empty_required_graph_does_not_gate_page():
    document = validate_lesson({
        "pages": [
            {"blocks": [{"type": "desmos", "requireStudentGraphBeforeAdvance": True}]},
            {"blocks": []},
        ]
    })
    assert document.pages[0].blocks == ()
    assert LessonViewer(document).next_page().value == 1


def test_blank_acceptable_answers_dropped():
    block = normalize_block({"type": "question", "id": "q", "prompt": "?", "acceptableAnswers": ["  ", "\t", "1"]})
    assert block.acceptable_answers == ("1",)

    only_blank = normalize_block({"type": "question", "id": "q", "prompt": "?", "acceptableAnswers": ["  "]})
    assert not check_question_answer(QuestionAnswer(x="", y=""), only_blank.acceptable_answers)


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_chapter_dropped(bad):
    assert validate_lesson({"title": "T", "chapter": bad}).chapter is None
    index = parse_lesson_index({"lessons": [{"id": "a", "title": "A", "path": "a.json", "chapter": bad}]})
    assert index.lessons[0].chapter is None


def test_sections_copied_when_strings():
    document = validate_lesson({"sections": [{"heading": "H", "content": 3}, "junk", {"content": "C"}]})
    assert [(s.heading, s.content) for s in document.sections] == [("H", None), (None, "C")]


def test_serialize_document_uses_client_field_names():
    document = validate_lesson({
        "title": "T",
        "pages": [{"id": "p1", "title": "P", "blocks": [
            {"type": "question", "id": "q", "prompt": "?", "requireCorrectBeforeAdvance": True},
        ]}],
    })
    data = serialize_document(document)
    assert data["pages"][0]["blocks"][0] == {
        "type": "question",
        "id": "q",
        "prompt": "?",
        "acceptableAnswers": [],
        "requireCorrectBeforeAdvance": True,
    }
    assert "chapter" not in data


def test_parse_lesson_index_and_filter():
    index = parse_lesson_index({
        "course": "Precalculus",
        "lessons": [
            {"id": "a", "title": "The Unit Circle", "chapter": 5, "summary": "Terminal points", "path": "a.json"},
            {"id": "b", "title": "Graphs", "chapter": 5, "summary": "Sine curves", "path": "b.json"},
            {"id": "c", "title": "Limits", "chapter": 12, "path": "c.json"},
            {"id": "broken", "title": "No path"},
            "junk",
        ],
    })
    assert index.course == "Precalculus"
    assert [entry.id for entry in index.lessons] == ["a", "b", "c"]
    assert [e.id for e in filter_lessons(index, chapter=5)] == ["a", "b"]
    assert [e.id for e in filter_lessons(index, chapter="5", search="SINE")] == ["b"]
    assert parse_lesson_index(None).lessons == ()


def test_split_inline_math():
    assert split_inline_math("Hint: $2\\pi = 360^\\circ$. Use $\\pi$") == [
        ("text", "Hint: "),
        ("math", "2\\pi = 360^\\circ"),
        ("text", ". Use "),
        ("math", "\\pi"),
    ]
    assert split_inline_math("no math") == [("text", "no math")]
