"""Narrow loosely-typed lesson JSON into LessonDocument / LessonIndex.

Lesson files are hand-edited, so nothing here raises: a malformed block or
page is dropped and its siblings survive in their original order.
"""
from __future__ import annotations
import math
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from precalc.domain.lesson.models import (
    DesmosBlock,
    DesmosExpression,
    DesmosViewport,
    ImageBlock,
    KatexBlock,
    LessonBlock,
    LessonDocument,
    LessonIndex,
    LessonIndexEntry,
    LessonPage,
    LessonSection,
    QuestionBlock,
    TextBlock,
)

_INLINE_MATH = re.compile(r"(\$[^$]+\$)")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


# ------------------------------------------------------------------
# Block normalizers, one per variant
# ------------------------------------------------------------------
def _text_block(raw: Dict[str, Any]) -> Optional[LessonBlock]:
    if not isinstance(raw.get("text"), str):
        return None
    return TextBlock(text=raw["text"])


def _katex_block(raw: Dict[str, Any]) -> Optional[LessonBlock]:
    if not isinstance(raw.get("expression"), str):
        return None
    display_mode = raw.get("displayMode")
    return KatexBlock(
        expression=raw["expression"],
        display_mode=True if display_mode is None else bool(display_mode),
    )


def _image_block(raw: Dict[str, Any]) -> Optional[LessonBlock]:
    if not isinstance(raw.get("src"), str):
        return None
    max_width = raw.get("maxWidth")
    return ImageBlock(
        src=raw["src"],
        alt=_optional_str(raw.get("alt")),
        caption=_optional_str(raw.get("caption")),
        max_width=max_width if _is_finite_number(max_width) else None,
    )


def _question_block(raw: Dict[str, Any]) -> Optional[LessonBlock]:
    if not isinstance(raw.get("id"), str) or not isinstance(raw.get("prompt"), str):
        return None
    answers = raw.get("acceptableAnswers")
    acceptable = tuple(a for a in answers if isinstance(a, str) and a.strip()) if isinstance(answers, list) else ()
    return QuestionBlock(
        id=raw["id"],
        prompt=raw["prompt"],
        explanation=_optional_str(raw.get("explanation")),
        acceptable_answers=acceptable,
        require_correct_before_advance=bool(raw.get("requireCorrectBeforeAdvance")),
    )


def _desmos_expression(raw: Any) -> Optional[DesmosExpression]:
    if isinstance(raw, str):
        return DesmosExpression(latex=raw)
    if not isinstance(raw, dict) or not isinstance(raw.get("latex"), str):
        return None
    show_label = raw.get("showLabel")
    return DesmosExpression(
        latex=raw["latex"],
        label=_optional_str(raw.get("label")),
        show_label=show_label if isinstance(show_label, bool) else None,
    )


def _desmos_viewport(raw: Any) -> Optional[DesmosViewport]:
    if not isinstance(raw, dict):
        return None
    bounds = [raw.get(name) for name in ("left", "right", "bottom", "top")]
    if not all(_is_finite_number(bound) for bound in bounds):
        return None
    return DesmosViewport(*bounds)


def _desmos_block(raw: Dict[str, Any]) -> Optional[LessonBlock]:
    expressions = raw.get("expressions")
    parsed = [_desmos_expression(item) for item in expressions] if isinstance(expressions, list) else []
    valid = tuple(e for e in parsed if e is not None)
    if not valid:
        return None
    return DesmosBlock(
        title=_optional_str(raw.get("title")),
        expressions=valid,
        viewport=_desmos_viewport(raw.get("viewport")),
        require_student_graph_before_advance=bool(raw.get("requireStudentGraphBeforeAdvance")),
    )


_BLOCK_NORMALIZERS: Dict[str, Callable[[Dict[str, Any]], Optional[LessonBlock]]] = {
    "text": _text_block,
    "katex": _katex_block,
    "image": _image_block,
    "question": _question_block,
    "desmos": _desmos_block,
}


def normalize_block(raw: Any) -> Optional[LessonBlock]:
    """Return the typed block, or None when the raw value is not a known, well-formed block."""
    if not isinstance(raw, dict) or not isinstance(raw.get("type"), str):
        return None
    normalizer = _BLOCK_NORMALIZERS.get(raw["type"])
    if normalizer is None:
        return None
    return normalizer(raw)


def normalize_page(raw: Any, position: int) -> Optional[LessonPage]:
    """Normalize one page; ``position`` is 1-based and feeds the default id/title."""
    if not isinstance(raw, dict):
        return None
    raw_blocks = raw.get("blocks")
    blocks = [normalize_block(item) for item in raw_blocks] if isinstance(raw_blocks, list) else []
    page_id = raw.get("id")
    title = raw.get("title")
    return LessonPage(
        id=page_id if isinstance(page_id, str) else f"page-{position}",
        title=title if isinstance(title, str) else f"Page {position}",
        blocks=tuple(b for b in blocks if b is not None),
    )


def _normalize_section(raw: Any) -> Optional[LessonSection]:
    if not isinstance(raw, dict):
        return None
    return LessonSection(heading=_optional_str(raw.get("heading")), content=_optional_str(raw.get("content")))


# ------------------------------------------------------------------
# Public entry points
# ------------------------------------------------------------------
def validate_lesson(raw: Any) -> LessonDocument:
    """Convert an arbitrary parsed JSON value into a best-effort LessonDocument."""
    if not isinstance(raw, dict):
        return LessonDocument()

    chapter = raw.get("chapter")
    objectives = raw.get("objectives")
    raw_pages = raw.get("pages")
    raw_sections = raw.get("sections")

    pages = (
        [normalize_page(page, index + 1) for index, page in enumerate(raw_pages)]
        if isinstance(raw_pages, list)
        else []
    )
    sections = [_normalize_section(s) for s in raw_sections] if isinstance(raw_sections, list) else []

    return LessonDocument(
        title=_optional_str(raw.get("title")),
        chapter=chapter if isinstance(chapter, str) or _is_finite_number(chapter) else None,
        objectives=tuple(o for o in objectives if isinstance(o, str)) if isinstance(objectives, list) else (),
        pages=tuple(p for p in pages if p is not None),
        sections=tuple(s for s in sections if s is not None),
    )


def parse_lesson_index(raw: Any) -> LessonIndex:
    """Parse ``{course, lessons: [{id, title, chapter, summary, path}]}``, dropping unusable entries."""
    if not isinstance(raw, dict):
        return LessonIndex()

    entries: List[LessonIndexEntry] = []
    raw_lessons = raw.get("lessons")
    for item in raw_lessons if isinstance(raw_lessons, list) else []:
        if not isinstance(item, dict):
            continue
        if not all(isinstance(item.get(key), str) for key in ("id", "title", "path")):
            continue
        chapter = item.get("chapter")
        entries.append(
            LessonIndexEntry(
                id=item["id"],
                title=item["title"],
                path=item["path"],
                chapter=chapter if isinstance(chapter, str) or _is_finite_number(chapter) else None,
                summary=item.get("summary") if isinstance(item.get("summary"), str) else "",
            )
        )

    course = raw.get("course")
    return LessonIndex(course=course if isinstance(course, str) else "", lessons=tuple(entries))


def filter_lessons(index: LessonIndex, chapter: Any = None, search: str = "") -> List[LessonIndexEntry]:
    """Filter index entries by chapter and a case-insensitive title/summary search."""
    needle = search.strip().lower()
    results = []
    for lesson in index.lessons:
        if chapter is not None and str(lesson.chapter) != str(chapter):
            continue
        if needle and needle not in lesson.title.lower() and needle not in lesson.summary.lower():
            continue
        results.append(lesson)
    return results


def split_inline_math(text: str) -> List[Tuple[str, str]]:
    """Split ``"Use $2\\pi$ here"`` into ``[("text", "Use "), ("math", "2\\pi"), ("text", " here")]``."""
    segments: List[Tuple[str, str]] = []
    for segment in _INLINE_MATH.split(text):
        if not segment:
            continue
        if len(segment) > 1 and segment.startswith("$") and segment.endswith("$"):
            segments.append(("math", segment[1:-1]))
        else:
            segments.append(("text", segment))
    return segments
