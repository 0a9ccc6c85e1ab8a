"""Serializers: turn lesson domain objects back into the camelCase JSON the client reads."""
from __future__ import annotations
from typing import Any, Dict

from precalc.domain.lesson.models import (
    DesmosBlock,
    ImageBlock,
    KatexBlock,
    LessonBlock,
    LessonDocument,
    LessonIndex,
    LessonPage,
    QuestionBlock,
    TextBlock,
)


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def serialize_block(block: LessonBlock) -> Dict[str, Any]:
    if isinstance(block, TextBlock):
        return {"type": block.type, "text": block.text}
    if isinstance(block, KatexBlock):
        return {"type": block.type, "expression": block.expression, "displayMode": block.display_mode}
    if isinstance(block, ImageBlock):
        return _drop_none({
            "type": block.type,
            "src": block.src,
            "alt": block.alt,
            "caption": block.caption,
            "maxWidth": block.max_width,
        })
    if isinstance(block, QuestionBlock):
        return _drop_none({
            "type": block.type,
            "id": block.id,
            "prompt": block.prompt,
            "explanation": block.explanation,
            "acceptableAnswers": list(block.acceptable_answers),
            "requireCorrectBeforeAdvance": block.require_correct_before_advance,
        })
    if isinstance(block, DesmosBlock):
        viewport = block.viewport
        return _drop_none({
            "type": block.type,
            "title": block.title,
            "expressions": [
                _drop_none({"latex": e.latex, "label": e.label, "showLabel": e.show_label})
                for e in block.expressions
            ],
            "viewport": (
                {"left": viewport.left, "right": viewport.right, "bottom": viewport.bottom, "top": viewport.top}
                if viewport
                else None
            ),
            "requireStudentGraphBeforeAdvance": block.require_student_graph_before_advance,
        })
    raise TypeError(f"Unknown lesson block: {block!r}")


def serialize_page(page: LessonPage) -> Dict[str, Any]:
    return {"id": page.id, "title": page.title, "blocks": [serialize_block(b) for b in page.blocks]}


def serialize_document(document: LessonDocument) -> Dict[str, Any]:
    return _drop_none({
        "title": document.title,
        "chapter": document.chapter,
        "objectives": list(document.objectives),
        "pages": [serialize_page(p) for p in document.pages],
        "sections": [_drop_none({"heading": s.heading, "content": s.content}) for s in document.sections],
    })


def serialize_index(index: LessonIndex, lessons=None) -> Dict[str, Any]:
    entries = index.lessons if lessons is None else lessons
    return {
        "course": index.course,
        "lessons": [
            {"id": e.id, "title": e.title, "chapter": e.chapter, "summary": e.summary, "path": e.path}
            for e in entries
        ],
    }
