"""Lesson domain models: pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class TextBlock:
    text: str
    type: str = field(default="text", init=False)


@dataclass(frozen=True)
class KatexBlock:
    expression: str
    display_mode: bool = True
    type: str = field(default="katex", init=False)


@dataclass(frozen=True)
class ImageBlock:
    src: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    max_width: Optional[float] = None
    type: str = field(default="image", init=False)


@dataclass(frozen=True)
class QuestionBlock:
    id: str
    prompt: str
    explanation: Optional[str] = None
    acceptable_answers: Tuple[str, ...] = ()
    require_correct_before_advance: bool = False
    type: str = field(default="question", init=False)


@dataclass(frozen=True)
class DesmosExpression:
    latex: str
    label: Optional[str] = None
    show_label: Optional[bool] = None


@dataclass(frozen=True)
class DesmosViewport:
    left: float
    right: float
    bottom: float
    top: float


@dataclass(frozen=True)
class DesmosBlock:
    title: Optional[str] = None
    expressions: Tuple[DesmosExpression, ...] = ()
    viewport: Optional[DesmosViewport] = None
    require_student_graph_before_advance: bool = False
    type: str = field(default="desmos", init=False)


LessonBlock = Union[TextBlock, KatexBlock, ImageBlock, QuestionBlock, DesmosBlock]


@dataclass(frozen=True)
class LessonPage:
    id: str
    title: str
    blocks: Tuple[LessonBlock, ...] = ()


@dataclass(frozen=True)
class LessonSection:
    """Legacy heading/content pair, shown only when a lesson has no pages."""

    heading: Optional[str] = None
    content: Optional[str] = None


@dataclass(frozen=True)
class LessonDocument:
    title: Optional[str] = None
    chapter: Optional[Union[str, int, float]] = None
    objectives: Tuple[str, ...] = ()
    pages: Tuple[LessonPage, ...] = ()
    sections: Tuple[LessonSection, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class LessonIndexEntry:
    id: str
    title: str
    path: str
    chapter: Optional[Union[str, int, float]] = None
    summary: str = ""


@dataclass(frozen=True)
class LessonIndex:
    course: str = ""
    lessons: Tuple[LessonIndexEntry, ...] = ()
