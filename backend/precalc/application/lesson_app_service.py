"""Application service: orchestrates load → validate → viewer action → persist progress."""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from precalc.core.config import LESSON_INDEX_PATH
from precalc.domain.common.result import Result
from precalc.domain.lesson.models import LessonDocument, LessonIndex, LessonIndexEntry
from precalc.domain.lesson.validator import filter_lessons, parse_lesson_index, validate_lesson
from precalc.domain.lesson.viewer import LessonViewer
from precalc.persistence.interfaces.progress_store import ProgressStore
from precalc.persistence.lesson_files import LessonFileSource, LessonLoadError
from precalc.persistence.progress_storage import (
    create_lesson_progress_storage_key,
    read_last_view,
    read_lesson_progress,
    write_last_view,
    write_lesson_progress,
)

logger = logging.getLogger(__name__)

ViewerAction = Callable[[LessonViewer], Result]


class LessonAppService:
    def __init__(self, source: LessonFileSource, store: ProgressStore):
        self._source = source
        self._store = store

    # ------------------------------------------------------------------
    # CATALOG
    # ------------------------------------------------------------------
    def get_index(self, chapter: Any = None, search: str = "") -> Result[Tuple[LessonIndex, List[LessonIndexEntry]]]:
        try:
            raw = self._source.load_json(LESSON_INDEX_PATH)
        except LessonLoadError as e:
            logger.warning("Lesson index unavailable: %s", e)
            return Result.fail("Could not load lessons. Please refresh and try again.")
        index = parse_lesson_index(raw)
        return Result.ok((index, filter_lessons(index, chapter=chapter, search=search)))

    def load_document(self, lesson_path: str) -> Result[LessonDocument]:
        try:
            raw = self._source.load_json(lesson_path)
        except LessonLoadError as e:
            logger.warning("Lesson load failed for %s: %s", lesson_path, e)
            return Result.fail(str(e))
        return Result.ok(validate_lesson(raw))

    # ------------------------------------------------------------------
    # VIEWER
    # ------------------------------------------------------------------
    def open_viewer(self, username: str, lesson_path: str) -> Result[LessonViewer]:
        """Fresh viewer for the lesson, restored from saved progress when there is any."""
        loaded = self.load_document(lesson_path)
        if not loaded.is_success:
            return Result.fail(loaded.error)

        document = loaded.value
        key = create_lesson_progress_storage_key(username, lesson_path)
        progress = read_lesson_progress(self._store, key, max_page_index=document.page_count - 1)
        return Result.ok(LessonViewer(document, progress))

    def open_lesson(self, username: str, lesson_path: str) -> Result[LessonViewer]:
        opened = self.open_viewer(username, lesson_path)
        if opened.is_success:
            self._persist(username, lesson_path, opened.value)
            write_last_view(self._store, username, {"view": "lesson", "lessonPath": lesson_path})
        return opened

    def apply(self, username: str, lesson_path: str, action: ViewerAction) -> Result[LessonViewer]:
        """Run one viewer action and persist the full snapshot if it succeeded."""
        opened = self.open_viewer(username, lesson_path)
        if not opened.is_success:
            return opened

        viewer = opened.value
        outcome = action(viewer)
        if not outcome.is_success:
            return Result.fail(outcome.error, value=viewer)

        self._persist(username, lesson_path, viewer)
        return Result.ok(viewer)

    def next_page(self, username: str, lesson_path: str) -> Result[LessonViewer]:
        return self.apply(username, lesson_path, lambda viewer: viewer.next_page())

    def previous_page(self, username: str, lesson_path: str) -> Result[LessonViewer]:
        return self.apply(username, lesson_path, lambda viewer: viewer.previous_page())

    def set_answer(
        self, username: str, lesson_path: str, question_id: str, x: Optional[str] = None, y: Optional[str] = None
    ) -> Result[LessonViewer]:
        def action(viewer: LessonViewer) -> Result:
            if viewer.find_question(question_id) is None:
                return Result.fail(f"Question '{question_id}' not found in this lesson.")
            return Result.ok(viewer.set_answer(question_id, x=x, y=y))

        return self.apply(username, lesson_path, action)

    def submit_answer(self, username: str, lesson_path: str, question_id: str) -> Result[LessonViewer]:
        return self.apply(username, lesson_path, lambda viewer: viewer.submit_answer(question_id))

    def toggle_hint(self, username: str, lesson_path: str, question_id: str) -> Result[LessonViewer]:
        def action(viewer: LessonViewer) -> Result:
            if viewer.find_question(question_id) is None:
                return Result.fail(f"Question '{question_id}' not found in this lesson.")
            return Result.ok(viewer.toggle_hint(question_id))

        return self.apply(username, lesson_path, action)

    def set_graph_complete(
        self, username: str, lesson_path: str, block_key: str, complete: bool = True
    ) -> Result[LessonViewer]:
        return self.apply(username, lesson_path, lambda viewer: viewer.set_graph_complete(block_key, complete))

    def save_graph_state(
        self, username: str, lesson_path: str, block_key: str, state: Dict[str, Any]
    ) -> Result[LessonViewer]:
        return self.apply(username, lesson_path, lambda viewer: Result.ok(viewer.save_graph_state(block_key, state)))

    # ------------------------------------------------------------------
    # NAVIGATION
    # ------------------------------------------------------------------
    def get_last_view(self, username: str) -> Optional[dict]:
        return read_last_view(self._store, username)

    def set_last_view(self, username: str, view: dict) -> None:
        write_last_view(self._store, username, view)

    def _persist(self, username: str, lesson_path: str, viewer: LessonViewer) -> None:
        key = create_lesson_progress_storage_key(username, lesson_path)
        write_lesson_progress(self._store, key, viewer.progress)
