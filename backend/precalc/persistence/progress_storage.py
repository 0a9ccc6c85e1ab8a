"""Read/write LessonProgress and the last-open view through a ProgressStore."""
from __future__ import annotations
import json
import logging
from typing import Optional

from precalc.domain.lesson.progress import LessonProgress, progress_from_raw
from precalc.persistence.interfaces.progress_store import ProgressStore

logger = logging.getLogger(__name__)


def create_lesson_progress_storage_key(username: str, lesson_file_path: str) -> str:
    return f"precalc-lesson-progress:{username}:{lesson_file_path}"


def create_navigation_storage_key(username: str) -> str:
    return f"student-navigation:{username}"


def read_lesson_progress(store: ProgressStore, storage_key: str, max_page_index: int) -> Optional[LessonProgress]:
    """Return the saved progress with ``page_index`` capped at ``max_page_index``; None if absent or unusable."""
    raw = store.get_item(storage_key)
    if not raw:
        return None

    try:
        progress = progress_from_raw(json.loads(raw))
    except ValueError:
        logger.warning("Discarding unparsable progress under %s", storage_key)
        return None
    if progress is None:
        return None

    progress.page_index = max(0, min(progress.page_index, max_page_index))
    return progress


def write_lesson_progress(store: ProgressStore, storage_key: str, progress: LessonProgress) -> str:
    store.set_item(storage_key, json.dumps(progress.to_dict(), ensure_ascii=False))
    return storage_key


def read_last_view(store: ProgressStore, username: str) -> Optional[dict]:
    raw = store.get_item(create_navigation_storage_key(username))
    if not raw:
        return None
    try:
        view = json.loads(raw)
    except ValueError:
        logger.warning("Discarding unparsable navigation state for %s", username)
        return None
    return view if isinstance(view, dict) else None


def write_last_view(store: ProgressStore, username: str, view: dict) -> None:
    store.set_item(create_navigation_storage_key(username), json.dumps(view, ensure_ascii=False))
