import json

import pytest

from precalc.application.lesson_app_service import LessonAppService
from precalc.domain.lesson.serialize import serialize_document
from precalc.domain.lesson.viewer import ANSWER_REQUIRED_MESSAGE
from precalc.persistence.lesson_files import LessonFileSource, LessonLoadError
from precalc.persistence.progress_storage import create_lesson_progress_storage_key

LESSON_PATH = "precalc/chapter-5/sample.json"

SAMPLE_LESSON = {
    "title": "Sample",
    "chapter": 5,
    "pages": [
        {"id": "p1", "title": "One", "blocks": [{"type": "text", "text": "Hello"}]},
        {"id": "p2", "title": "Two", "blocks": [
            {"type": "question", "id": "q", "prompt": "sin(π/6)?",
             "acceptableAnswers": ["1/2"], "requireCorrectBeforeAdvance": True},
        ]},
        {"id": "p3", "title": "Three", "blocks": []},
    ],
}

SAMPLE_INDEX = {
    "course": "Precalculus",
    "lessons": [
        {"id": "sample", "title": "Sample", "chapter": 5, "summary": "Demo lesson", "path": LESSON_PATH},
        {"id": "other", "title": "Other", "chapter": 6, "summary": "", "path": "precalc/other.json"},
    ],
}


@pytest.fixture
def lessons_dir(tmp_path):
    chapter_dir = tmp_path / "precalc" / "chapter-5"
    chapter_dir.mkdir(parents=True)
    (chapter_dir / "sample.json").write_text(json.dumps(SAMPLE_LESSON), encoding="utf-8")
    (tmp_path / "precalc" / "index.json").write_text(json.dumps(SAMPLE_INDEX), encoding="utf-8")
    (tmp_path / "precalc" / "broken.json").write_text("{ nope", encoding="utf-8")
    return tmp_path


@pytest.fixture
def service(lessons_dir, memory_store):
    return LessonAppService(LessonFileSource(str(lessons_dir)), memory_store)


# ---------------------------------------------------------------------------
# Lesson files
# ---------------------------------------------------------------------------
def test_resolve_strips_lessons_prefix(lessons_dir):
    source = LessonFileSource(str(lessons_dir))
    assert source.resolve("lessons/" + LESSON_PATH) == source.resolve(LESSON_PATH)
    assert source.load_json("/" + LESSON_PATH)["title"] == "Sample"


def test_path_traversal_rejected(lessons_dir):
    source = LessonFileSource(str(lessons_dir / "precalc"))
    with pytest.raises(LessonLoadError):
        source.load_json("../precalc/index.json/../../../etc/passwd")
    with pytest.raises(LessonLoadError):
        source.resolve("../outside.json")


def test_missing_and_invalid_files_raise_load_error(lessons_dir):
    source = LessonFileSource(str(lessons_dir))
    with pytest.raises(LessonLoadError, match="not found"):
        source.load_json("precalc/missing.json")
    with pytest.raises(LessonLoadError, match="precalc/broken.json"):
        source.load_json("precalc/broken.json")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
def test_get_index_filters(service):
    result = service.get_index(chapter=5)
    assert result.is_success
    index, lessons = result.value
    assert len(index.lessons) == 2
    assert [entry.id for entry in lessons] == ["sample"]


def test_get_index_failure_message(tmp_path, memory_store):
    service = LessonAppService(LessonFileSource(str(tmp_path)), memory_store)
    result = service.get_index()
    assert not result.is_success
    assert result.error == "Could not load lessons. Please refresh and try again."


def test_load_document_failure_keeps_reason(service):
    result = service.load_document("precalc/missing.json")
    assert not result.is_success
    assert "Could not load lesson file precalc/missing.json" in result.error


# ---------------------------------------------------------------------------
# Viewer flow
# ---------------------------------------------------------------------------
def test_open_lesson_saves_progress_and_last_view(service, memory_store):
    opened = service.open_lesson("ana", LESSON_PATH)
    assert opened.is_success
    assert opened.value.page_index == 0
    assert create_lesson_progress_storage_key("ana", LESSON_PATH) in memory_store.items
    assert service.get_last_view("ana") == {"view": "lesson", "lessonPath": LESSON_PATH}


def test_progress_survives_between_calls(service):
    service.open_lesson("ana", LESSON_PATH)
    assert service.next_page("ana", LESSON_PATH).value.page_index == 1

    blocked = service.next_page("ana", LESSON_PATH)
    assert not blocked.is_success
    assert blocked.error == ANSWER_REQUIRED_MESSAGE
    assert blocked.value.page_index == 1

    service.set_answer("ana", LESSON_PATH, "q", x="\\frac{1}{2}")
    assert service.submit_answer("ana", LESSON_PATH, "q").value.progress.question_results["q"].is_correct is False

    service.set_answer("ana", LESSON_PATH, "q", x="1/2")
    assert service.submit_answer("ana", LESSON_PATH, "q").is_success
    assert service.next_page("ana", LESSON_PATH).value.page_index == 2

    reopened = service.open_viewer("ana", LESSON_PATH).value
    assert reopened.page_index == 2
    assert reopened.progress.question_answers["q"].x == "1/2"


def test_progress_is_per_user(service):
    service.next_page("ana", LESSON_PATH)
    assert service.open_viewer("ben", LESSON_PATH).value.page_index == 0


def test_failed_action_is_not_persisted(service, memory_store):
    service.open_lesson("ana", LESSON_PATH)
    key = create_lesson_progress_storage_key("ana", LESSON_PATH)
    before = memory_store.items[key]

    result = service.set_answer("ana", LESSON_PATH, "unknown", x="1")
    assert not result.is_success
    assert memory_store.items[key] == before


def test_action_on_missing_lesson_fails_without_viewer(service):
    result = service.next_page("ana", "precalc/missing.json")
    assert not result.is_success
    assert result.value is None


def test_graph_status_and_hint_are_saved(service):
    state = {"expressions": {"list": [{"latex": "x^2+y^2=1"}]}}
    service.toggle_hint("ana", LESSON_PATH, "q")
    service.save_graph_state("ana", LESSON_PATH, "p3:desmos-0", state)

    progress = service.open_viewer("ana", LESSON_PATH).value.progress
    assert progress.visible_hints == {"q": True}
    assert progress.desmos_graph_status == {"p3:desmos-0": True}
    assert progress.desmos_graph_states == {"p3:desmos-0": state}


def test_marking_graph_complete_without_drawing_is_refused(service, memory_store):
    result = service.set_graph_complete("ana", LESSON_PATH, "p3:desmos-0")
    assert not result.is_success
    assert create_lesson_progress_storage_key("ana", LESSON_PATH) not in memory_store.items


def test_hint_for_unknown_question_is_not_saved(service, memory_store):
    result = service.toggle_hint("ana", LESSON_PATH, "missing")
    assert not result.is_success
    assert "missing" in result.error
    assert create_lesson_progress_storage_key("ana", LESSON_PATH) not in memory_store.items


def test_non_finite_chapter_in_file_is_dropped(lessons_dir, service):
    (lessons_dir / "precalc" / "nan.json").write_text('{"title": "T", "chapter": NaN, "pages": []}', encoding="utf-8")

    document = service.load_document("precalc/nan.json").value
    assert document.title == "T"
    assert document.chapter is None
    json.dumps(serialize_document(document), allow_nan=False)
