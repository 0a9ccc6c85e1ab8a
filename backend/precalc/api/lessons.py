"""Lesson catalog, lesson documents and the per-student lesson viewer."""
from __future__ import annotations
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from precalc.api.auth import get_current_user
from precalc.application.lesson_app_service import LessonAppService
from precalc.container import get_lesson_app_service
from precalc.core import config
from precalc.domain.common.result import Result
from precalc.domain.lesson.serialize import serialize_document, serialize_index

router = APIRouter(tags=["lessons"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class LessonRef(BaseModel):
    lessonPath: str


class AnswerBody(LessonRef):
    questionId: str
    x: Optional[str] = None
    y: Optional[str] = None


class QuestionRef(LessonRef):
    questionId: str


class GraphStatusBody(LessonRef):
    blockKey: str
    complete: bool = True


class GraphStateBody(LessonRef):
    blockKey: str
    state: Dict[str, Any]


class NavigationBody(BaseModel):
    view: str
    lessonPath: Optional[str] = None


def _viewer_response(result: Result, failure_status: int = status.HTTP_409_CONFLICT) -> dict:
    """Render the viewer, or map the failure: no viewer means the lesson itself could not load."""
    if result.is_success:
        return result.value.render_current_page()
    if result.value is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    raise HTTPException(status_code=failure_status, detail=result.error)


# ------------------------------------------------------------------
# Health + widget assets
# ------------------------------------------------------------------
@router.get("/health")
def health():
    return {"ok": True}


@router.get("/api/widgets")
def widget_assets():
    """CDN assets the client loads lazily, once per session."""
    return {
        "desmos": {"script": config.DESMOS_SCRIPT_URL},
        "katex": {"script": config.KATEX_SCRIPT_URL, "stylesheet": config.KATEX_STYLESHEET_URL},
    }


# ------------------------------------------------------------------
# Catalog + documents
# ------------------------------------------------------------------
@router.get("/api/lessons")
def list_lessons(
    chapter: Optional[str] = None,
    search: str = "",
    svc: LessonAppService = Depends(get_lesson_app_service),
):
    result = svc.get_index(chapter=chapter, search=search)
    if not result.is_success:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
    index, lessons = result.value
    return serialize_index(index, lessons)


@router.get("/api/lessons/document")
def get_lesson_document(
    path: str = Query(..., min_length=1),
    svc: LessonAppService = Depends(get_lesson_app_service),
):
    result = svc.load_document(path)
    if not result.is_success:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    return serialize_document(result.value)


# ------------------------------------------------------------------
# Viewer (keyed by token username + lesson path)
# ------------------------------------------------------------------
@router.post("/api/viewer/open")
def open_lesson(
    body: LessonRef,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    return _viewer_response(svc.open_lesson(current_user["username"], body.lessonPath))


@router.get("/api/viewer/page")
def current_page(
    lessonPath: str = Query(..., min_length=1),
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    return _viewer_response(svc.open_viewer(current_user["username"], lessonPath))


@router.post("/api/viewer/next")
def next_page(
    body: LessonRef,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    return _viewer_response(svc.next_page(current_user["username"], body.lessonPath))


@router.post("/api/viewer/previous")
def previous_page(
    body: LessonRef,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    return _viewer_response(svc.previous_page(current_user["username"], body.lessonPath))


@router.post("/api/viewer/answer")
def set_answer(
    body: AnswerBody,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    result = svc.set_answer(current_user["username"], body.lessonPath, body.questionId, x=body.x, y=body.y)
    return _viewer_response(result, failure_status=status.HTTP_404_NOT_FOUND)


@router.post("/api/viewer/submit")
def submit_answer(
    body: QuestionRef,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    result = svc.submit_answer(current_user["username"], body.lessonPath, body.questionId)
    return _viewer_response(result, failure_status=status.HTTP_404_NOT_FOUND)


@router.post("/api/viewer/hint")
def toggle_hint(
    body: QuestionRef,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    result = svc.toggle_hint(current_user["username"], body.lessonPath, body.questionId)
    return _viewer_response(result, failure_status=status.HTTP_404_NOT_FOUND)


@router.post("/api/viewer/graph")
def set_graph_complete(
    body: GraphStatusBody,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    result = svc.set_graph_complete(current_user["username"], body.lessonPath, body.blockKey, body.complete)
    return _viewer_response(result)


@router.post("/api/viewer/graph-state")
def save_graph_state(
    body: GraphStateBody,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    result = svc.save_graph_state(current_user["username"], body.lessonPath, body.blockKey, body.state)
    return _viewer_response(result)


# ------------------------------------------------------------------
# Last-open view
# ------------------------------------------------------------------
@router.get("/api/navigation")
def get_navigation(
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    return svc.get_last_view(current_user["username"]) or {"view": "home", "lessonPath": None}


@router.put("/api/navigation")
def set_navigation(
    body: NavigationBody,
    svc: LessonAppService = Depends(get_lesson_app_service),
    current_user: dict = Depends(get_current_user),
):
    view = body.model_dump()
    svc.set_last_view(current_user["username"], view)
    return view
