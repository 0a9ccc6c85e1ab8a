"""Dependency injection container: wires implementations to interfaces."""
from __future__ import annotations
from functools import lru_cache

from precalc.application.lesson_app_service import LessonAppService
from precalc.core import config
from precalc.persistence.lesson_files import LessonFileSource
from precalc.persistence.repositories.sqlite.sqlite_progress_store import SqliteProgressStore
from precalc.persistence.repositories.sqlite.sqlite_user_repository import SqliteUserRepository


@lru_cache(maxsize=1)
def get_progress_store() -> SqliteProgressStore:
    return SqliteProgressStore()


@lru_cache(maxsize=1)
def get_user_repo() -> SqliteUserRepository:
    return SqliteUserRepository()


@lru_cache(maxsize=1)
def get_lesson_source() -> LessonFileSource:
    return LessonFileSource(config.LESSONS_DIR)


@lru_cache(maxsize=1)
def get_lesson_app_service() -> LessonAppService:
    return LessonAppService(source=get_lesson_source(), store=get_progress_store())
