"""Filesystem access to the lesson JSON tree (the same files served under /lessons)."""
from __future__ import annotations
import json
import os
from typing import Any


class LessonLoadError(Exception):
    """A lesson file could not be read; the message is shown to the student as-is."""


class LessonFileSource:
    def __init__(self, lessons_dir: str):
        self.lessons_dir = os.path.abspath(lessons_dir)

    def resolve(self, file_path: str) -> str:
        """Map ``precalc/chapter-5/unit-circle.json`` to an absolute path inside ``lessons_dir``."""
        relative = file_path.strip().lstrip("/")
        if relative.startswith("lessons/"):
            relative = relative[len("lessons/"):]
        full_path = os.path.abspath(os.path.join(self.lessons_dir, relative))
        if os.path.commonpath([full_path, self.lessons_dir]) != self.lessons_dir:
            raise LessonLoadError(f"Could not load lesson file {file_path}. Path is outside the lesson library.")
        return full_path

    def load_json(self, file_path: str) -> Any:
        full_path = self.resolve(file_path)
        if not os.path.isfile(full_path):
            raise LessonLoadError(f"Could not load lesson file {file_path} (not found)")
        try:
            with open(full_path, "r", encoding="utf-8-sig") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise LessonLoadError(f"Could not load lesson file {file_path}. {e}") from e
