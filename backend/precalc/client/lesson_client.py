"""HTTP client for the lesson server: lesson fetching plus register/login.

One outstanding request at a time, no retries. Lesson documents are passed
through the validator before they are returned, so callers always get a
well-formed LessonDocument.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from precalc.core import config
from precalc.domain.lesson.models import LessonDocument, LessonIndex
from precalc.domain.lesson.validator import parse_lesson_index, validate_lesson

logger = logging.getLogger(__name__)

MAX_ERROR_DETAILS = 3
DEFAULT_ROLE = "student"


class PrecalcClientError(Exception):
    """Base class; ``str(error)`` is meant for the student."""


class LessonFetchError(PrecalcClientError):
    pass


class AuthRequestError(PrecalcClientError):
    def __init__(self, message: str, diagnostics: Sequence[str] = ()):
        super().__init__(message)
        self.diagnostics = list(diagnostics)


@dataclass
class AuthUser:
    username: str
    role: str = DEFAULT_ROLE
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    token: Optional[str] = None


def default_api_bases() -> List[str]:
    """The configured base URL, or the local fallbacks tried in order."""
    if config.API_BASE_URL:
        return [config.API_BASE_URL]
    bases = [f"http://localhost:{config.PORT}", "http://localhost:8080", "http://127.0.0.1:8080"]
    return list(dict.fromkeys(bases))


def extract_role(payload: Any) -> str:
    """Role from ``{role}``, ``{data: {role}}`` or ``{user: {role}}``; ``student`` otherwise."""
    if not isinstance(payload, dict):
        return DEFAULT_ROLE
    candidates = [payload, payload.get("data"), payload.get("user")]
    for candidate in candidates:
        if isinstance(candidate, dict) and isinstance(candidate.get("role"), str) and candidate["role"]:
            return candidate["role"]
    return DEFAULT_ROLE


def _parse_body(response: requests.Response) -> Optional[Dict[str, Any]]:
    text = response.text
    if not text:
        return None
    try:
        body = response.json()
    except ValueError:
        return {"raw": text}
    return body if isinstance(body, dict) else {"raw": body}


def _server_error(body: Optional[Dict[str, Any]], status_code: int) -> str:
    if body:
        for field in ("error", "message", "detail"):
            if isinstance(body.get(field), str) and body[field]:
                return body[field]
    return f"HTTP {status_code}"


class PrecalcClient:
    def __init__(
        self,
        base_urls: Optional[Sequence[str]] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_urls = [url.rstrip("/") for url in (base_urls or default_api_bases())]
        self.session = session or requests.Session()
        self.timeout = config.REQUEST_TIMEOUT_SECONDS if timeout is None else timeout

    # ------------------------------------------------------------------
    # Lessons
    # ------------------------------------------------------------------
    def _get_lesson_json(self, file_path: str) -> Any:
        url = f"{self.base_urls[0]}/lessons/{file_path.lstrip('/')}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Lesson request to %s failed: %s", url, e)
            raise LessonFetchError(f"Could not load lesson file {file_path}. {e}") from e

        if not response.ok:
            raise LessonFetchError(f"Could not load lesson file {file_path} (HTTP {response.status_code})")
        try:
            return response.json()
        except ValueError as e:
            raise LessonFetchError(f"Could not load lesson file {file_path}. Response was not JSON.") from e

    def fetch_lesson_index(self) -> LessonIndex:
        return parse_lesson_index(self._get_lesson_json(config.LESSON_INDEX_PATH))

    def fetch_lesson(self, file_path: str) -> LessonDocument:
        return validate_lesson(self._get_lesson_json(file_path))

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def _post_auth(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST to each base URL in turn; the first 2xx response wins."""
        attempt_errors: List[str] = []
        for base in self.base_urls:
            url = f"{base}{endpoint}"
            try:
                response = self.session.post(url, json=payload, timeout=self.timeout)
            except requests.RequestException as e:
                attempt_errors.append(f"{url} -> {e}")
                logger.error("Auth request threw: %s -> %s", url, e)
                continue

            body = _parse_body(response)
            if not response.ok:
                diagnostic = f"{url} -> {_server_error(body, response.status_code)}"
                attempt_errors.append(diagnostic)
                logger.error("Auth request failed: %s", diagnostic)
                continue
            return body or {}

        shown = " | ".join(attempt_errors[:MAX_ERROR_DETAILS])
        extra = len(attempt_errors) - MAX_ERROR_DETAILS
        suffix = f" (+{extra} more)" if extra > 0 else ""
        raise AuthRequestError(f"Could not reach backend. {shown}{suffix}", attempt_errors)

    def login(self, username: str, password: str) -> AuthUser:
        body = self._post_auth("/login", {"username": username, "password": password})
        return self._auth_user(username, body)

    def register(
        self, username: str, password: str, first_name: str = "", last_name: str = ""
    ) -> AuthUser:
        payload = {"username": username, "password": password, "firstName": first_name, "lastName": last_name}
        body = self._post_auth("/register", payload)
        user = self._auth_user(username, body)
        user.first_name = user.first_name or first_name or None
        user.last_name = user.last_name or last_name or None
        return user

    @staticmethod
    def _auth_user(username: str, body: Dict[str, Any]) -> AuthUser:
        user = body.get("user") if isinstance(body.get("user"), dict) else {}
        token = body.get("token")
        return AuthUser(
            username=user.get("username") or username,
            role=extract_role(body),
            first_name=user.get("firstName"),
            last_name=user.get("lastName"),
            token=token if isinstance(token, str) else None,
        )
