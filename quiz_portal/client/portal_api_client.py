"""HTTP client implementing the question bank, result store and sign-in."""

from __future__ import annotations

import logging
from typing import Any

import requests

from quiz_portal.constants.network_constants import API_BASE_URL, AUTH_SCHEME, REQUEST_TIMEOUT_SECONDS
from quiz_portal.core.errors import DataUnavailable, PermissionDenied, Unauthenticated
from quiz_portal.core.models import Question, QuizResult, QuizUser
from quiz_portal.core.schemas import (
    LoginPayload,
    QuestionPayload,
    ResultCreated,
    ResultPayload,
    SessionPayload,
)

logger = logging.getLogger(__name__)


class PortalApiClient:
    """Talks to the quiz portal API.

    ``session`` only needs ``get``/``post`` methods returning objects with
    ``status_code``, ``json()`` and ``text``; a ``requests.Session`` is used
    by default.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        session: Any | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def sign_in(self, email: str, password: str) -> tuple[QuizUser, str]:
        body = LoginPayload(email=email, password=password).model_dump()
        data = self._request("post", "/login", json=body)
        session = SessionPayload.model_validate(data)
        return session.to_user(), session.token

    def sign_out(self, credential: str) -> None:
        self._request("post", "/logout", credential=credential, expect_json=False)

    def fetch_all(self, credential: str | None = None) -> list[Question]:
        data = self._request("get", "/questions", credential=credential)
        return [QuestionPayload.model_validate(item).to_domain() for item in data]

    def append_result(self, result: QuizResult, credential: str | None = None) -> str:
        body = ResultPayload.from_domain(result).model_dump(mode="json")
        data = self._request("post", "/results", credential=credential, json=body)
        return ResultCreated.model_validate(data).result_id

    def recent_results(
        self,
        user_id: str,
        limit: int,
        credential: str | None = None,
    ) -> list[QuizResult]:
        data = self._request("get", "/results/recent", credential=credential, params={"limit": limit})
        results = [ResultPayload.model_validate(item).to_domain() for item in data]
        return [result for result in results if result.user_id == user_id]

    def _request(
        self,
        method: str,
        path: str,
        *,
        credential: str | None = None,
        expect_json: bool = True,
        **kwargs: Any,
    ) -> Any:
        headers = {"Authorization": f"{AUTH_SCHEME} {credential}"} if credential else {}
        url = f"{self._base_url}{path}"
        try:
            response = getattr(self._session, method)(url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise DataUnavailable(f"Could not reach the quiz server: {exc}") from exc

        status = response.status_code
        if status == 401:
            raise Unauthenticated(self._error_detail(response) or "Authentication required.")
        if status == 403:
            raise PermissionDenied(self._error_detail(response) or "Access denied.")
        if status >= 400:
            logger.error("%s %s returned %d", method.upper(), url, status)
            raise DataUnavailable(f"Quiz server returned {status}: {self._error_detail(response)}")
        if not expect_json:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise DataUnavailable("Quiz server returned an invalid response.") from exc

    @staticmethod
    def _error_detail(response: Any) -> str:
        try:
            detail = response.json().get("detail", "")
        except (ValueError, AttributeError):
            return response.text
        return detail if isinstance(detail, str) else str(detail)
