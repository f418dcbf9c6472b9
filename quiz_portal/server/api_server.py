"""FastAPI server that exposes the question bank, result storage and sign-in."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, Header, HTTPException, Query
import uvicorn

from quiz_portal.constants.network_constants import AUTH_SCHEME, DEFAULT_HOST, DEFAULT_PORT
from quiz_portal.constants.quiz_constants import RECENT_ATTEMPTS_LIMIT
from quiz_portal.core.errors import PermissionDenied, Unauthenticated
from quiz_portal.core.portal_backend import PortalBackend
from quiz_portal.core.schemas import (
    LoginPayload,
    QuestionPayload,
    ResultCreated,
    ResultPayload,
    SessionPayload,
)

logger = logging.getLogger(__name__)


def _bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != AUTH_SCHEME.lower() or not token.strip():
        return None
    return token.strip()


def _get_backend_dependency(backend: PortalBackend):
    def dependency() -> PortalBackend:
        return backend

    return dependency


def create_api_app(backend: PortalBackend) -> FastAPI:
    """Create a FastAPI application wired to the provided backend."""
    app = FastAPI(title="Quiz Portal API", version="0.1.0")
    backend_dep = _get_backend_dependency(backend)

    @app.post("/login")
    def login(payload: LoginPayload, portal: PortalBackend = Depends(backend_dep)) -> SessionPayload:
        try:
            user, token = portal.sign_in(payload.email, payload.password)
        except Unauthenticated as exc:
            logger.info("Rejected sign-in for %s", payload.email)
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        return SessionPayload(
            token=token,
            user_id=user.user_id,
            email=user.email,
            display_name=user.display_name,
            is_admin=user.is_admin,
        )

    @app.post("/logout", status_code=204)
    def logout(
        token: str | None = Depends(_bearer_token),
        portal: PortalBackend = Depends(backend_dep),
    ) -> None:
        if token:
            portal.sign_out(token)

    @app.get("/questions")
    def list_questions(
        token: str | None = Depends(_bearer_token),
        portal: PortalBackend = Depends(backend_dep),
    ) -> list[QuestionPayload]:
        try:
            questions = portal.list_questions(token)
        except Unauthenticated as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        return [QuestionPayload.from_domain(question) for question in questions]

    @app.post("/results", status_code=201)
    def submit_result(
        payload: ResultPayload,
        token: str | None = Depends(_bearer_token),
        portal: PortalBackend = Depends(backend_dep),
    ) -> ResultCreated:
        try:
            result_id = portal.record_result(token, payload.to_domain())
        except Unauthenticated as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except PermissionDenied as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc
        return ResultCreated(result_id=result_id)

    @app.get("/results/recent")
    def recent_results(
        limit: int = Query(default=RECENT_ATTEMPTS_LIMIT, ge=1, le=50),
        token: str | None = Depends(_bearer_token),
        portal: PortalBackend = Depends(backend_dep),
    ) -> list[ResultPayload]:
        try:
            results = portal.recent_results(token, limit)
        except Unauthenticated as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        return [ResultPayload.from_domain(result) for result in results]

    @app.get("/admin/results")
    def all_results(
        token: str | None = Depends(_bearer_token),
        portal: PortalBackend = Depends(backend_dep),
    ) -> list[ResultPayload]:
        try:
            results = portal.all_results(token)
        except Unauthenticated as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except PermissionDenied as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc
        return [ResultPayload.from_domain(result) for result in results]

    @app.post("/admin/questions", status_code=201)
    def add_question(
        payload: QuestionPayload,
        token: str | None = Depends(_bearer_token),
        portal: PortalBackend = Depends(backend_dep),
    ) -> QuestionPayload:
        try:
            question = portal.add_question(token, payload.to_domain())
        except Unauthenticated as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except PermissionDenied as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return QuestionPayload.from_domain(question)

    return app


def start_api_server(
    backend: PortalBackend,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(backend)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizPortalApiServer", daemon=True)
    thread.start()
    return thread
