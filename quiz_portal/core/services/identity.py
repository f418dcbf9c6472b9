"""Account directory used by the backend and the client's session identity."""

from __future__ import annotations

from dataclasses import dataclass
import secrets
import time
from typing import Callable
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from quiz_portal.constants.network_constants import TOKEN_TTL_SECONDS
from quiz_portal.core.errors import Unauthenticated
from quiz_portal.core.models import QuizUser


@dataclass(slots=True)
class _Account:
    user: QuizUser
    password_hash: str


@dataclass(slots=True)
class _IssuedToken:
    email: str
    expires_at: float


class UserDirectory:
    """Stores accounts and issues bearer tokens that expire after ``token_ttl`` seconds."""

    def __init__(
        self,
        token_ttl: float = TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if token_ttl <= 0:
            raise ValueError("Token lifetime must be positive.")
        self._accounts: dict[str, _Account] = {}
        self._tokens: dict[str, _IssuedToken] = {}
        self._token_ttl = token_ttl
        self._clock = clock

    def add_user(
        self,
        email: str,
        password: str,
        display_name: str = "",
        is_admin: bool = False,
    ) -> QuizUser:
        normalized = email.strip().lower()
        if "@" not in normalized:
            raise ValueError(f"Invalid email address: {email!r}")
        if len(password) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        if normalized in self._accounts:
            raise ValueError(f"An account for {normalized} already exists.")

        user = QuizUser(
            user_id=uuid4().hex,
            email=normalized,
            display_name=display_name.strip() or normalized.split("@", 1)[0],
            is_admin=is_admin,
        )
        self._accounts[normalized] = _Account(user=user, password_hash=generate_password_hash(password))
        return user

    def sign_in(self, email: str, password: str) -> tuple[QuizUser, str]:
        """Verify credentials and return the user with a fresh bearer token."""
        account = self._accounts.get(email.strip().lower())
        if account is None or not check_password_hash(account.password_hash, password):
            raise Unauthenticated("Invalid email or password.")
        self._purge_expired()
        token = secrets.token_urlsafe(32)
        self._tokens[token] = _IssuedToken(email=account.user.email, expires_at=self._clock() + self._token_ttl)
        return account.user, token

    def resolve_token(self, token: str | None) -> QuizUser:
        issued = self._tokens.get(token or "")
        if issued is None:
            raise Unauthenticated("Missing or unknown credential.")
        if self._clock() >= issued.expires_at:
            del self._tokens[token]
            raise Unauthenticated("Credential has expired. Please sign in again.")
        return self._accounts[issued.email].user

    def sign_out(self, token: str) -> None:
        self._tokens.pop(token, None)

    def get_user_count(self) -> int:
        return len(self._accounts)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [token for token, issued in self._tokens.items() if now >= issued.expires_at]
        for token in expired:
            del self._tokens[token]


class SessionIdentity:
    """Signed-in user and bearer token held by a client session."""

    def __init__(self) -> None:
        self._user: QuizUser | None = None
        self._token: str | None = None

    def establish(self, user: QuizUser, token: str) -> None:
        self._user = user
        self._token = token

    def clear(self) -> None:
        self._user = None
        self._token = None

    def is_signed_in(self) -> bool:
        return self._user is not None and bool(self._token)

    def current_user(self) -> QuizUser:
        if self._user is None:
            raise Unauthenticated("No user is signed in.")
        return self._user

    def get_token(self) -> str:
        if not self._token:
            raise Unauthenticated("No credential available for the current user.")
        return self._token
