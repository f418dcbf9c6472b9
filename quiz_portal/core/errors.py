"""Exceptions raised by the quiz portal core."""

from __future__ import annotations


class QuizPortalError(Exception):
    """Base class for quiz portal failures."""


class DataUnavailable(QuizPortalError):
    """Raised when questions cannot be loaded or a result cannot be saved."""


class Unauthenticated(QuizPortalError):
    """Raised when no signed-in user or valid bearer credential is available."""


class FullscreenUnsupported(QuizPortalError):
    """Raised when the platform rejects a fullscreen request."""


class PermissionDenied(QuizPortalError):
    """Raised when an authenticated user lacks the rights for an operation."""
