"""Qt UI components for the student application."""

from .dialog_helpers import (
    ask_continue_without_fullscreen,
    confirm_leave_quiz,
    show_error,
    show_info,
    show_warning_nonblocking,
)
from .qt_environment import QtProctoringEnvironment, QtScheduler
from .student_quiz_window import StudentQuizWindow

__all__ = [
    "QtProctoringEnvironment",
    "QtScheduler",
    "StudentQuizWindow",
    "ask_continue_without_fullscreen",
    "confirm_leave_quiz",
    "show_error",
    "show_info",
    "show_warning_nonblocking",
]
