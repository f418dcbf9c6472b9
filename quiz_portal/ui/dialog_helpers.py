"""Helper functions for common dialog patterns in the student UI."""

from __future__ import annotations

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QMessageBox, QWidget

from quiz_portal.constants.quiz_constants import LEAVE_QUIZ_PROMPT
from quiz_portal.constants.ui_constants import FULLSCREEN_UNSUPPORTED_MESSAGE


def _apply_optional_font(widget: QWidget, font_point_size: int | None) -> None:
    """Apply font size to a widget when requested."""
    if font_point_size is None or font_point_size <= 0:
        return

    font: QFont = widget.font()
    font.setPointSize(font_point_size)
    widget.setFont(font)


def confirm_leave_quiz(parent: QWidget | None, message: str = LEAVE_QUIZ_PROMPT) -> bool:
    """Ask whether the student really wants to close the window mid-quiz.

    Returns:
        True if the student confirmed leaving, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Leave Quiz?",
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def ask_continue_without_fullscreen(parent: QWidget | None) -> bool:
    """Offer to start the quiz without fullscreen after a failed request.

    Returns:
        True to continue without fullscreen, False to stay on the prompt
    """
    reply = QMessageBox.question(
        parent,
        "Fullscreen Unavailable",
        FULLSCREEN_UNSUPPORTED_MESSAGE,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.Yes
    )
    return reply == QMessageBox.Yes


def show_error(parent: QWidget | None, title: str, message: str) -> None:
    """Show error dialog.
    
    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Error message
    """
    QMessageBox.critical(parent, title, message)


def show_info(
    parent: QWidget | None,
    title: str,
    message: str,
    *,
    font_point_size: int | None = None,
) -> None:
    """Show information dialog.
    
    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Information message
    """
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    _apply_optional_font(msg_box, font_point_size)
    msg_box.exec()


def show_warning_nonblocking(parent: QWidget | None, title: str, message: str) -> QMessageBox:
    """Show a warning without blocking the event loop.

    The quiz keeps running behind the box, so the countdown and further
    proctoring events are still processed while it is open.
    """
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Warning)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    msg_box.setModal(False)
    msg_box.show()
    return msg_box
