"""Component for the final score, answer review and previous attempts."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quiz_portal.constants.ui_constants import (
    NO_PREVIOUS_ATTEMPTS,
    RESULT_TITLE,
    REVIEW_HIDE_BUTTON,
    REVIEW_SHOW_BUTTON,
    SIGN_OUT_BUTTON,
)
from quiz_portal.core.models import AnswerRecord, QuizResult
from quiz_portal.core.scoring import score_band
from quiz_portal.styling.color_palette import ColorPalette, Theme
from quiz_portal.styling.styles import Styles


def describe_answer(number: int, answer: AnswerRecord) -> str:
    """One review line; an unanswered question reads differently from a wrong pick."""
    if not answer.has_selection:
        verdict = "Not answered"
    elif answer.is_correct:
        verdict = "Correct"
    else:
        verdict = "Incorrect"
    lines = [
        f"{number}. {answer.question_text}",
        f"    Your answer: {answer.selected_text}",
    ]
    if not answer.is_correct:
        lines.append(f"    Correct answer: {answer.correct_option_text}")
    lines.append(f"    {verdict} ({answer.points_awarded}/{answer.max_points} points)")
    return "\n".join(lines)


def describe_attempt(result: QuizResult) -> str:
    completed = result.completed_at.astimezone().strftime("%Y-%m-%d %H:%M")
    return (
        f"{completed}  |  {result.score_percentage:.1f}%  "
        f"({result.total_points}/{result.max_possible_points} points)"
    )


class ResultPanel(QWidget):
    """Shows the score for a completed attempt."""

    def __init__(self, on_sign_out: callable, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_sign_out = on_sign_out
        self._review_visible = False

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        title = QLabel(RESULT_TITLE, self)
        title.setStyleSheet(Styles.get_title_style())
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)

        self.score_label = QLabel("", self)
        self.score_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.score_label)

        self.detail_label = QLabel("", self)
        self.detail_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.detail_label)

        self.review_button = QPushButton(REVIEW_SHOW_BUTTON, self)
        self.review_button.clicked.connect(self._toggle_review)
        layout.addWidget(self.review_button, alignment=Qt.AlignCenter)

        self.review_list = QListWidget(self)
        self.review_list.setWordWrap(True)
        self.review_list.setAlternatingRowColors(True)
        self.review_list.hide()
        layout.addWidget(self.review_list, stretch=1)

        attempts_label = QLabel("Previous attempts", self)
        attempts_label.setStyleSheet("font-weight: 600;")
        layout.addWidget(attempts_label)

        self.attempts_list = QListWidget(self)
        self.attempts_list.setMaximumHeight(140)
        layout.addWidget(self.attempts_list)

        self.sign_out_button = QPushButton(SIGN_OUT_BUTTON, self)
        self.sign_out_button.clicked.connect(self.on_sign_out)
        layout.addWidget(self.sign_out_button, alignment=Qt.AlignRight)

    def show_result(self, result: QuizResult, previous_attempts: list[QuizResult]) -> None:
        self.score_label.setText(f"{result.score_percentage:.1f}%")
        self.score_label.setStyleSheet(Styles.get_score_style(score_band(result.score_percentage)))
        self.detail_label.setText(
            f"{result.total_points} of {result.max_possible_points} points  |  "
            f"{result.correct_answers} correct  |  "
            f"{result.answered_questions} of {result.total_questions} questions answered"
        )

        self.review_list.clear()
        for number, answer in enumerate(result.answers, start=1):
            item = QListWidgetItem(describe_answer(number, answer))
            if not answer.has_selection:
                item.setForeground(QColor(ColorPalette.TEXT_SECONDARY.get(Theme.LIGHT)))
            elif not answer.is_correct:
                item.setForeground(QColor(ColorPalette.ERROR.get(Theme.LIGHT)))
            self.review_list.addItem(item)

        self.set_previous_attempts(previous_attempts)
        self._set_review_visible(False)

    def set_previous_attempts(self, attempts: list[QuizResult]) -> None:
        self.attempts_list.clear()
        if not attempts:
            placeholder = QListWidgetItem(NO_PREVIOUS_ATTEMPTS)
            placeholder.setFlags(Qt.NoItemFlags)
            placeholder.setForeground(QColor(ColorPalette.TEXT_SECONDARY.get(Theme.LIGHT)))
            self.attempts_list.addItem(placeholder)
            return
        for attempt in attempts:
            self.attempts_list.addItem(QListWidgetItem(describe_attempt(attempt)))

    def _toggle_review(self) -> None:
        self._set_review_visible(not self._review_visible)

    def _set_review_visible(self, visible: bool) -> None:
        self._review_visible = visible
        self.review_list.setVisible(visible)
        self.review_button.setText(REVIEW_HIDE_BUTTON if visible else REVIEW_SHOW_BUTTON)
