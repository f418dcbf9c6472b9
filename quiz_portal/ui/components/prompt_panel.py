"""Component asking the student to enter fullscreen before the quiz starts."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from quiz_portal.constants.ui_constants import (
    FULLSCREEN_ENTER_BUTTON,
    FULLSCREEN_PROMPT_MESSAGE,
    FULLSCREEN_PROMPT_TITLE,
    FULLSCREEN_SKIP_BUTTON,
)
from quiz_portal.styling.styles import Styles


class FullscreenPromptPanel(QWidget):
    """Explains the fullscreen rules and offers to begin the quiz."""

    def __init__(
        self,
        grace_seconds: int,
        on_enter_fullscreen: callable,
        on_skip: callable,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.grace_seconds = grace_seconds
        self.on_enter_fullscreen = on_enter_fullscreen
        self.on_skip = on_skip

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setAlignment(Qt.AlignCenter)
        self.setLayout(layout)

        title = QLabel(FULLSCREEN_PROMPT_TITLE, self)
        title.setStyleSheet(Styles.get_title_style())
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)

        self.count_label = QLabel("", self)
        self.count_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.count_label)

        message = QLabel(FULLSCREEN_PROMPT_MESSAGE.format(seconds=self.grace_seconds), self)
        message.setWordWrap(True)
        message.setAlignment(Qt.AlignCenter)
        layout.addWidget(message)

        buttons = QHBoxLayout()
        self.enter_button = QPushButton(FULLSCREEN_ENTER_BUTTON, self)
        self.enter_button.setStyleSheet(Styles.get_primary_button_style())
        self.enter_button.clicked.connect(self.on_enter_fullscreen)
        buttons.addWidget(self.enter_button)

        self.skip_button = QPushButton(FULLSCREEN_SKIP_BUTTON, self)
        self.skip_button.clicked.connect(self.on_skip)
        buttons.addWidget(self.skip_button)
        layout.addLayout(buttons)

    def set_question_count(self, count: int) -> None:
        if count == 1:
            self.count_label.setText("1 question is ready for you.")
        else:
            self.count_label.setText(f"{count} questions are ready for you.")
