"""Blocking overlay shown while the student is outside fullscreen."""

from __future__ import annotations

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import QFrame, QLabel, QPushButton, QVBoxLayout, QWidget

from quiz_portal.constants.ui_constants import FULLSCREEN_EXIT_MESSAGE, FULLSCREEN_RETURN_BUTTON
from quiz_portal.styling.styles import Styles


class FullscreenOverlay(QFrame):
    """Covers the whole window and counts down until the quiz is submitted."""

    def __init__(self, on_return: callable, parent: QWidget) -> None:
        super().__init__(parent)
        self.on_return = on_return
        self.setObjectName("fullscreenOverlay")
        self.setStyleSheet(Styles.get_overlay_style())

        self._build_ui()
        parent.installEventFilter(self)
        self.hide()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setAlignment(Qt.AlignCenter)
        self.setLayout(layout)

        title = QLabel("Fullscreen Required", self)
        title.setStyleSheet("font-size: 22pt; font-weight: 600;")
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)

        message = QLabel(FULLSCREEN_EXIT_MESSAGE, self)
        message.setWordWrap(True)
        message.setAlignment(Qt.AlignCenter)
        layout.addWidget(message)

        self.countdown_label = QLabel("", self)
        self.countdown_label.setStyleSheet("font-size: 28pt; font-weight: bold;")
        self.countdown_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.countdown_label)

        self.return_button = QPushButton(FULLSCREEN_RETURN_BUTTON, self)
        self.return_button.setStyleSheet(Styles.get_primary_button_style())
        self.return_button.clicked.connect(self.on_return)
        layout.addWidget(self.return_button, alignment=Qt.AlignCenter)

    def set_countdown(self, seconds: int) -> None:
        self.countdown_label.setText(f"Auto-submit in {seconds} seconds")

    def show_overlay(self) -> None:
        self.setGeometry(self.parentWidget().rect())
        self.raise_()
        self.show()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if watched is self.parentWidget() and event.type() == QEvent.Resize:
            self.setGeometry(self.parentWidget().rect())
        return super().eventFilter(watched, event)
