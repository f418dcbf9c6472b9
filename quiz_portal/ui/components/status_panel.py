"""Component for the loading, empty, submitting and error screens."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from quiz_portal.styling.styles import Styles


class StatusPanel(QWidget):
    """A title, a message and an optional action button."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._on_action: callable | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setAlignment(Qt.AlignCenter)
        self.setLayout(layout)

        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet(Styles.get_title_style())
        self.title_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.title_label)

        self.message_label = QLabel("", self)
        self.message_label.setWordWrap(True)
        self.message_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.message_label)

        self.action_button = QPushButton("", self)
        self.action_button.setStyleSheet(Styles.get_primary_button_style())
        self.action_button.clicked.connect(self._handle_action)
        self.action_button.hide()
        layout.addWidget(self.action_button, alignment=Qt.AlignCenter)

    def set_status(
        self,
        title: str,
        message: str,
        *,
        action_text: str | None = None,
        on_action: callable | None = None,
        is_error: bool = False,
    ) -> None:
        self.title_label.setText(title)
        self.message_label.setText(message)
        self.message_label.setStyleSheet(Styles.get_error_label_style() if is_error else "")
        self._on_action = on_action
        if action_text and on_action is not None:
            self.action_button.setText(action_text)
            self.action_button.show()
        else:
            self.action_button.hide()

    def _handle_action(self) -> None:
        if self._on_action is not None:
            self._on_action()
