"""Component for the sign-in form."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quiz_portal.constants.ui_constants import LOGIN_BUTTON, LOGIN_TITLE
from quiz_portal.styling.styles import Styles


class LoginPanel(QWidget):
    """Collects an email and password and hands them to ``on_sign_in``."""

    def __init__(self, on_sign_in: callable, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_sign_in = on_sign_in

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setAlignment(Qt.AlignCenter)
        self.setLayout(layout)

        title = QLabel(LOGIN_TITLE, self)
        title.setStyleSheet(Styles.get_title_style())
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)

        form = QFormLayout()
        self.email_input = QLineEdit(self)
        self.email_input.setPlaceholderText("student@example.com")
        form.addRow("Email", self.email_input)

        self.password_input = QLineEdit(self)
        self.password_input.setEchoMode(QLineEdit.Password)
        self.password_input.returnPressed.connect(self._handle_submit)
        form.addRow("Password", self.password_input)
        layout.addLayout(form)

        self.error_label = QLabel("", self)
        self.error_label.setStyleSheet(Styles.get_error_label_style())
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.sign_in_button = QPushButton(LOGIN_BUTTON, self)
        self.sign_in_button.setStyleSheet(Styles.get_primary_button_style())
        self.sign_in_button.clicked.connect(self._handle_submit)
        layout.addWidget(self.sign_in_button)

    def _handle_submit(self) -> None:
        email = self.email_input.text().strip()
        password = self.password_input.text()
        if not email or not password:
            self.set_error("Enter your email and password.")
            return
        self.error_label.hide()
        self.on_sign_in(email, password)

    def set_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.show()

    def reset_state(self) -> None:
        self.password_input.clear()
        self.error_label.hide()
        self.email_input.setFocus()
