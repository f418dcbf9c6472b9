"""Component showing the active question, its options and the countdown."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QImage, QTextDocument
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from quiz_portal.constants.quiz_constants import OPTION_COUNT
from quiz_portal.constants.ui_constants import (
    IMAGE_UNAVAILABLE_MESSAGE,
    NEXT_QUESTION_BUTTON,
    QUESTION_COUNTER_TEMPLATE,
    SUBMIT_QUIZ_BUTTON,
)
from quiz_portal.client.image_fetcher import ImageFetcher
from quiz_portal.core.errors import DataUnavailable
from quiz_portal.core.markdown_renderer import renderer
from quiz_portal.core.services.quiz_runner import QuizRunner
from quiz_portal.styling.styles import Styles

logger = logging.getLogger(__name__)


class _QuestionBrowser(QTextBrowser):
    """Text browser that serves downloaded question images as document resources."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._images: dict[str, QImage] = {}

    def set_image(self, url: str, image: QImage) -> None:
        self._images = {QUrl(url).toString(): image}

    def clear_images(self) -> None:
        self._images = {}

    def loadResource(self, resource_type: int, name: QUrl):  # noqa: N802 (Qt API)
        image = self._images.get(name.toString())
        if resource_type == QTextDocument.ImageResource and image is not None:
            return image
        return super().loadResource(resource_type, name)


class QuestionPanel(QWidget):
    """Renders the runner's current question; all answering goes through the runner."""

    def __init__(
        self,
        on_next: callable,
        runner: QuizRunner | None = None,
        image_fetcher: ImageFetcher | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_next = on_next
        self.runner = runner
        self.image_fetcher = image_fetcher or ImageFetcher()
        self._rendered_question_id: str | None = None
        self.font_point_size = 16

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header = QHBoxLayout()
        self.counter_label = QLabel("", self)
        header.addWidget(self.counter_label)
        header.addStretch(1)
        self.timer_label = QLabel("", self)
        self.timer_label.setAlignment(Qt.AlignCenter)
        header.addWidget(self.timer_label)
        layout.addLayout(header)

        self.progress_bar = QProgressBar(self)
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setTextVisible(False)
        layout.addWidget(self.progress_bar)

        self.question_view = _QuestionBrowser(self)
        self.question_view.setOpenExternalLinks(False)
        self.question_view.setContextMenuPolicy(Qt.NoContextMenu)
        layout.addWidget(self.question_view, stretch=1)

        self.option_group = QButtonGroup(self)
        self.option_group.setExclusive(True)
        self.option_buttons: list[QPushButton] = []
        for index in range(OPTION_COUNT):
            button = QPushButton("", self)
            button.setCheckable(True)
            self.option_group.addButton(button, index)
            self.option_buttons.append(button)
            layout.addWidget(button)
        self.option_group.idClicked.connect(self._handle_option_clicked)

        self.next_button = QPushButton(NEXT_QUESTION_BUTTON, self)
        self.next_button.setStyleSheet(Styles.get_primary_button_style())
        self.next_button.clicked.connect(self._handle_next_clicked)
        layout.addWidget(self.next_button, alignment=Qt.AlignRight)

    def set_runner(self, runner: QuizRunner | None) -> None:
        self.runner = runner
        self._rendered_question_id = None

    def refresh(self) -> None:
        runner = self.runner
        question = runner.current_question if runner is not None else None
        if question is None:
            return

        self.counter_label.setText(
            QUESTION_COUNTER_TEMPLATE.format(current=runner.current_index + 1, total=runner.total_questions)
        )
        self.progress_bar.setValue(int(runner.progress_percentage()))
        self.timer_label.setText(f"{runner.remaining_seconds}s")
        self.timer_label.setStyleSheet(Styles.get_timer_style(runner.is_time_running_out()))

        if question.id != self._rendered_question_id:
            self._rendered_question_id = question.id
            self._render_question(question.question_text, question.image_url)
            for letter_index, (button, option) in enumerate(zip(self.option_buttons, question.options)):
                button.setText(f"{chr(ord('A') + letter_index)}.  {option}")

        self.option_group.setExclusive(False)
        for index, button in enumerate(self.option_buttons):
            button.setChecked(index == runner.selected_option)
        self.option_group.setExclusive(True)

        enabled = not runner.is_submitting and not runner.timer_paused
        for button in self.option_buttons:
            button.setEnabled(enabled)
        self.next_button.setEnabled(enabled)
        self.next_button.setText(SUBMIT_QUIZ_BUTTON if runner.is_last_question() else NEXT_QUESTION_BUTTON)

    def _render_question(self, question_text: str, image_url: str | None) -> None:
        image_note = None
        self.question_view.clear_images()
        if image_url and not self._load_image_resource(image_url):
            image_url = None
            image_note = IMAGE_UNAVAILABLE_MESSAGE
        self.question_view.setHtml(
            renderer.render_question(question_text, image_url, self.font_point_size, image_note=image_note)
        )

    def _load_image_resource(self, image_url: str) -> bool:
        # QTextBrowser cannot load http(s) sources itself.
        try:
            data = self.image_fetcher.fetch(image_url)
        except DataUnavailable as exc:
            logger.warning("Question image unavailable: %s", exc)
            return False
        image = QImage.fromData(data)
        if image.isNull():
            logger.warning("Question image at %s is not a readable image", image_url)
            return False
        self.question_view.set_image(image_url, image)
        return True

    def _handle_option_clicked(self, index: int) -> None:
        if self.runner is not None and self.runner.current_question is not None:
            self.runner.select_option(index)

    def _handle_next_clicked(self) -> None:
        if self.runner is not None:
            self.on_next()
