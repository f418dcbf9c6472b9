"""Markdown rendering for question text shown in the Qt client.

Questions may use a small markdown subset (emphasis, inline code, tables).
Raw HTML in question text is never passed through; ``QTextBrowser`` only
understands a limited HTML dialect, so the output stays close to what
CommonMark produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts markdown question text into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip() or ""
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_question(
        self,
        question_text: str,
        image_url: str | None = None,
        font_size: int = 16,
        image_note: str | None = None,
    ) -> str:
        """Render question text as a styled document body.

        ``image_url`` becomes an ``<img>`` whose source must already be
        registered as a document resource; ``image_note`` replaces it when
        the image could not be fetched.
        """

        body = self.render_fragment(question_text)
        if image_url:
            body += f'<p><img src="{escape(image_url, quote=True)}" /></p>'
        elif image_note:
            body += f"<p><em>{escape(image_note)}</em></p>"
        return f'<div style="font-size: {font_size}pt;">{body}</div>'


renderer = MarkdownRenderer()
# Shared instance; MarkdownIt is not thread-safe, so it is only used from the Qt thread.
