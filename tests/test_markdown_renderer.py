"""Tests for question text rendering."""

from __future__ import annotations

from quiz_portal.core.markdown_renderer import MarkdownRenderer


def test_render_fragment_handles_markdown_and_escapes_html():
    renderer = MarkdownRenderer()

    html = renderer.render_fragment("Which is **not** a framework? <script>x</script>")

    assert "<strong>not</strong>" in html
    assert "<script>" not in html


def test_empty_text_renders_placeholder():
    assert "No content provided" in MarkdownRenderer().render_fragment("   ")


def test_render_question_includes_image_and_font_size():
    html = MarkdownRenderer().render_question("Look:", image_url="https://example.com/a.png?x=1&y=2", font_size=20)

    assert "font-size: 20pt" in html
    assert 'src="https://example.com/a.png?x=1&amp;y=2"' in html


def test_render_question_shows_note_when_image_is_missing():
    html = MarkdownRenderer().render_question("Look:", image_note="Image <missing>")

    assert "<img" not in html
    assert "<em>Image &lt;missing&gt;</em>" in html
