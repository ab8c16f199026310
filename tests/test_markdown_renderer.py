from __future__ import annotations

from trivia_app.core.markdown_renderer import MarkdownRenderer


def test_render_fragment() -> None:
    renderer = MarkdownRenderer()
    assert renderer.render_fragment("**Jonah** 1:17") == "<p><strong>Jonah</strong> 1:17</p>\n"
    assert renderer.render_fragment("   ") == "<p><em>No content provided.</em></p>"


def test_raw_html_is_escaped() -> None:
    html = MarkdownRenderer().render_fragment("<script>alert(1)</script>")
    assert "<script>" not in html

