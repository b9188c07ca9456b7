from __future__ import annotations

from pathlib import Path

from .base import RenderBackend, render_template


class HtmlRenderer(RenderBackend):
    """Standalone styled HTML page; title and paragraphs are escaped."""

    format = "html"
    extension = "html"
    media_type = "text/html"

    async def _write(self, title: str, paragraphs: list[str], path: Path) -> None:
        html = render_template("article.html", title, paragraphs)
        path.write_text(html, encoding="utf-8")
