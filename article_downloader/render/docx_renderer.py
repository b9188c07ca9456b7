from __future__ import annotations

import asyncio
from pathlib import Path

from docx import Document
from docx.shared import Pt

from .base import RenderBackend

TITLE_FONT_SIZE = Pt(18)


def build_document(title: str, paragraphs: list[str], path: Path) -> None:
    document = Document()
    heading = document.add_paragraph()
    run = heading.add_run(title)
    run.bold = True
    run.font.size = TITLE_FONT_SIZE
    for text in paragraphs:
        document.add_paragraph(text)
    document.save(str(path))


class DocxRenderer(RenderBackend):
    """Word document with a bold title followed by one paragraph per block."""

    format = "docx"
    extension = "docx"
    media_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    async def _write(self, title: str, paragraphs: list[str], path: Path) -> None:
        await asyncio.to_thread(build_document, title, paragraphs, path)
