"""
Output renderers.

One RenderBackend per export format; ``build_backends`` returns the
registry the export coordinator selects from.
"""

from __future__ import annotations

from ..config import ExportConfig
from .base import RenderBackend, make_filename
from .docx_renderer import DocxRenderer
from .html_renderer import HtmlRenderer
from .pdf_renderer import PdfRenderer


def build_backends(cfg: ExportConfig) -> dict[str, RenderBackend]:
    """Format name -> backend for every supported format."""
    backends: list[RenderBackend] = [
        DocxRenderer(),
        PdfRenderer(browser_args=cfg.pdf_browser_args),
        HtmlRenderer(),
    ]
    return {backend.format: backend for backend in backends}


__all__ = [
    "RenderBackend",
    "DocxRenderer",
    "HtmlRenderer",
    "PdfRenderer",
    "build_backends",
    "make_filename",
]
