"""
PDF rendering through headless Chromium (Playwright async API).

A browser is launched for every render and closed on every exit path,
so a failed render never leaves a Chromium process behind.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import Any, AsyncIterator, Callable

from playwright.async_api import async_playwright

from ..errors import RenderError
from ..logging_utils import get_logger, log_event
from .base import RenderBackend, render_template

logger = get_logger("render.pdf")

PDF_MARGIN = {"top": "40px", "bottom": "40px", "left": "30px", "right": "30px"}


@asynccontextmanager
async def chromium() -> AsyncIterator[Any]:
    """Yield Playwright's Chromium browser type for the lifetime of a driver."""
    async with async_playwright() as p:
        yield p.chromium


class PdfRenderer(RenderBackend):
    """A4 PDF with a centered title and justified paragraphs.

    Args:
        browser_args: Extra Chromium launch arguments
        browser_type: Async context manager factory yielding an object with
            an async ``launch(**kwargs)`` returning a browser; defaults to
            Playwright Chromium
    """

    format = "pdf"
    extension = "pdf"
    media_type = "application/pdf"

    def __init__(
        self,
        browser_args: list[str] | None = None,
        browser_type: Callable[[], Any] | None = None,
    ):
        self._browser_args = list(browser_args) if browser_args is not None else ["--no-sandbox"]
        self._browser_type = browser_type or chromium

    async def _write(self, title: str, paragraphs: list[str], path: Path) -> None:
        html = render_template("article_pdf.html", title, paragraphs)
        async with self._browser_type() as browser_type:
            try:
                browser = await browser_type.launch(headless=True, args=self._browser_args)
            except Exception as exc:  # noqa: BLE001
                raise RenderError(f"failed to launch browser: {exc}", exc) from exc
            try:
                await self._print(browser, html, path)
            except Exception:
                await _close_after_failure(browser)
                raise
            await browser.close()
        log_event(logger, "pdf_created", path=str(path), size=path.stat().st_size)

    async def _print(self, browser: Any, html: str, path: Path) -> None:
        page = await browser.new_page()
        await page.set_content(html, wait_until="load")
        await page.pdf(
            path=str(path),
            format="A4",
            print_background=True,
            margin=PDF_MARGIN,
        )


async def _close_after_failure(browser: Any) -> None:
    """Close ``browser`` while another error is propagating; a close failure is only logged."""
    try:
        await browser.close()
    except Exception as exc:  # noqa: BLE001
        log_event(logger, "browser_close_failed", level=logging.WARNING, error=str(exc))
