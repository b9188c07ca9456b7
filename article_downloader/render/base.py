"""
Shared renderer contract.

Every output format implements RenderBackend. The base class owns the
parts common to all formats: skipping blank paragraphs, naming the
output file, wrapping failures in RenderError and removing a partially
written file so it can never be delivered.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
import time

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..errors import RenderError
from ..logging_utils import get_logger, log_event
from ..types import ExportedFile

logger = get_logger("render")

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


@lru_cache(maxsize=1)
def template_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )


def render_template(name: str, title: str, paragraphs: list[str]) -> str:
    """Render an HTML template; title and paragraphs are always escaped."""
    return template_env().get_template(name).render(title=title, paragraphs=paragraphs)


def make_filename(extension: str) -> str:
    """Time-derived file name such as ``article_1700000000000.pdf``."""
    return f"article_{int(time.time() * 1000)}.{extension}"


def discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        log_event(logger, "discard_failed", path=str(path), error=str(exc))


class RenderBackend(ABC):
    """Turns a title and paragraphs into a file on transient storage.

    Attributes:
        format: Format name used to select this backend
        extension: File extension of produced files
        media_type: MIME type of produced files
    """

    format: str = ""
    extension: str = ""
    media_type: str = "application/octet-stream"

    async def render(self, title: str, paragraphs: list[str], storage_dir: Path) -> ExportedFile:
        """Render into ``storage_dir``.

        Raises:
            RenderError: If the underlying library fails; no file is left behind
        """
        blocks = [p.strip() for p in paragraphs if p.strip()]
        filename = make_filename(self.extension)
        filepath = (storage_dir / filename).resolve()
        try:
            await self._write(title, blocks, filepath)
            log_event(
                logger,
                "rendered",
                output_format=self.format,
                path=str(filepath),
                size=filepath.stat().st_size,
            )
        except RenderError:
            discard(filepath)
            raise
        except Exception as exc:  # noqa: BLE001
            discard(filepath)
            raise RenderError(f"failed to create {self.format.upper()}: {exc}", exc) from exc

        return ExportedFile(filename=filename, filepath=filepath, media_type=self.media_type)

    @abstractmethod
    async def _write(self, title: str, paragraphs: list[str], path: Path) -> None:
        raise NotImplementedError
