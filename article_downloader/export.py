"""
Export coordination: pick a renderer, render, deliver, clean up.

A request ends in one of three outcomes:
- SUCCESS: the file was handed to the client
- RENDER_FAILURE: the renderer failed, there is nothing to deliver
- DELIVERY_FAILURE: the file existed but sending it failed

Rendered files live in the storage directory only until delivery has
finished; deletion is then scheduled as a background task after a short
grace delay. Cleanup problems are logged and never reach the client.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable

from .config import ExportConfig
from .logging_utils import get_logger, log_event
from .render import RenderBackend, build_backends
from .types import ExportedFile, ExportRequest

logger = get_logger("export")

DEFAULT_FORMAT = "html"


class ExportOutcome(str, Enum):
    SUCCESS = "success"
    RENDER_FAILURE = "render_failure"
    DELIVERY_FAILURE = "delivery_failure"


def ensure_storage_dir(path: Path) -> Path:
    """Create the storage directory if needed; safe to call repeatedly."""
    path.mkdir(parents=True, exist_ok=True)
    return path.resolve()


def remove_file(path: Path) -> bool:
    """Best-effort delete; returns False instead of raising."""
    try:
        path.unlink()
    except OSError as exc:
        log_event(logger, "cleanup_failed", level=logging.WARNING, path=str(path), error=str(exc))
        return False
    log_event(logger, "cleanup_done", path=str(path))
    return True


class ExportCoordinator:
    """Selects a renderer by format and owns the lifetime of rendered files.

    Attributes:
        storage_dir: Directory rendered files are written to
        cleanup_delay: Seconds between the end of delivery and deletion
        backends: Format name -> renderer
    """

    def __init__(self, cfg: ExportConfig, backends: dict[str, RenderBackend] | None = None):
        self.storage_dir = ensure_storage_dir(Path(cfg.storage_dir))
        self.cleanup_delay = cfg.cleanup_delay_seconds
        self.backends = backends if backends is not None else build_backends(cfg)
        self._pending: set[asyncio.Task] = set()

    def backend_for(self, fmt: str | None) -> RenderBackend:
        """Renderer for ``fmt``; unknown formats fall back to HTML."""
        name = (fmt or "").strip().lower()
        backend = self.backends.get(name)
        if backend is None:
            log_event(logger, "unknown_format", requested=fmt, used=DEFAULT_FORMAT)
            backend = self.backends[DEFAULT_FORMAT]
        return backend

    async def render(self, request: ExportRequest) -> ExportedFile:
        """Render a request.

        Raises:
            RenderError: The RENDER_FAILURE outcome; no file exists afterwards
        """
        backend = self.backend_for(request.format)
        return await backend.render(request.title, request.paragraphs, self.storage_dir)

    async def deliver(
        self,
        exported: ExportedFile,
        send: Callable[[ExportedFile], Awaitable[None]],
    ) -> ExportOutcome:
        """Hand ``exported`` to ``send`` and schedule its deletion afterwards.

        Cleanup is scheduled whether or not sending succeeded.
        """
        try:
            await send(exported)
        except Exception as exc:  # noqa: BLE001
            log_event(logger, "delivery_failed", level=logging.ERROR, path=str(exported.filepath), error=str(exc))
            return ExportOutcome.DELIVERY_FAILURE
        finally:
            self.schedule_cleanup(exported)
        return ExportOutcome.SUCCESS

    def schedule_cleanup(self, exported: ExportedFile) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._cleanup_later(exported.filepath))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _cleanup_later(self, path: Path) -> None:
        await asyncio.sleep(self.cleanup_delay)
        remove_file(path)

    @property
    def pending_cleanups(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled cleanup to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
