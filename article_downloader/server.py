"""
HTTP API (aiohttp).

Routes:
- POST /api/extract-article: fetch a page and return its extracted article
- POST /api/download-article: render an article and send it as a file
- GET  /api/test: liveness probe
- GET  /: landing page

Every response carries permissive CORS headers. Files under the
configured static directory are served under /static when it exists.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Any

from aiohttp import hdrs, web

from .config import AppConfig
from .errors import ExtractionError, FetchError, RenderError, ValidationError
from .export import ExportCoordinator, ExportOutcome
from .extract.extractor import extract_article
from .fetch.fetcher import fetch_html
from .logging_utils import get_logger, log_event
from .types import ExportedFile, ExportRequest

logger = get_logger("server")

APP_CONFIG = web.AppKey("app_config", AppConfig)
COORDINATOR = web.AppKey("coordinator", ExportCoordinator)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

LANDING_HTML = "<h1>Article Downloader API</h1><p>Try POST /api/extract-article</p>"


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"success": False, "error": message}, status=status)


async def _read_json(request: web.Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError("request body must be JSON") from exc
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    return payload


async def extract_article_handler(request: web.Request) -> web.Response:
    try:
        payload = await _read_json(request)
    except ValidationError as exc:
        return _error(400, str(exc))
    url = payload.get("url")
    if not url or not isinstance(url, str) or not url.strip():
        return _error(400, "url is required")

    cfg = request.app[APP_CONFIG]
    try:
        source = await fetch_html(url.strip(), cfg.fetch)
        article = await asyncio.to_thread(extract_article, source, cfg.extract)
    except (FetchError, ExtractionError) as exc:
        log_event(logger, "extract_failed", level=logging.ERROR, url=url, error=str(exc))
        return _error(500, f"failed to extract article: {exc}")

    return web.json_response({"success": True, "data": article.to_dict()})


async def download_article_handler(request: web.Request) -> web.StreamResponse:
    try:
        payload = await _read_json(request)
        export_request = ExportRequest.from_payload(payload)
    except ValidationError as exc:
        return _error(400, str(exc))

    coordinator = request.app[COORDINATOR]
    try:
        exported = await coordinator.render(export_request)
    except RenderError as exc:
        log_event(
            logger,
            "render_failed",
            level=logging.ERROR,
            requested=export_request.format,
            outcome=ExportOutcome.RENDER_FAILURE.value,
            error=str(exc),
        )
        return _error(500, str(exc))

    response = web.FileResponse(
        exported.filepath,
        headers={
            hdrs.CONTENT_TYPE: exported.media_type,
            hdrs.CONTENT_DISPOSITION: f'attachment; filename="{exported.filename}"',
        },
    )

    async def send(_exported: ExportedFile) -> None:
        await response.prepare(request)

    outcome = await coordinator.deliver(exported, send)
    log_event(logger, "download", path=str(exported.filepath), outcome=outcome.value)
    if outcome is ExportOutcome.DELIVERY_FAILURE and not response.prepared:
        return _error(500, "failed to send file")
    return response


async def liveness_handler(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "message": "Backend is running!",
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        }
    )


async def root_handler(request: web.Request) -> web.Response:
    return web.Response(text=LANDING_HTML, content_type="text/html")


async def preflight_handler(request: web.Request) -> web.Response:
    return web.Response(status=204)


async def _add_cors_headers(request: web.Request, response: web.StreamResponse) -> None:
    response.headers.update(CORS_HEADERS)


async def _drain_cleanups(app: web.Application) -> None:
    await app[COORDINATOR].drain()


def create_app(cfg: AppConfig, coordinator: ExportCoordinator | None = None) -> web.Application:
    """Build the aiohttp application.

    The storage directory is created here, once, before any request.
    """
    app = web.Application()
    app[APP_CONFIG] = cfg
    app[COORDINATOR] = coordinator or ExportCoordinator(cfg.export)

    app.router.add_post("/api/extract-article", extract_article_handler)
    app.router.add_post("/api/download-article", download_article_handler)
    app.router.add_get("/api/test", liveness_handler)
    app.router.add_get("/", root_handler)

    static_dir = Path(cfg.server.static_dir)
    if static_dir.is_dir():
        app.router.add_static("/static", static_dir)

    app.router.add_route("OPTIONS", "/{tail:.*}", preflight_handler)

    app.on_response_prepare.append(_add_cors_headers)
    app.on_cleanup.append(_drain_cleanups)
    return app


def run_server(cfg: AppConfig) -> None:
    app = create_app(cfg)
    log_event(logger, "server_start", host=cfg.server.host, port=cfg.server.port)
    web.run_app(app, host=cfg.server.host, port=cfg.server.port, print=None)
