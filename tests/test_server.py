"""Tests for the aiohttp API routes."""

from __future__ import annotations

import asyncio
from pathlib import Path
import threading

from aiohttp import test_utils

from article_downloader import server
from article_downloader.config import AppConfig
from article_downloader.errors import FetchError
from article_downloader.types import SourceDocument

LONG = "Paragraph one long enough to pass the forty character threshold."


def _config(tmp_path: Path) -> AppConfig:
    cfg = AppConfig()
    cfg.export.storage_dir = str(tmp_path / "temp")
    cfg.export.cleanup_delay_seconds = 0.0
    cfg.server.static_dir = str(tmp_path / "public")
    return cfg


def _run(cfg: AppConfig, scenario):
    async def _main():
        async with test_utils.TestClient(test_utils.TestServer(server.create_app(cfg))) as client:
            return await scenario(client)

    return asyncio.run(_main())


def _article_html(marker: str) -> str:
    return (
        f"<html><head><title>{marker}</title></head><body><article>"
        f"<p>{LONG} {marker}</p></article></body></html>"
    )


def test_liveness_and_landing(tmp_path):
    async def scenario(client):
        resp = await client.get("/api/test")
        body = await resp.json()
        landing = await client.get("/")
        return resp.status, body, landing.status, await landing.text(), resp.headers

    status, body, landing_status, landing_text, headers = _run(_config(tmp_path), scenario)

    assert status == 200
    assert body["message"]
    assert "T" in body["time"]
    assert landing_status == 200
    assert "Article Downloader API" in landing_text
    assert headers["Access-Control-Allow-Origin"] == "*"
    assert "Content-Type" in headers["Access-Control-Allow-Headers"]


def test_preflight_gets_cors_headers(tmp_path):
    async def scenario(client):
        resp = await client.options("/api/extract-article")
        return resp.status, resp.headers

    status, headers = _run(_config(tmp_path), scenario)

    assert status == 204
    assert headers["Access-Control-Allow-Origin"] == "*"


def test_extract_requires_url(tmp_path):
    async def scenario(client):
        missing = await client.post("/api/extract-article", json={})
        garbage = await client.post("/api/extract-article", data="not json")
        return missing.status, await missing.json(), garbage.status

    status, body, garbage_status = _run(_config(tmp_path), scenario)

    assert status == 400
    assert body["success"] is False
    assert garbage_status == 400


def test_extract_success(tmp_path, monkeypatch):
    async def fake_fetch(url, cfg, transport=None):
        return SourceDocument(url=url, html=_article_html("T"))

    monkeypatch.setattr(server, "fetch_html", fake_fetch)

    async def scenario(client):
        resp = await client.post("/api/extract-article", json={"url": "https://example.com/a"})
        return resp.status, await resp.json()

    status, body = _run(_config(tmp_path), scenario)

    assert status == 200
    assert body["success"] is True
    assert body["data"]["title"] == "T"
    assert body["data"]["url"] == "https://example.com/a"
    assert body["data"]["paragraphs"] == [f"{LONG} T"]
    assert body["data"]["content"] == f"{LONG} T"


def test_extract_failures_return_500(tmp_path, monkeypatch):
    async def fake_fetch(url, cfg, transport=None):
        if "down" in url:
            raise FetchError("server responded with status 503", url)
        return SourceDocument(url=url, html="<html><body><p>short</p></body></html>")

    monkeypatch.setattr(server, "fetch_html", fake_fetch)

    async def scenario(client):
        down = await client.post("/api/extract-article", json={"url": "https://down.example.com"})
        empty = await client.post("/api/extract-article", json={"url": "https://empty.example.com"})
        return down.status, await down.json(), empty.status, await empty.json()

    down_status, down_body, empty_status, empty_body = _run(_config(tmp_path), scenario)

    assert down_status == 500
    assert down_body["success"] is False
    assert "503" in down_body["error"]
    assert empty_status == 500
    assert "failed to extract article content" in empty_body["error"]


def test_concurrent_extracts_do_not_mix_results(tmp_path, monkeypatch):
    async def fake_fetch(url, cfg, transport=None):
        marker = url.rsplit("/", 1)[-1]
        # finish in reverse order of arrival
        await asyncio.sleep(0.01 * (10 - int(marker[1:])))
        return SourceDocument(url=url, html=_article_html(marker))

    monkeypatch.setattr(server, "fetch_html", fake_fetch)

    async def scenario(client):
        async def one(i):
            resp = await client.post("/api/extract-article", json={"url": f"https://site{i}.example.com/m{i}"})
            return i, await resp.json()

        return await asyncio.gather(*(one(i) for i in range(10)))

    results = _run(_config(tmp_path), scenario)

    for i, body in results:
        assert body["success"] is True
        assert body["data"]["title"] == f"m{i}"
        assert body["data"]["url"] == f"https://site{i}.example.com/m{i}"
        assert body["data"]["paragraphs"] == [f"{LONG} m{i}"]


def test_extraction_runs_off_the_event_loop_thread(tmp_path, monkeypatch):
    seen = {}

    async def fake_fetch(url, cfg, transport=None):
        seen["loop_thread"] = threading.get_ident()
        return SourceDocument(url=url, html=_article_html("T"))

    real_extract = server.extract_article

    def recording_extract(source, cfg):
        seen["extract_thread"] = threading.get_ident()
        return real_extract(source, cfg)

    monkeypatch.setattr(server, "fetch_html", fake_fetch)
    monkeypatch.setattr(server, "extract_article", recording_extract)

    async def scenario(client):
        resp = await client.post("/api/extract-article", json={"url": "https://example.com/a"})
        return resp.status

    assert _run(_config(tmp_path), scenario) == 200
    assert seen["extract_thread"] != seen["loop_thread"]


def test_download_requires_fields(tmp_path):
    async def scenario(client):
        resp = await client.post("/api/download-article", json={"title": "T", "content": "c"})
        return resp.status, await resp.json()

    status, body = _run(_config(tmp_path), scenario)

    assert status == 400
    assert body["success"] is False


def test_download_unknown_format_returns_html_file(tmp_path):
    cfg = _config(tmp_path)

    async def scenario(client):
        resp = await client.post(
            "/api/download-article",
            json={"title": "T <b>", "content": "First para\n\nSecond para", "format": "xyz"},
        )
        body = await resp.read()
        return resp.status, resp.headers, body

    # pending cleanups are drained when the app shuts down
    status, headers, body = _run(cfg, scenario)

    assert status == 200
    assert "attachment" in headers["Content-Disposition"]
    assert ".html" in headers["Content-Disposition"]
    assert headers["Content-Type"].startswith("text/html")
    text = body.decode("utf-8")
    assert "T &lt;b&gt;" in text
    assert "<p>First para</p>" in text
    assert "<p>Second para</p>" in text
    assert list((tmp_path / "temp").iterdir()) == []


def test_download_docx(tmp_path):
    async def scenario(client):
        resp = await client.post(
            "/api/download-article",
            json={"title": "T", "content": "Body", "format": "docx"},
        )
        body = await resp.read()
        return resp.status, resp.headers, body

    status, headers, body = _run(_config(tmp_path), scenario)

    assert status == 200
    assert ".docx" in headers["Content-Disposition"]
    assert body[:2] == b"PK"


def test_download_render_failure_returns_500(tmp_path, monkeypatch):
    from article_downloader.errors import RenderError
    from article_downloader.export import ExportCoordinator

    async def broken_render(self, request):
        raise RenderError("failed to create PDF: no chromium")

    monkeypatch.setattr(ExportCoordinator, "render", broken_render)

    async def scenario(client):
        resp = await client.post(
            "/api/download-article",
            json={"title": "T", "content": "Body", "format": "pdf"},
        )
        return resp.status, await resp.json()

    status, body = _run(_config(tmp_path), scenario)

    assert status == 500
    assert body == {"success": False, "error": "failed to create PDF: no chromium"}


def test_static_files_served_when_directory_exists(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<p>frontend</p>", encoding="utf-8")

    async def scenario(client):
        resp = await client.get("/static/index.html")
        return resp.status, await resp.text()

    status, text = _run(_config(tmp_path), scenario)

    assert status == 200
    assert "frontend" in text
