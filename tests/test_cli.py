from __future__ import annotations

from typer.testing import CliRunner

from article_downloader import cli
from article_downloader.errors import FetchError
from article_downloader.types import SourceDocument

HTML = (
    "<html><head><title>CLI Story</title></head><body><main>"
    "<p>A paragraph that is comfortably longer than forty characters.</p>"
    "</main></body></html>"
)


def test_extract_prints_summary_and_exports(tmp_path, monkeypatch):
    async def fake_fetch(url, cfg, transport=None):
        return SourceDocument(url=url, html=HTML)

    monkeypatch.setattr(cli, "fetch_html", fake_fetch)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(
        cli.app, ["extract", "https://example.com/story", "-f", "html", "-o", str(tmp_path / "out")]
    )

    assert result.exit_code == 0, result.output
    assert "CLI Story" in result.output
    assert "Paragraphs: 1" in result.output
    exported = list((tmp_path / "out").iterdir())
    assert len(exported) == 1
    assert exported[0].suffix == ".html"


def test_extract_reports_errors(tmp_path, monkeypatch):
    async def fake_fetch(url, cfg, transport=None):
        raise FetchError("server responded with status 502", url)

    monkeypatch.setattr(cli, "fetch_html", fake_fetch)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli.app, ["extract", "https://example.com/story"])

    assert result.exit_code == 1
    assert "502" in result.output
