"""
Command-line interface for the article downloader.

Uses Typer to run the HTTP API or to extract (and optionally export) a
single article from the terminal. Supports loading .env files.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from .config import AppConfig, load_config
from .errors import ArticleDownloaderError
from .export import ensure_storage_dir
from .extract.extractor import extract_article
from .fetch.fetcher import fetch_html
from .logging_utils import setup_logging
from .render import build_backends
from .server import run_server
from .types import ExportedFile, ExtractedArticle

app = typer.Typer(add_completion=False)
console = Console()


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    host: str | None = typer.Option(None, "--host", help="Interface to bind."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_dir: Path | None = typer.Option(None, "--log-dir", help="Directory for the log file."),
):
    """Run the HTTP API."""
    cfg = _load(config, log_level)
    if host:
        cfg.server.host = host
    if port:
        cfg.server.port = port
    if log_dir is not None:
        cfg.logging.file = True
    setup_logging(cfg.logging, log_dir)

    console.print(f"Serving on http://{cfg.server.host}:{cfg.server.port}")
    run_server(cfg)


@app.command()
def extract(
    url: str = typer.Argument(..., help="Address of the article page."),
    format: str | None = typer.Option(
        None, "--format", "-f", help="Also export as docx, pdf or html."
    ),
    output: Path = typer.Option(Path("out"), "--output", "-o", help="Directory for exported files."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Extract one article and optionally export it.

    Exported files are kept; only files served over HTTP are cleaned up.
    """
    cfg = _load(config, log_level)
    setup_logging(cfg.logging, None)

    try:
        article, exported = asyncio.run(_extract_and_export(url, cfg, format, output))
    except ArticleDownloaderError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    console.print(article.title, style="bold", markup=False)
    console.print(f"Source: {article.url}")
    console.print(f"Paragraphs: {len(article.paragraphs)}")
    if exported is not None:
        console.print(f"Exported: {exported.filepath}")


async def _extract_and_export(
    url: str,
    cfg: AppConfig,
    fmt: str | None,
    output: Path,
) -> tuple[ExtractedArticle, ExportedFile | None]:
    source = await fetch_html(url, cfg.fetch)
    article = extract_article(source, cfg.extract)
    if not fmt:
        return article, None

    backends = build_backends(cfg.export)
    backend = backends.get(fmt.lower(), backends["html"])
    exported = await backend.render(article.title, article.paragraphs, ensure_storage_dir(output))
    return article, exported


if __name__ == "__main__":
    app()
