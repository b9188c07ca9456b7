"""
Article Downloader - fetch a web page, extract its article, export it.

The HTTP API extracts the title and body paragraphs of an article page
and renders them as DOCX, PDF or HTML downloads.

Main entry point is the CLI via `article-downloader serve`.

Example:
    $ article-downloader serve --port 5000
    $ article-downloader extract https://example.com/post -f pdf
"""

__all__ = [
    "__version__",
    "AppConfig",
    "ExportCoordinator",
    "ExtractedArticle",
    "extract_article",
    "fetch_html",
    "load_config",
]
__version__ = "0.1.0"

from .config import AppConfig, load_config
from .export import ExportCoordinator
from .extract.extractor import extract_article
from .fetch.fetcher import fetch_html
from .types import ExtractedArticle
