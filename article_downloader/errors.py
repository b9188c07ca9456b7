"""
Exception hierarchy for the article downloader.

Core modules raise these; only the HTTP layer turns them into
structured JSON failures.
"""

from __future__ import annotations


class ArticleDownloaderError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(ArticleDownloaderError):
    """A request is missing a required field."""


class FetchError(ArticleDownloaderError):
    """Network failure, timeout, or a 5xx response while fetching a page.

    Attributes:
        url: The address that was being fetched
        cause: The underlying exception, if any
    """

    def __init__(self, message: str, url: str | None = None, cause: BaseException | None = None):
        super().__init__(message)
        self.url = url
        self.cause = cause


class ExtractionError(ArticleDownloaderError):
    """No qualifying article content was found in a page."""


class RenderError(ArticleDownloaderError):
    """A renderer failed to produce its output file."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
