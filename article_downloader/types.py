"""
Core data types for the article downloader.

- SourceDocument: Raw HTML fetched from an address
- ExtractedArticle: Title and paragraphs found in a SourceDocument
- ExportRequest: What a client asks to have rendered
- ExportedFile: A rendered file waiting to be delivered
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import re
from typing import Any

from .errors import ValidationError

PARAGRAPH_SEPARATOR = "\n\n"

_BLANK_LINE_RE = re.compile(r"\n\s*\n")


def join_paragraphs(paragraphs: list[str]) -> str:
    """Join paragraphs into the canonical blank-line separated string."""
    return PARAGRAPH_SEPARATOR.join(paragraphs)


def split_paragraphs(content: str) -> list[str]:
    """Split content on blank lines, dropping whitespace-only blocks."""
    blocks = _BLANK_LINE_RE.split(content.replace("\r\n", "\n"))
    return [block.strip() for block in blocks if block.strip()]


@dataclass
class SourceDocument:
    """Raw HTML of a fetched page.

    Attributes:
        url: The address that was requested
        html: The response body decoded as text
        status_code: HTTP status code of the final response
        encoding: Encoding used to decode the body
        final_url: Address after following redirects
    """
    url: str
    html: str
    status_code: int = 200
    encoding: str | None = None
    final_url: str | None = None


@dataclass
class ExtractedArticle:
    """Article title and body found in a page.

    Attributes:
        title: Resolved title, never empty
        paragraphs: Body paragraphs in document order, never empty
        url: The address the article was fetched from
    """
    title: str
    paragraphs: list[str]
    url: str

    @property
    def content(self) -> str:
        return join_paragraphs(self.paragraphs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "url": self.url,
            "paragraphs": list(self.paragraphs),
        }


@dataclass
class ExportRequest:
    """A request to render an article into a downloadable file.

    Attributes:
        title: Document title
        paragraphs: Body paragraphs
        format: Requested format name; unknown names render as HTML
    """
    title: str
    paragraphs: list[str] = field(default_factory=list)
    format: str = "html"

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ExportRequest":
        """Build a request from a JSON body.

        ``content`` may be a blank-line separated string or a list of
        paragraph strings.

        Raises:
            ValidationError: If title, content or format is missing or empty
        """
        title = payload.get("title")
        content = payload.get("content")
        fmt = payload.get("format")
        if not title or not content or not fmt:
            raise ValidationError("title, content and format are required")
        if not isinstance(title, str) or not isinstance(fmt, str) or not title.strip():
            raise ValidationError("title and format must be non-empty strings")

        if isinstance(content, str):
            paragraphs = split_paragraphs(content)
        elif isinstance(content, list) and all(isinstance(item, str) for item in content):
            paragraphs = [item.strip() for item in content if item.strip()]
        else:
            raise ValidationError("content must be a string or a list of strings")
        if not paragraphs:
            raise ValidationError("content has no paragraphs")

        return cls(title=title.strip(), paragraphs=paragraphs, format=fmt.strip().lower())


@dataclass
class ExportedFile:
    """A file produced by a renderer.

    Attributes:
        filename: Name offered to the client for download
        filepath: Absolute path on transient storage
        media_type: MIME type of the file
    """
    filename: str
    filepath: Path
    media_type: str = "application/octet-stream"
