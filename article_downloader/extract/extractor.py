"""
Article extraction heuristic.

Turns raw HTML into a title and an ordered list of body paragraphs with a
deterministic, single-pass scan:

1. Title: first non-empty of h1, og:title, meta title, <title>, placeholder
2. Content phase 1: the first likely article container that yields a
   qualifying paragraph wins
3. Content phase 2: every paragraph in the page, if phase 1 found nothing

A paragraph qualifies when its trimmed text is longer than the configured
minimum (40 characters by default). Kept paragraphs have internal
whitespace collapsed to single spaces.
"""

from __future__ import annotations

from ..config import ExtractConfig
from ..errors import ExtractionError
from ..logging_utils import get_logger, log_event
from ..types import ExtractedArticle, SourceDocument
from .tree import DocumentNode, NodeQuery, find_all, find_first, find_outermost, parse_html

logger = get_logger("extract")

CONTENT_CANDIDATES: tuple[NodeQuery, ...] = (
    NodeQuery(tag="article"),
    NodeQuery(attr="class", contains="content"),
    NodeQuery(attr="class", contains="article"),
    NodeQuery(attr="id", contains="content"),
    NodeQuery(attr="id", contains="article"),
    NodeQuery(tag="main"),
    NodeQuery(class_token="post-content"),
    NodeQuery(class_token="entry-content"),
)

NOISE: tuple[NodeQuery, ...] = (
    NodeQuery(tag="script"),
    NodeQuery(tag="style"),
    NodeQuery(tag="nav"),
    NodeQuery(tag="footer"),
    NodeQuery(tag="header"),
    NodeQuery(tag="aside"),
    NodeQuery(class_token="ads"),
    NodeQuery(class_token="advertisement"),
)

PARAGRAPH = NodeQuery(tag="p")


def normalize_text(text: str) -> str:
    return " ".join(text.split())


def resolve_title(root: DocumentNode, placeholder: str = "Untitled") -> str:
    """Pick the page title.

    Candidates in priority order: text of the first h1, og:title meta,
    name=title meta, the <title> element. Each is trimmed before the
    emptiness check; the placeholder is returned when none is usable.
    """
    h1 = find_first(root, NodeQuery(tag="h1"))
    og_title = find_first(root, NodeQuery(tag="meta", attr="property", equals="og:title"))
    meta_title = find_first(root, NodeQuery(tag="meta", attr="name", equals="title"))
    title_el = find_first(root, NodeQuery(tag="title"))

    candidates = [
        h1.text() if h1 else None,
        og_title.attrs.get("content") if og_title else None,
        meta_title.attrs.get("content") if meta_title else None,
        title_el.text() if title_el else None,
    ]
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return placeholder


def collect_paragraphs(container: DocumentNode, min_chars: int) -> list[str]:
    """Texts of the ``p`` elements under ``container`` longer than ``min_chars``."""
    paragraphs = []
    for node in find_all(container, PARAGRAPH):
        text = node.text().strip()
        if len(text) > min_chars:
            paragraphs.append(normalize_text(text))
    return paragraphs


def strip_noise(container: DocumentNode) -> DocumentNode:
    """Return a copy of ``container`` without scripts, navigation, ads and similar."""
    cleaned = container.clone()
    for query in NOISE:
        for node in find_outermost(cleaned, query):
            node.remove()
    return cleaned


def scan_candidates(root: DocumentNode, min_chars: int) -> tuple[NodeQuery | None, list[str]]:
    """Phase 1: the first candidate container yielding qualifying paragraphs."""
    for query in CONTENT_CANDIDATES:
        matches = find_outermost(root, query)
        if not matches:
            continue
        paragraphs = []
        for container in matches:
            paragraphs.extend(collect_paragraphs(strip_noise(container), min_chars))
        if paragraphs:
            return query, paragraphs
    return None, []


def scan_document(root: DocumentNode, min_chars: int) -> list[str]:
    """Phase 2: every qualifying paragraph in the whole document."""
    return collect_paragraphs(root, min_chars)


def resolve_paragraphs(root: DocumentNode, min_chars: int = 40) -> list[str]:
    query, paragraphs = scan_candidates(root, min_chars)
    if paragraphs:
        log_event(logger, "content_container", selector=str(query), paragraphs=len(paragraphs))
        return paragraphs

    paragraphs = scan_document(root, min_chars)
    log_event(logger, "content_fallback", paragraphs=len(paragraphs))
    return paragraphs


def extract_from_tree(root: DocumentNode, url: str, cfg: ExtractConfig) -> ExtractedArticle:
    """Run the heuristic on an already parsed tree.

    Raises:
        ExtractionError: If no qualifying paragraph exists
    """
    title = resolve_title(root, cfg.placeholder_title)
    paragraphs = resolve_paragraphs(root, cfg.min_paragraph_chars)
    if not paragraphs:
        raise ExtractionError("failed to extract article content")
    return ExtractedArticle(title=title, paragraphs=paragraphs, url=url)


def extract_article(source: SourceDocument, cfg: ExtractConfig) -> ExtractedArticle:
    """Extract the article from a fetched page."""
    article = extract_from_tree(parse_html(source.html), source.url, cfg)
    log_event(logger, "extracted", url=source.url, title=article.title, paragraphs=len(article.paragraphs))
    return article
