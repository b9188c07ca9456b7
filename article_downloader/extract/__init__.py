"""
Article extraction.

This package parses HTML into a document tree and runs the
title/paragraph heuristic over it.
"""

from .extractor import extract_article, extract_from_tree, resolve_paragraphs, resolve_title
from .tree import DocumentNode, NodeQuery, SoupNode, parse_html

__all__ = [
    "extract_article",
    "extract_from_tree",
    "resolve_paragraphs",
    "resolve_title",
    "DocumentNode",
    "NodeQuery",
    "SoupNode",
    "parse_html",
]
