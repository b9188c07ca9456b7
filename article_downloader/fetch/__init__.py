"""
Page fetching.

This package retrieves raw HTML for an address.
"""

from .fetcher import build_headers, fetch_html

__all__ = [
    "build_headers",
    "fetch_html",
]
