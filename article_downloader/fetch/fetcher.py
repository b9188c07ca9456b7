"""
HTTP page fetching with httpx.

A single GET per address with browser-like headers, a fixed timeout and
bounded redirects. Responses below 500 are returned for extraction even
when they are 4xx, since many sites serve article markup behind
anti-bot status codes. There are no retries.
"""

from __future__ import annotations

import httpx

from ..config import FetchConfig
from ..errors import FetchError
from ..logging_utils import get_logger, log_event
from ..types import SourceDocument

ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"

logger = get_logger("fetch")


def build_headers(url: str, cfg: FetchConfig) -> dict[str, str]:
    """Request headers for fetching ``url``.

    The Referer is the target address itself.
    """
    return {
        "User-Agent": cfg.user_agent,
        "Accept": ACCEPT,
        "Accept-Language": cfg.accept_language,
        "Accept-Encoding": "gzip, deflate",
        "Referer": url,
    }


def is_acceptable_status(status_code: int) -> bool:
    return 200 <= status_code < 500


async def fetch_html(
    url: str,
    cfg: FetchConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SourceDocument:
    """Fetch raw HTML for ``url``.

    Args:
        url: The address to fetch; must be a syntactically valid URL
        cfg: Fetch settings (timeout, redirects, headers)
        transport: Optional httpx transport, used by tests

    Returns:
        SourceDocument with the decoded body and its declared encoding

    Raises:
        FetchError: On network failure, timeout, too many redirects,
            an invalid address, or a status code of 500 or above
    """
    log_event(logger, "fetch_start", url=url)
    try:
        async with httpx.AsyncClient(
            timeout=cfg.timeout_seconds,
            headers=build_headers(url, cfg),
            follow_redirects=True,
            max_redirects=cfg.max_redirects,
            trust_env=cfg.trust_env,
            transport=transport,
        ) as client:
            resp = await client.get(url)
    except httpx.TimeoutException as exc:
        raise FetchError(f"timed out after {cfg.timeout_seconds}s fetching {url}", url, exc) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(f"{type(exc).__name__}: {exc}", url, exc) from exc

    if not is_acceptable_status(resp.status_code):
        raise FetchError(f"server responded with status {resp.status_code}", url)

    log_event(
        logger,
        "fetch_done",
        url=url,
        status_code=resp.status_code,
        final_url=str(resp.url),
        chars=len(resp.text),
    )
    return SourceDocument(
        url=url,
        html=resp.text,
        status_code=resp.status_code,
        encoding=resp.encoding,
        final_url=str(resp.url),
    )
