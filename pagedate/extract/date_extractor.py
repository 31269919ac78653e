import asyncio
import logging
from typing import Iterable, Mapping, Optional

import httpx

from pagedate.core.config import settings
from pagedate.extract.date_normalizer import normalize_date
from pagedate.extract.extractor import DATE, extract_metadata_from
from pagedate.fetch.fetcher import fetch_headers, fetch_partial

logger = logging.getLogger(__name__)


async def extract_date(
    url: str,
    max_bytes: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    headers: Optional[Mapping[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """
    Find the publication (or modification) date of a web page.

    Downloads only the first `max_bytes` of the page (32KB by default, which
    usually covers <head>) and checks JSON-LD, meta tags, <time> tags and the
    Last-Modified header, in that order.

    Returns:
        ISO 8601 UTC string such as "2024-01-20T12:00:00.000Z", or None.
        A negative max_bytes raises ValueError; nothing else escapes.
    """
    outcome = await fetch_partial(
        url,
        max_bytes=max_bytes,
        timeout_ms=timeout_ms,
        headers=headers,
        client=client,
    )
    if outcome is None:
        logger.info("No content fetched for %s", url)
        return None

    date = extract_metadata_from(outcome, DATE)
    logger.info("Date for %s: %s", url, date)
    return date


async def extract_dates(
    urls: Iterable[str],
    max_bytes: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    headers: Optional[Mapping[str, str]] = None,
    concurrency: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[str, Optional[str]]:
    """
    Extract dates for many URLs concurrently over one shared client.
    Duplicate URLs are fetched once; `transport` is handed to the shared client.
    """
    if max_bytes is not None and max_bytes < 0:
        raise ValueError(f"max_bytes must be non-negative, got {max_bytes}")

    unique_urls = list(dict.fromkeys(urls))
    semaphore = asyncio.Semaphore(concurrency or settings.MAX_CONCURRENCY)

    async with httpx.AsyncClient(transport=transport, follow_redirects=True) as client:

        async def _one(url: str) -> Optional[str]:
            async with semaphore:
                return await extract_date(
                    url,
                    max_bytes=max_bytes,
                    timeout_ms=timeout_ms,
                    headers=headers,
                    client=client,
                )

        dates = await asyncio.gather(*(_one(url) for url in unique_urls))

    return dict(zip(unique_urls, dates))


async def probe_last_modified(
    url: str,
    timeout_ms: Optional[int] = None,
    headers: Optional[Mapping[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """Normalized Last-Modified from a HEAD request, without downloading any body."""
    response_headers = await fetch_headers(url, timeout_ms=timeout_ms, headers=headers, client=client)
    if response_headers is None:
        return None
    return normalize_date(response_headers.get("last-modified"))
