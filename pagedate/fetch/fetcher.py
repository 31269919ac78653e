import asyncio
import logging
from typing import Mapping, Optional

import httpx

from pagedate.core.config import settings
from pagedate.fetch.base import FetchOutcome
from pagedate.fetch.utils import (
    build_request_headers,
    charset_from_content_type,
    incremental_decoder,
)

logger = logging.getLogger(__name__)

_NO_BODY_STATUSES = (204, 205)


class _PartialBody:
    """Decoded text received so far; survives a cancelled transfer."""

    def __init__(self):
        self.parts: list[str] = []
        self.received = 0
        self.response: Optional[httpx.Response] = None

    @property
    def text(self) -> str:
        return "".join(self.parts)


async def fetch_partial(
    url: str,
    max_bytes: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    headers: Optional[Mapping[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[FetchOutcome]:
    """
    Download at most roughly `max_bytes` of a page and decode it.

    The body is decoded with the charset from the Content-Type header using an
    incremental decoder, and the transfer is dropped as soon as the received
    byte count reaches the budget. Timeouts and transport errors return whatever
    was decoded before the failure, or None when nothing arrived.

    Args:
        url: Page to fetch
        max_bytes: Byte budget (defaults to settings.MAX_BYTES)
        timeout_ms: Deadline for the whole transfer (defaults to settings.FETCH_TIMEOUT_MS)
        headers: Extra request headers, merged over the default user agent
        client: Shared AsyncClient; when omitted a private one is opened and closed here

    Returns:
        FetchOutcome with the decoded prefix and response headers, or None
    """
    if max_bytes is None:
        max_bytes = settings.MAX_BYTES
    if max_bytes < 0:
        raise ValueError(f"max_bytes must be non-negative, got {max_bytes}")
    if timeout_ms is None:
        timeout_ms = settings.FETCH_TIMEOUT_MS

    request_headers = build_request_headers(settings.USER_AGENT, headers)
    body = _PartialBody()

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(follow_redirects=True)

    try:
        return await asyncio.wait_for(
            _stream_prefix(client, url, max_bytes, timeout_ms, request_headers, body),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError:
        logger.debug("Timeout after %sms while fetching %s", timeout_ms, url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug("Transport error while fetching %s: %s", url, e)
    finally:
        if owns_client:
            await client.aclose()

    content = body.text
    if content and body.response is not None:
        logger.debug("Returning %d partial characters for %s", len(content), url)
        return FetchOutcome(
            url=url,
            status_code=body.response.status_code,
            content=content,
            headers=body.response.headers,
        )
    return None


async def _stream_prefix(
    client: httpx.AsyncClient,
    url: str,
    max_bytes: int,
    timeout_ms: int,
    request_headers: httpx.Headers,
    body: _PartialBody,
) -> Optional[FetchOutcome]:
    async with client.stream(
        "GET",
        url,
        headers=request_headers,
        timeout=timeout_ms / 1000,
        follow_redirects=True,
    ) as response:
        body.response = response

        if not response.is_success or response.status_code in _NO_BODY_STATUSES:
            logger.debug("HTTP %s for %s, no usable body", response.status_code, url)
            return None

        charset = charset_from_content_type(response.headers.get("content-type"))
        decoder = incremental_decoder(charset)

        async for chunk in response.aiter_bytes():
            body.received += len(chunk)
            body.parts.append(decoder.decode(chunk))

            if body.received >= max_bytes:
                logger.debug("Byte budget of %d reached for %s", max_bytes, url)
                break
        else:
            # Whole body fit in the budget; flush any dangling bytes.
            body.parts.append(decoder.decode(b"", final=True))

        return FetchOutcome(
            url=url,
            status_code=response.status_code,
            content=body.text,
            headers=response.headers,
        )


async def fetch_headers(
    url: str,
    timeout_ms: Optional[int] = None,
    headers: Optional[Mapping[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[httpx.Headers]:
    """
    Send a HEAD request and return the response headers.

    Any status counts as an answer; None only on timeout or transport failure.
    """
    if timeout_ms is None:
        timeout_ms = settings.HEAD_TIMEOUT_MS

    request_headers = build_request_headers(settings.USER_AGENT, headers)

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(follow_redirects=True)

    try:
        response = await asyncio.wait_for(
            client.head(
                url,
                headers=request_headers,
                timeout=timeout_ms / 1000,
                follow_redirects=True,
            ),
            timeout=timeout_ms / 1000,
        )
        return response.headers
    except asyncio.TimeoutError:
        logger.debug("Timeout after %sms on HEAD %s", timeout_ms, url)
        return None
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug("HEAD %s failed: %s", url, e)
        return None
    finally:
        if owns_client:
            await client.aclose()
