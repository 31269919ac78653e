import codecs
import logging
import re
from typing import Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"

_CHARSET_RE = re.compile(r"charset=[\"']?([\w-]+)", re.IGNORECASE)

def charset_from_content_type(content_type: Optional[str]) -> str:
    """
    Pick the charset declared in a Content-Type header value.
    Examples: 'text/html; charset=gbk' -> 'gbk', 'text/html' -> 'utf-8'
    """
    if not content_type:
        return DEFAULT_CHARSET

    match = _CHARSET_RE.search(content_type)
    if match:
        return match.group(1)

    return DEFAULT_CHARSET

def incremental_decoder(charset: str) -> codecs.IncrementalDecoder:
    """
    Build a decoder that keeps partial multi-byte sequences between chunks.
    Unknown labels and codecs that are not text encodings (base64, zlib,
    rot13, ...) fall back to utf-8.
    """
    try:
        codec = codecs.lookup(charset)
    except LookupError:
        logger.info("Unknown charset %r, decoding as %s", charset, DEFAULT_CHARSET)
        codec = codecs.lookup(DEFAULT_CHARSET)

    if not codec._is_text_encoding:
        logger.info("Charset %r is not a text encoding, decoding as %s", charset, DEFAULT_CHARSET)
        codec = codecs.lookup(DEFAULT_CHARSET)

    decoder = codec.incrementaldecoder(errors="replace")
    try:
        decoder.decode(b"")
    except UnicodeError:
        # "undefined" refuses every input
        logger.info("Charset %r cannot decode, decoding as %s", charset, DEFAULT_CHARSET)
        decoder = codecs.getincrementaldecoder(DEFAULT_CHARSET)(errors="replace")
    return decoder

def build_request_headers(user_agent: str, extra: Optional[Mapping[str, str]] = None) -> httpx.Headers:
    """Default user agent first, caller headers win on conflicts (case-insensitive)."""
    headers = httpx.Headers({"User-Agent": user_agent})
    if extra:
        headers.update(extra)
    return headers
