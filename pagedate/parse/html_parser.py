"""
Lenient structural parsing of raw (possibly truncated) HTML.

Collects the generic structures that carry page metadata without deciding
what any of them mean:
- meta tags (name/property/itemprop -> content)
- JSON-LD script blocks, with a regex rescue for blocks that fail json.loads
- <time> tags (datetime attribute + visible text)

Nothing in here raises on broken markup; unusable fragments are dropped.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_META_TAG_RE = re.compile(r"<meta\s([^>]*)>", re.IGNORECASE)

_JSONLD_BLOCK_RE = re.compile(
    r"<script\s+[^>]*?type\s*=\s*[\"']application/ld\+json[\"'][^>]*>(.*?)</script>",
    re.DOTALL | re.IGNORECASE,
)

_TIME_TAG_RE = re.compile(r"<time\b([^>]*)>(.*?)</time>", re.DOTALL | re.IGNORECASE)

# name, optional "= value" with "double", 'single' or bare quoting
_ATTR_RE = re.compile(
    r"([a-z0-9:._-]+)(?:\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^>\s]+)))?",
    re.IGNORECASE,
)

# Date fields worth pulling out of a JSON-LD block that json.loads rejects
RESCUE_KEYS = ("datePublished", "dateModified", "pubDate", "publishedAt")

_RESCUE_PATTERNS = tuple(
    (key, re.compile(r'"' + key + r'"\s*:\s*"([^"]+)"', re.IGNORECASE))
    for key in RESCUE_KEYS
)

_META_KEY_ATTRS = ("name", "property", "itemprop")


@dataclass(frozen=True)
class TimeTag:
    datetime: Optional[str]
    text: str


@dataclass(frozen=True)
class ParsedDocument:
    meta: dict[str, str]
    json_ld: tuple[Any, ...]
    time_tags: tuple[TimeTag, ...]


def parse_html(html: str) -> ParsedDocument:
    """
    Collect meta tags, JSON-LD blocks and time tags from an HTML string.

    Args:
        html: Raw HTML, may be cut off anywhere

    Returns:
        ParsedDocument; meta keys are lowercase and later duplicates win,
        JSON-LD blocks and time tags keep document order
    """
    if not html:
        return ParsedDocument(meta={}, json_ld=(), time_tags=())

    return ParsedDocument(
        meta=_parse_meta(html),
        json_ld=tuple(_parse_json_ld(html)),
        time_tags=tuple(_parse_time_tags(html)),
    )


def _parse_meta(html: str) -> dict[str, str]:
    meta: dict[str, str] = {}
    for match in _META_TAG_RE.finditer(html):
        attrs = get_attrs(match.group(1).strip().rstrip("/"))

        key = None
        for attr in _META_KEY_ATTRS:
            if attrs.get(attr):
                key = attrs[attr]
                break

        content = attrs.get("content")
        if key and content:
            meta[key.lower()] = content
    return meta


def _parse_json_ld(html: str) -> list[Any]:
    blocks: list[Any] = []
    for match in _JSONLD_BLOCK_RE.finditer(html):
        raw = match.group(1)
        try:
            blocks.append(json.loads(raw))
        except json.JSONDecodeError:
            rescued = rescue_json_ld(raw)
            if rescued:
                logger.debug("Rescued %s from malformed JSON-LD block", sorted(rescued))
                blocks.append(rescued)
    return blocks


def _parse_time_tags(html: str) -> list[TimeTag]:
    tags: list[TimeTag] = []
    for match in _TIME_TAG_RE.finditer(html):
        attrs = get_attrs(match.group(1))
        tags.append(TimeTag(datetime=attrs.get("datetime"), text=_inner_text(match.group(2))))
    return tags


def _inner_text(markup: str) -> str:
    # Plain text needs no soup (and bs4 warns on strings that look like paths)
    if "<" not in markup and "&" not in markup:
        return markup.strip()
    return BeautifulSoup(markup, "html.parser").get_text().strip()


def rescue_json_ld(raw: str) -> Optional[dict[str, str]]:
    """
    Pull known date fields out of a JSON-LD string that is not valid JSON.
    Each key is searched independently; returns None when none of them match.
    """
    rescued: dict[str, str] = {}
    for key, pattern in _RESCUE_PATTERNS:
        match = pattern.search(raw)
        if match:
            rescued[key] = match.group(1)
    return rescued or None


def get_attrs(tag_content: str) -> dict[str, str]:
    """
    Parse the attribute part of a tag into a dict with lowercase names.
    Example: 'NAME="date" content=2024' -> {'name': 'date', 'content': '2024'}
    """
    attrs: dict[str, str] = {}
    for match in _ATTR_RE.finditer(tag_content):
        name = match.group(1).lower()
        value = next((v for v in match.group(2, 3, 4) if v is not None), "")
        attrs[name] = value
    return attrs


def parse_headers(headers: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Flatten a header collection into a plain dict keyed by lowercase name."""
    if not headers:
        return {}
    return {key.lower(): value for key, value in headers.items()}
