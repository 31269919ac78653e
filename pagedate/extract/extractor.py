"""
Metadata extraction over a parsed document and its response headers.

Only the "date" kind is implemented. Dates are looked up in order of
reliability:
1. JSON-LD structured data
2. meta tags (OpenGraph, article:*, Dublin Core, ...)
3. HTML5 <time> tags
4. the Last-Modified response header

The generic Date header is never used: it is the time the response was
sent, not when the content was written.
"""

import logging
from typing import Any, Mapping, Optional

from pagedate.extract.date_normalizer import normalize_date
from pagedate.fetch.base import FetchOutcome
from pagedate.parse.html_parser import ParsedDocument, parse_headers, parse_html

logger = logging.getLogger(__name__)

DATE = "date"

# Checked top-down inside every JSON-LD object
JSONLD_DATE_KEYS = ("datePublished", "dateModified", "pubDate", "publishedAt")

# Publish-time variants first, generic names next, modified-time variants last
META_DATE_NAMES = (
    "article:published_time",
    "og:published_time",
    "datepublished",
    "date",
    "pubdate",
    "publishdate",
    "dc.date.issued",
    "bt:pubdate",
    "sailthru.date",
    "article:modified_time",
    "og:updated_time",
    "modifieddate",
)


def extract_metadata_from(outcome: FetchOutcome, kind: str) -> Optional[str]:
    """
    Parse fetched content and extract one kind of metadata from it.

    Args:
        outcome: Partial fetch result (content + headers)
        kind: Metadata kind; only "date" is supported

    Returns:
        The normalized value, or None if not found or the kind is unknown
    """
    document = parse_html(outcome.content)

    if kind == DATE:
        return get_date_metadata(document, outcome.headers)

    logger.debug("Unsupported metadata kind %r", kind)
    return None


def get_date_metadata(document: ParsedDocument, headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """Walk the date sources in priority order and return the first usable date."""
    date = normalize_date(find_date_in_json_ld(document.json_ld))
    if date:
        logger.debug("Date from JSON-LD: %s", date)
        return date

    date = normalize_date(find_date_in_meta(document.meta))
    if date:
        logger.debug("Date from meta tags: %s", date)
        return date

    # Unlike the sources above, every time tag gets a chance
    for tag in document.time_tags:
        date = normalize_date(tag.datetime or tag.text)
        if date:
            logger.debug("Date from <time> tag: %s", date)
            return date

    date = normalize_date(parse_headers(headers).get("last-modified"))
    if date:
        logger.debug("Date from Last-Modified header: %s", date)
    return date


def find_date_in_meta(meta: Mapping[str, str]) -> Optional[str]:
    for name in META_DATE_NAMES:
        if meta.get(name):
            return meta[name]
    return None


def find_date_in_json_ld(blocks: Any) -> Optional[str]:
    """
    Depth-first search for the first date string in JSON-LD data.

    Lists are searched item by item; objects are checked for the known date
    keys first and then descend into an "@graph" list if there is one.
    """
    if isinstance(blocks, (list, tuple)):
        for item in blocks:
            date = find_date_in_json_ld(item)
            if date:
                return date
        return None

    if not isinstance(blocks, dict):
        return None

    for key in JSONLD_DATE_KEYS:
        if isinstance(blocks.get(key), str):
            return blocks[key]

    graph = blocks.get("@graph")
    if isinstance(graph, list):
        return find_date_in_json_ld(graph)

    return None
