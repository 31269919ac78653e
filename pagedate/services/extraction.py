import logging
from typing import Any, Dict, Optional

from pagedate.extract import date_extractor
from pagedate.extract.extractor import get_date_metadata
from pagedate.fetch import fetcher
from pagedate.parse.html_parser import parse_html
from pagedate.schemas import DateResult, ExtractDateRequest, ExtractDatesRequest, ExtractDatesResponse

logger = logging.getLogger(__name__)

def _result(url: str, date: Optional[str]) -> DateResult:
    return DateResult(url=url, date=date, found=date is not None)

async def process_extract_request(request: ExtractDateRequest) -> DateResult:
    """Single page: partial fetch -> parse -> tiered date lookup."""
    date = await date_extractor.extract_date(
        request.url,
        max_bytes=request.max_bytes,
        timeout_ms=request.timeout_ms,
        headers=request.headers or None,
    )
    return _result(request.url, date)

async def process_batch_request(request: ExtractDatesRequest) -> ExtractDatesResponse:
    dates = await date_extractor.extract_dates(
        request.urls,
        max_bytes=request.max_bytes,
        timeout_ms=request.timeout_ms,
    )
    return ExtractDatesResponse(results=[_result(url, date) for url, date in dates.items()])

async def process_last_modified_request(url: str) -> DateResult:
    date = await date_extractor.probe_last_modified(url)
    return _result(url, date)

async def debug_parse(url: str) -> Dict[str, Any]:
    """
    Show what the parser sees on a page, for working out why a date was missed.
    """
    outcome = await fetcher.fetch_partial(url)
    if outcome is None:
        return {"url": url, "fetched": False}

    document = parse_html(outcome.content)
    logger.info("Debug parse of %s: %d meta, %d JSON-LD, %d time tags",
                url, len(document.meta), len(document.json_ld), len(document.time_tags))

    return {
        "url": url,
        "fetched": True,
        "status_code": outcome.status_code,
        "content_length": len(outcome.content),
        "meta": document.meta,
        "json_ld": list(document.json_ld),
        "time_tags": [{"datetime": t.datetime, "text": t.text} for t in document.time_tags],
        "last_modified": outcome.headers.get("last-modified"),
        "date": get_date_metadata(document, outcome.headers),
    }
