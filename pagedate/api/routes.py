from fastapi import APIRouter, HTTPException, status
from pagedate.schemas import (
    DateResult,
    ExtractDateRequest,
    ExtractDatesRequest,
    ExtractDatesResponse,
    UrlRequest,
)
from pagedate.services import extraction

router = APIRouter()

def _check_url(url: str):
    if not url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL is required"
        )

    if not url.startswith(("http://", "https://")):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL must start with http:// or https://"
        )

@router.post("/extract-date", response_model=DateResult)
async def extract_date(request: ExtractDateRequest):
    """
    Extract the publication date of a page.

    Only the first `max_bytes` of the page are downloaded. `found` is false
    when no usable date was found or the page could not be fetched.
    """
    _check_url(request.url)

    try:
        return await extraction.process_extract_request(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.post("/extract-dates", response_model=ExtractDatesResponse)
async def extract_dates(request: ExtractDatesRequest):
    """Extract dates for a list of URLs (e.g. search results) concurrently"""
    for url in request.urls:
        _check_url(url)

    try:
        return await extraction.process_batch_request(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.post("/last-modified", response_model=DateResult)
async def last_modified(request: UrlRequest):
    """Last-Modified date from a HEAD request only"""
    _check_url(request.url)
    return await extraction.process_last_modified_request(request.url)

@router.post("/debug-parse")
async def debug_parse(request: UrlRequest):
    """Debug endpoint to see the meta tags, JSON-LD and time tags found on a page"""
    _check_url(request.url)
    return await extraction.debug_parse(request.url)

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Page Date Extractor"}
