import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from pagedate.api.routes import router
from pagedate.core.config import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Logging is configured here, never on library import.
    """
    # Startup
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Page Date Extractor (max_bytes=%d)", settings.MAX_BYTES)

    yield

    # Shutdown
    logger.info("Shutting down Page Date Extractor")

app = FastAPI(
    title="Page Date Extractor",
    description="API for finding publication dates of web pages from a partial download",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routes
app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "Page Date Extractor",
        "version": "1.0.0",
        "endpoints": {
            "extract_date": "POST /extract-date",
            "extract_dates": "POST /extract-dates",
            "last_modified": "POST /last-modified",
            "debug_parse": "POST /debug-parse",
            "health": "GET /health"
        }
    }
