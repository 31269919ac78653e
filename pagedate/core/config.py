import os

class Settings:
    # HTTP
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )

    # Partial fetch
    MAX_BYTES: int = int(os.getenv("MAX_BYTES", "32768"))
    FETCH_TIMEOUT_MS: int = int(os.getenv("FETCH_TIMEOUT_MS", "10000"))

    # Header probe
    HEAD_TIMEOUT_MS: int = int(os.getenv("HEAD_TIMEOUT_MS", "5000"))

    # Batch extraction
    MAX_CONCURRENCY: int = int(os.getenv("MAX_CONCURRENCY", "8"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
