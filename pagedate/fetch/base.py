from dataclasses import dataclass

import httpx

@dataclass(frozen=True)
class FetchOutcome:
    url: str
    status_code: int
    content: str  # decoded prefix of the body, possibly cut mid-document
    headers: httpx.Headers
