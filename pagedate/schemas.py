from pydantic import BaseModel, Field
from typing import Dict, List, Optional

class ExtractDateRequest(BaseModel):
    url: str
    max_bytes: Optional[int] = Field(None, description="Byte budget for the partial download")
    timeout_ms: Optional[int] = Field(None, description="Deadline for the whole fetch in milliseconds")
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra request headers")

class ExtractDatesRequest(BaseModel):
    urls: List[str]
    max_bytes: Optional[int] = None
    timeout_ms: Optional[int] = None

class UrlRequest(BaseModel):
    url: str

class DateResult(BaseModel):
    url: str
    date: Optional[str] = Field(None, description="UTC ISO 8601 timestamp, e.g. 2024-01-20T00:00:00.000Z")
    found: bool

class ExtractDatesResponse(BaseModel):
    results: List[DateResult]
