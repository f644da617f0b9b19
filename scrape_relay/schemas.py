from pydantic import BaseModel, Field
from typing import Optional

U64_MAX = 2**64 - 1

class ScrapeRequest(BaseModel):
    url: str
    proxy: Optional[str] = Field(None, description="Proxy URI, e.g. socks5://127.0.0.1:9050")
    timeout_seconds: Optional[int] = Field(None, ge=0, le=U64_MAX, description="Request timeout in seconds")

class ScrapeResponse(BaseModel):
    content: Optional[str] = Field(None, description="Fetched body text, present on success")
    error: Optional[str] = Field(None, description="Failure description, present on error")

    def to_json(self) -> dict:
        """Envelope with absent fields omitted rather than sent as null"""
        return self.model_dump(exclude_none=True)
