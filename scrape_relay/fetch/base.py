from dataclasses import dataclass

from scrape_relay.schemas import ScrapeResponse

@dataclass
class FetchOutcome:
    status_code: int
    response: ScrapeResponse

    @classmethod
    def ok(cls, content: str) -> "FetchOutcome":
        return cls(status_code=200, response=ScrapeResponse(content=content))

    @classmethod
    def failed(cls, status_code: int, error: str) -> "FetchOutcome":
        return cls(status_code=status_code, response=ScrapeResponse(error=error))
