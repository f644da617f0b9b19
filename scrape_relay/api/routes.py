import logging

from fastapi import APIRouter, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from scrape_relay.fetch import relay
from scrape_relay.schemas import ScrapeRequest, ScrapeResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/scrape", response_model=ScrapeResponse, response_model_exclude_none=True)
async def scrape_url(request: ScrapeRequest):
    """
    Fetch a URL server-side and relay its body.

    Returns {"content": ...} on success or {"error": ...} on failure.
    Upstream non-2xx statuses are passed through as the response status.
    """
    outcome = await relay.scrape(request)
    return JSONResponse(status_code=outcome.status_code, content=outcome.response.to_json())

def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get the same error envelope as relay failures"""
    detail = _format_validation_errors(exc)
    logger.error(f"Rejected request to {request.url.path}: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ScrapeResponse(error=f"Invalid request body: {detail}").to_json(),
    )
