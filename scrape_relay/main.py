import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from scrape_relay.api.routes import request_validation_handler, router
from scrape_relay.core.config import settings
from scrape_relay.core.log import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Reports the proxy override on startup so deployments can confirm it.
    """
    logger.info("Starting Scrape Relay...")
    if settings.SCRAPE_PROXY and settings.SCRAPE_PROXY.strip():
        logger.info("Proxy override active (SCRAPE_PROXY), request proxy fields will be ignored")

    yield

    logger.info("Shutting down Scrape Relay...")

app = FastAPI(
    title="Scrape Relay",
    description="Fetches a URL server-side, optionally through a SOCKS5 proxy, and relays the body as JSON",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(router)
app.add_exception_handler(RequestValidationError, request_validation_handler)

def run() -> None:
    logger.info(f"Starting server on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())

if __name__ == "__main__":
    run()
