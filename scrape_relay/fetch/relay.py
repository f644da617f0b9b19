import asyncio
import logging
from typing import Optional

import httpx

from scrape_relay.fetch.base import FetchOutcome
from scrape_relay.fetch.utils import parse_proxy_url, resolve_proxy, resolve_timeout
from scrape_relay.schemas import ScrapeRequest

logger = logging.getLogger(__name__)

def build_client(proxy: Optional[httpx.Proxy], timeout_seconds: int) -> httpx.AsyncClient:
    """Build the one-shot client used for a single relayed fetch."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        proxy=proxy,
        follow_redirects=True,
    )

def status_reason(status_code: int) -> str:
    """Canonical reason phrase, e.g. 404 -> 'Not Found'"""
    return httpx.codes.get_reason_phrase(status_code) or "Unknown Status"

def _describe(exc: Exception) -> str:
    # httpcore timeouts and some transport errors carry an empty message
    return str(exc) or exc.__class__.__name__

async def scrape(request: ScrapeRequest) -> FetchOutcome:
    """
    Fetch request.url once and map the result to a status code and envelope.

    Proxy and timeout are resolved first, then a client is built for this
    call only. Every failure becomes a FetchOutcome; nothing is retried.
    """
    url = request.url
    timeout_seconds = resolve_timeout(request.timeout_seconds)
    proxy_value = resolve_proxy(request.proxy)

    proxy = None
    if proxy_value is not None:
        try:
            proxy = parse_proxy_url(proxy_value)
        except ValueError as e:
            logger.error(f"Failed to parse proxy URL '{proxy_value}': {e}")
            return FetchOutcome.failed(400, f"Invalid proxy URL: {proxy_value}")
        logger.info(f"Using proxy: {proxy.url}")

    try:
        client = build_client(proxy, timeout_seconds)
    except Exception as e:
        logger.error(f"Failed to build HTTP client: {_describe(e)}")
        return FetchOutcome.failed(500, f"Failed to initialize HTTP client: {_describe(e)}")

    logger.info(f"Attempting to scrape URL: {url} (timeout {timeout_seconds}s)")

    async with client:
        return await _fetch(client, url, timeout_seconds)

async def _fetch(client: httpx.AsyncClient, url: str, timeout_seconds: int) -> FetchOutcome:
    # httpx timeouts are per phase; the deadline bounds the whole call
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_seconds
    timed_out = f"request timed out after {timeout_seconds}s"

    try:
        response = await asyncio.wait_for(
            client.send(client.build_request("GET", url), stream=True),
            timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error(f"Request to {url} failed: {timed_out}")
        return FetchOutcome.failed(500, f"Failed to make HTTP request: {timed_out}")
    except (httpx.RequestError, httpx.InvalidURL) as e:
        logger.error(f"Request to {url} failed: {_describe(e)}")
        return FetchOutcome.failed(500, f"Failed to make HTTP request: {_describe(e)}")

    try:
        if not response.is_success:
            status = response.status_code
            reason = status_reason(status)
            logger.error(f"Failed to scrape URL {url}: Status {status} {reason}")
            return FetchOutcome.failed(status, f"HTTP request failed with status: {status} {reason}")

        try:
            await asyncio.wait_for(response.aread(), max(deadline - loop.time(), 0))
            text = response.text
        except asyncio.TimeoutError:
            logger.error(f"Failed to read response body for {url}: {timed_out}")
            return FetchOutcome.failed(500, f"Failed to read response body: {timed_out}")
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error(f"Failed to read response body for {url}: {_describe(e)}")
            return FetchOutcome.failed(500, f"Failed to read response body: {_describe(e)}")

        logger.info(f"Successfully scraped URL: {url}")
        return FetchOutcome.ok(text)
    finally:
        await response.aclose()
