from typing import Optional

import httpx

from scrape_relay.core.config import settings

PROXY_SCHEMES = ("socks5", "socks5h", "http", "https")

def resolve_proxy(request_proxy: Optional[str], override: Optional[str] = None) -> Optional[str]:
    """
    Pick the proxy for one fetch.
    A non-blank override (SCRAPE_PROXY) wins over the request's proxy field.
    """
    if override is None:
        override = settings.SCRAPE_PROXY
    if override is not None and override.strip():
        return override.strip()
    return request_proxy

def resolve_timeout(timeout_seconds: Optional[int]) -> int:
    """Requested timeout in seconds, or the configured default"""
    if timeout_seconds is None:
        return settings.DEFAULT_TIMEOUT_SECONDS
    return timeout_seconds

def parse_proxy_url(value: str) -> httpx.Proxy:
    """
    Parse a proxy URI into an httpx.Proxy.
    Raises ValueError when the scheme is unsupported, the host is missing
    or the URI itself is malformed.
    """
    try:
        proxy = httpx.Proxy(value)
    except httpx.InvalidURL as e:
        raise ValueError(str(e)) from e

    if proxy.url.scheme not in PROXY_SCHEMES:
        raise ValueError(f"Unsupported proxy scheme: {proxy.url.scheme!r}")
    if not proxy.url.host:
        raise ValueError(f"Proxy URL has no host: {value!r}")

    return proxy
