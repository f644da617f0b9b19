import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import httpx
import pytest
from unittest.mock import patch
from scrape_relay.core import config

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Run every test without a proxy override and with the stock 30s default"""
    original_proxy = config.settings.SCRAPE_PROXY
    original_timeout = config.settings.DEFAULT_TIMEOUT_SECONDS

    config.settings.SCRAPE_PROXY = None
    config.settings.DEFAULT_TIMEOUT_SECONDS = 30

    yield

    config.settings.SCRAPE_PROXY = original_proxy
    config.settings.DEFAULT_TIMEOUT_SECONDS = original_timeout

class FakeUpstream:
    """
    Stands in for the relay's client factory.
    Records what the relay asked for and answers requests with `handler`.
    """

    def __init__(self):
        self.handler = lambda request: httpx.Response(200, text="")
        self.client_args = []
        self.requests = []
        self.build_client = None

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def make_client(self, proxy, timeout_seconds):
        self.client_args.append((proxy, timeout_seconds))
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self._handle),
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

@pytest.fixture
def upstream():
    fake = FakeUpstream()
    with patch("scrape_relay.fetch.relay.build_client", side_effect=fake.make_client) as mock_build:
        fake.build_client = mock_build
        yield fake

class BrokenStream(httpx.AsyncByteStream):
    """Response body that dies part way through"""

    async def __aiter__(self):
        yield b"<html>partial"
        raise httpx.ReadError("connection reset by peer")

@pytest.fixture
def broken_body():
    """Handler answering 200 with a body that fails to read"""
    return lambda request: httpx.Response(200, stream=BrokenStream())

@pytest.fixture
def no_env_proxies(monkeypatch):
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)

class SlowUpstreamHandler(BaseHTTPRequestHandler):
    """Local upstream that answers on time, late, or one byte at a time"""

    def do_GET(self):
        try:
            if self.path == "/slow-headers":
                time.sleep(3)
                self._send_body(b"too late")
            elif self.path == "/trickle":
                body = b"0123456789"
                self.send_response(200)
                self.send_header("Content-Type", "text/plain")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                for i in range(len(body)):
                    self.wfile.write(body[i:i + 1])
                    self.wfile.flush()
                    time.sleep(0.4)
            else:
                self._send_body(b"Hello relay")
        except (BrokenPipeError, ConnectionResetError):
            # relay gave up and closed the connection
            pass

    def _send_body(self, body):
        self.send_response(200)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass

@pytest.fixture
def slow_upstream(no_env_proxies):
    """Base URL of a threaded local HTTP server"""
    server = ThreadingHTTPServer(("127.0.0.1", 0), SlowUpstreamHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{server.server_address[1]}"

    server.shutdown()
    server.server_close()
