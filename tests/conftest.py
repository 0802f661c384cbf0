"""
pytest configuration and fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httphandlers.http import HTTPRequest, ResponseWriter


@pytest.fixture
def ok_handler() -> Callable[[ResponseWriter, HTTPRequest], None]:
    """Handler that always answers "ok\\n"."""
    def handler(writer: ResponseWriter, request: HTTPRequest) -> None:
        writer.write(b"ok\n")
    return handler


@pytest.fixture
def warsaw_timestamp() -> datetime:
    """26 May 1983, 03:30:45 in Warsaw (CEST, UTC+2)."""
    return datetime(1983, 5, 26, 3, 30, 45, tzinfo=timezone(timedelta(hours=2)))


@pytest.fixture
def get_request() -> HTTPRequest:
    """A client-built GET request: no request-URI, no port."""
    return HTTPRequest("GET", "http://example.com", remote_addr="192.168.100.5")


@pytest.fixture
def browser_request() -> HTTPRequest:
    """A server-side request as a browser would send it."""
    return HTTPRequest(
        "GET",
        "/index.html?lang=pl",
        headers={
            "Referer": "http://example.com/start",
            "User-Agent": "Mozilla/5.0 (X11; Linux x86_64)",
        },
        remote_addr="10.0.0.1:8080",
        request_uri="/index.html?lang=pl",
    )
