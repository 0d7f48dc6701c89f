"""
Fetch Tests

Tests for fetch_page against a mocked aiohttp session.
"""

import asyncio
from unittest.mock import MagicMock

import aiohttp
import pytest

from webcrawler.core.errors import FetchError
from webcrawler.workers.tasks import fetch_page


class FakeContent:
    def __init__(self, chunks: list[bytes]):
        self._chunks = chunks

    async def iter_chunked(self, size: int):
        for chunk in self._chunks:
            yield chunk


def make_response(status=200, chunks=(b"<html></html>",), headers=None, charset=None):
    response = MagicMock()
    response.status = status
    response.headers = headers or {"Content-Type": "text/html"}
    response.charset = charset
    response.content = FakeContent(list(chunks))
    return response


def make_session(response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value.__aenter__.return_value = response
    return session


@pytest.mark.asyncio
async def test_fetch_page_success():
    session = make_session(make_response(chunks=[b"<html>", b"<body>hi</body></html>"]))

    body = await fetch_page(session, "https://example.com/", timeout=5)

    assert body == "<html><body>hi</body></html>"
    call = session.get.call_args
    assert call.args[0] == "https://example.com/"
    assert call.kwargs["allow_redirects"] is True
    assert call.kwargs["timeout"].total == 5


@pytest.mark.asyncio
async def test_fetch_page_uses_response_charset():
    text = "café"
    session = make_session(
        make_response(chunks=[text.encode("latin-1")], charset="latin-1")
    )
    assert await fetch_page(session, "https://example.com/", timeout=5) == text


@pytest.mark.asyncio
async def test_fetch_page_unknown_charset_falls_back_to_utf8():
    session = make_session(make_response(chunks=[b"ok"], charset="no-such-codec"))
    assert await fetch_page(session, "https://example.com/", timeout=5) == "ok"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [301, 404, 500, 503])
async def test_fetch_page_non_success_status(status):
    session = make_session(make_response(status=status))

    with pytest.raises(FetchError) as exc_info:
        await fetch_page(session, "https://example.com/missing", timeout=5)

    assert exc_info.value.status_code == status
    assert exc_info.value.url == "https://example.com/missing"


@pytest.mark.asyncio
async def test_fetch_page_declared_too_large():
    session = make_session(
        make_response(headers={"Content-Length": str(11 * 1024 * 1024)})
    )
    with pytest.raises(FetchError, match="too large"):
        await fetch_page(session, "https://example.com/big", timeout=5)


@pytest.mark.asyncio
async def test_fetch_page_streamed_too_large():
    session = make_session(make_response(chunks=[b"x" * 60, b"x" * 60]))
    with pytest.raises(FetchError, match="exceeded"):
        await fetch_page(session, "https://example.com/big", timeout=5, max_bytes=100)


@pytest.mark.asyncio
async def test_fetch_page_bad_content_length_ignored():
    session = make_session(make_response(headers={"Content-Length": "abc"}))
    assert await fetch_page(session, "https://example.com/", timeout=5) == "<html></html>"


@pytest.mark.asyncio
async def test_fetch_page_network_error():
    session = make_session(error=aiohttp.ClientConnectionError("Connection refused"))

    with pytest.raises(FetchError) as exc_info:
        await fetch_page(session, "https://example.com/", timeout=5)

    assert exc_info.value.status_code is None
    assert "Connection refused" in exc_info.value.reason


@pytest.mark.asyncio
async def test_fetch_page_timeout():
    session = make_session(error=asyncio.TimeoutError())

    with pytest.raises(FetchError) as exc_info:
        await fetch_page(session, "https://example.com/slow", timeout=0.1)

    assert exc_info.value.reason == "TimeoutError"
