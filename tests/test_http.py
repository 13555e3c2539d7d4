from __future__ import annotations

from typing import AsyncIterator

import httpx
import pytest

from revlookup.net.http import (
    DEFAULT_USER_AGENT,
    HttpClientConfig,
    HttpStatusError,
    NetworkError,
    build_async_client,
    client_user_agent,
    fetch,
    merge_headers,
)


class _TrackingStream(httpx.AsyncByteStream):
    def __init__(self, chunks: list[bytes], *, fail: bool = False) -> None:
        self._chunks = chunks
        self._fail = fail
        self.closed = 0

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            yield chunk
        if self._fail:
            raise httpx.ReadError("connection reset")

    async def aclose(self) -> None:
        self.closed += 1


def test_merge_headers_caller_wins() -> None:
    merged = merge_headers({"user-agent": "custom/1.0", "Accept": "text/html"})
    assert merged["User-Agent"] == "custom/1.0"
    assert merged["accept"] == "text/html"
    assert merge_headers(None)["User-Agent"] == DEFAULT_USER_AGENT


@pytest.mark.asyncio
async def test_fetch_sends_default_user_agent_and_returns_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="line one\nline two\n")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        body = await fetch(client, "https://example.invalid/phone/1")

    assert body == "line one\nline two\n"
    assert len(seen) == 1
    assert seen[0].headers["User-Agent"] == DEFAULT_USER_AGENT
    assert seen[0].method == "GET"


@pytest.mark.asyncio
async def test_fetch_caller_headers_override_default() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="ok")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        await fetch(client, "https://example.invalid/", {"User-Agent": "caller/2.0", "X-Extra": "1"})

    assert seen[0].headers["User-Agent"] == "caller/2.0"
    assert seen[0].headers["X-Extra"] == "1"


@pytest.mark.asyncio
async def test_fetch_non_2xx_raises_and_closes_response() -> None:
    stream = _TrackingStream([b"not found"])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, stream=stream)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(HttpStatusError) as excinfo:
            await fetch(client, "https://example.invalid/missing")

    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "https://example.invalid/missing"
    assert stream.closed == 1


@pytest.mark.asyncio
async def test_fetch_read_failure_raises_network_error_and_closes_response() -> None:
    stream = _TrackingStream([b"<html>partial"], fail=True)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=stream)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError):
            await fetch(client, "https://example.invalid/")

    assert stream.closed == 1


@pytest.mark.asyncio
async def test_fetch_connect_error_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError):
            await fetch(client, "https://example.invalid/")


@pytest.mark.asyncio
async def test_fetch_timeout_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError):
            await fetch(client, "https://example.invalid/")


@pytest.mark.asyncio
async def test_build_async_client_applies_timeout() -> None:
    async with build_async_client(HttpClientConfig(timeout_seconds=3.5)) as client:
        assert client.timeout.read == 3.5
        assert client.follow_redirects is True


@pytest.mark.asyncio
async def test_build_async_client_sends_configured_user_agent() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["User-Agent"])
        return httpx.Response(200, text="ok")

    config = HttpClientConfig(user_agent="custom-agent/1.0")
    async with build_async_client(config, transport=httpx.MockTransport(handler)) as client:
        assert client_user_agent(client) == "custom-agent/1.0"
        await fetch(client, "https://example.invalid/")
        await fetch(client, "https://example.invalid/", {"User-Agent": "caller/2.0"})
        await fetch(client, "https://example.invalid/", user_agent="explicit/3.0")

    assert seen == ["custom-agent/1.0", "caller/2.0", "explicit/3.0"]


@pytest.mark.asyncio
async def test_client_user_agent_treats_httpx_default_as_unset() -> None:
    async with httpx.AsyncClient() as client:
        assert client.headers["User-Agent"].startswith("python-httpx/")
        assert client_user_agent(client) == DEFAULT_USER_AGENT
