# file: revlookup/net/http.py
"""
Async HTTP utilities (httpx) for lookup providers.

A lookup makes exactly one request: there are no retries here, a failure is
reported once and the caller decides what to do with it. Every request runs
with a bounded timeout so a lookup can't block a call flow indefinitely.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Mapping

import httpx

DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:26.0) Gecko/20100101 Firefox/26.0"


class FetchError(Exception):
    """Base class for failures while fetching a lookup page."""


class NetworkError(FetchError):
    """Raised when the request could not be completed (DNS, connect, timeout, read)."""


class HttpStatusError(FetchError):
    """Raised when the server answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP {status_code} for {url}")
        self.status_code = status_code
        self.url = url


@dataclass(frozen=True, slots=True)
class HttpClientConfig:
    timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True


@asynccontextmanager
async def build_async_client(
    config: HttpClientConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> AsyncIterator[httpx.AsyncClient]:
    timeout = httpx.Timeout(config.timeout_seconds)
    headers = {"User-Agent": config.user_agent}
    async with httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        follow_redirects=config.follow_redirects,
        transport=transport,
    ) as client:
        yield client


def client_user_agent(client: httpx.AsyncClient) -> str:
    """
    Return the user agent a client was configured with.

    A client built without one carries httpx's own `python-httpx/<version>`
    value; that counts as unset and yields `DEFAULT_USER_AGENT`.
    """

    ua = client.headers.get("User-Agent")
    if not ua or ua.startswith("python-httpx/"):
        return DEFAULT_USER_AGENT
    return ua


def merge_headers(
    headers: Mapping[str, str] | None, *, user_agent: str = DEFAULT_USER_AGENT
) -> httpx.Headers:
    """
    Return request headers: the default user agent first, caller values on top.

    Header names are case-insensitive, so a caller's `user-agent` replaces the
    default `User-Agent`.
    """

    merged = httpx.Headers({"User-Agent": user_agent})
    if headers:
        for key, value in headers.items():
            merged[key] = value
    return merged


async def fetch(
    client: httpx.AsyncClient,
    url: str,
    headers: Mapping[str, str] | None = None,
    *,
    user_agent: str | None = None,
) -> str:
    """
    GET `url` and return the whole response body as text.

    The user agent is `user_agent` if given, else the client's configured one
    (see `client_user_agent`). A `User-Agent` in `headers` beats both.

    The response is streamed inside a context manager so the connection goes
    back to the pool on every exit path, including when the body can't be read.

    Raises:
        NetworkError: on transport errors, timeouts and undecodable bodies.
        HttpStatusError: on any status outside 2xx.
    """

    request_headers = merge_headers(headers, user_agent=user_agent or client_user_agent(client))
    try:
        async with client.stream("GET", url, headers=request_headers) as resp:
            if not resp.is_success:
                raise HttpStatusError(resp.status_code, url)
            await resp.aread()
            return resp.text
    except httpx.RequestError as exc:
        raise NetworkError(f"{type(exc).__name__}: {exc}") from exc
