"""HTTP client contract used by aspects, plus the default httpx implementation."""

from __future__ import annotations

import asyncio
import enum
import time
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx
import structlog

from licenseaspect.exceptions import HttpClientError

log = structlog.get_logger("licenseaspect.http")

_DEFAULT_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


class HttpMethod(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


@dataclass(frozen=True)
class RetryOptions:
    """Retry policy for a single exchange.

    ``retries`` counts additional attempts: ``retries=0`` means exactly one
    request. Delays grow by ``factor`` from ``min_timeout`` up to
    ``max_timeout`` seconds; rate-limit waits are capped at ``max_timeout`` too.
    """

    retries: int = 5
    min_timeout: float = 0.5
    max_timeout: float = 8.0
    factor: float = 2.0

    def delay(self, attempt: int) -> float:
        return min(self.min_timeout * (self.factor**attempt), self.max_timeout)


@dataclass
class HttpResponse:
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


@runtime_checkable
class HttpClient(Protocol):
    async def exchange(
        self,
        url: str,
        *,
        method: HttpMethod = HttpMethod.GET,
        headers: dict[str, str] | None = None,
        body: Any = None,
        retry: RetryOptions | None = None,
    ) -> HttpResponse: ...


@runtime_checkable
class HttpClientFactory(Protocol):
    def create(self, url: str) -> HttpClient: ...


class HttpxClient:
    """One-shot JSON/text exchanges over httpx with retry and rate-limit handling."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        default_retry: RetryOptions | None = None,
        default_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._default_retry = default_retry or RetryOptions()
        self._default_headers = dict(_DEFAULT_HEADERS if default_headers is None else default_headers)
        self._transport = transport

    async def exchange(
        self,
        url: str,
        *,
        method: HttpMethod = HttpMethod.GET,
        headers: dict[str, str] | None = None,
        body: Any = None,
        retry: RetryOptions | None = None,
    ) -> HttpResponse:
        """Send one request, retrying on 5xx, timeouts, transport errors and rate limits.

        Raises HttpClientError for any other non-2xx status, or once the
        retry budget is spent.
        """
        options = retry or self._default_retry
        attempts = max(options.retries, 0) + 1
        request_headers = {**self._default_headers, **(headers or {})}
        last_error: HttpClientError | None = None

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            for attempt in range(attempts):
                delay = options.delay(attempt)
                try:
                    resp = await client.request(
                        method.value,
                        url,
                        headers=request_headers,
                        json=body,
                    )
                except httpx.TimeoutException as exc:
                    log.warning("http.timeout", url=url, attempt=attempt + 1, attempts=attempts)
                    last_error = HttpClientError(url, reason="timeout")
                    last_error.__cause__ = exc
                except httpx.TransportError as exc:
                    log.warning(
                        "http.transport_error",
                        url=url,
                        error=str(exc),
                        attempt=attempt + 1,
                        attempts=attempts,
                    )
                    last_error = HttpClientError(url, reason=str(exc) or type(exc).__name__)
                    last_error.__cause__ = exc
                else:
                    if resp.status_code == 403 and _is_rate_limited(resp):
                        delay = min(_rate_limit_wait(resp), options.max_timeout)
                        log.warning(
                            "http.rate_limit",
                            url=url,
                            wait_seconds=delay,
                            attempt=attempt + 1,
                            attempts=attempts,
                        )
                        last_error = HttpClientError(url, status=403, reason="rate limit exceeded")
                    elif resp.status_code >= 500:
                        log.warning(
                            "http.server_error",
                            url=url,
                            status=resp.status_code,
                            attempt=attempt + 1,
                            attempts=attempts,
                        )
                        last_error = HttpClientError(url, status=resp.status_code)
                    elif resp.is_success:
                        return _to_response(url, resp)
                    else:
                        raise HttpClientError(url, status=resp.status_code)

                if attempt < attempts - 1:
                    await asyncio.sleep(delay)

        raise last_error  # type: ignore[misc]


class HttpxClientFactory:
    """Default client factory; every created client shares the same settings."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        default_retry: RetryOptions | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._default_retry = default_retry
        self._transport = transport

    def create(self, url: str) -> HttpxClient:
        return HttpxClient(
            timeout=self._timeout,
            default_retry=self._default_retry,
            transport=self._transport,
        )


def _to_response(url: str, resp: httpx.Response) -> HttpResponse:
    body: Any = None
    if resp.content:
        if "json" in resp.headers.get("Content-Type", ""):
            try:
                body = resp.json()
            except ValueError as exc:
                raise HttpClientError(url, status=resp.status_code, reason="invalid JSON body") from exc
        else:
            body = resp.text
    return HttpResponse(status=resp.status_code, headers=dict(resp.headers), body=body)


def _is_rate_limited(resp: httpx.Response) -> bool:
    remaining = resp.headers.get("X-RateLimit-Remaining")
    if remaining is not None:
        try:
            return int(remaining) == 0
        except ValueError:
            pass
    # secondary rate limits only send Retry-After
    return "Retry-After" in resp.headers


def _rate_limit_wait(resp: httpx.Response) -> int:
    retry_after = resp.headers.get("Retry-After")
    if retry_after is not None:
        try:
            return max(int(retry_after), 1)
        except ValueError:
            pass
    reset_ts = resp.headers.get("X-RateLimit-Reset")
    if reset_ts is not None:
        try:
            return max(int(reset_ts) - int(time.time()), 1)
        except ValueError:
            pass
    return 60
