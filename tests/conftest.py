"""Shared fixtures for license aspect tests — no network access needed."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from licenseaspect.exceptions import HttpClientError
from licenseaspect.http import HttpMethod, HttpResponse, RetryOptions
from licenseaspect.project import LocalProject, RepoRef

API = "https://api.github.com"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@dataclass
class Call:
    url: str
    method: HttpMethod
    headers: dict[str, str] | None
    retry: RetryOptions | None


class FakeClient:
    def __init__(self, factory: FakeClientFactory) -> None:
        self._factory = factory

    async def exchange(
        self,
        url: str,
        *,
        method: HttpMethod = HttpMethod.GET,
        headers: dict[str, str] | None = None,
        body: Any = None,
        retry: RetryOptions | None = None,
    ) -> HttpResponse:
        self._factory.calls.append(Call(url, method, headers, retry))
        if url not in self._factory.routes:
            raise HttpClientError(url, status=404)
        result = self._factory.routes[url]
        if isinstance(result, BaseException):
            raise result
        return HttpResponse(status=200, body=result)


class FakeClientFactory:
    """Client factory answering from a url -> body (or exception) table."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.calls: list[Call] = []
        self.created: list[str] = []

    def create(self, url: str) -> FakeClient:
        self.created.append(url)
        return FakeClient(self)


@pytest.fixture
def fake_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def project(tmp_path: Path) -> LocalProject:
    return LocalProject(tmp_path, RepoRef("acme", "widget"))


@pytest.fixture
def mit_license_response() -> dict[str, Any]:
    return {
        "name": "LICENSE",
        "path": "LICENSE",
        "license": {
            "key": "mit",
            "name": "MIT License",
            "spdx_id": "MIT",
            "url": f"{API}/licenses/mit",
            "node_id": "MDc6TGljZW5zZTEz",
        },
    }
