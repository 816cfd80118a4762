"""Exceptions raised by license aspect collaborators."""

from __future__ import annotations


class LicenseAspectError(Exception):
    """Base exception for all license aspect errors."""


class HttpClientError(LicenseAspectError):
    """Raised when an HTTP exchange fails or returns a non-2xx status."""

    def __init__(self, url: str, status: int | None = None, reason: str | None = None) -> None:
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"status {status}" if status is not None else (reason or "request failed")
        if status is not None and reason:
            detail = f"{detail}: {reason}"
        super().__init__(f"{detail} for {url}")


class AspectNotFoundError(LicenseAspectError):
    """Raised when no aspect is registered under the requested name."""
