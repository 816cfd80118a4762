"""Runtime settings read from the environment.

Only the CLI and other host-side entry points read these; the aspect itself
receives everything through its invocation context.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HTTP_TIMEOUT = 30.0

_ENV_API_URL = "LICENSEASPECT_GITHUB_API_URL"
_ENV_HTTP_TIMEOUT = "LICENSEASPECT_HTTP_TIMEOUT"
_ENV_TOKEN = "GITHUB_TOKEN"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    token: str | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``LICENSEASPECT_*`` and ``GITHUB_TOKEN``.

        Raises ValueError if the timeout is not a positive number.
        """
        api_url = os.environ.get(_ENV_API_URL, "").strip() or DEFAULT_API_URL
        raw_timeout = os.environ.get(_ENV_HTTP_TIMEOUT, "").strip()
        timeout = DEFAULT_HTTP_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(f"{_ENV_HTTP_TIMEOUT} must be a number, got {raw_timeout!r}")
            if timeout <= 0:
                raise ValueError(f"{_ENV_HTTP_TIMEOUT} must be positive, got {timeout}")
        token = os.environ.get(_ENV_TOKEN) or None
        return cls(api_url=api_url.rstrip("/"), http_timeout=timeout, token=token)
