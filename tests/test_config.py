"""Tests for environment-driven settings."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from licenseaspect.core.config import DEFAULT_API_URL, DEFAULT_HTTP_TIMEOUT, Settings

_VARS = ["LICENSEASPECT_GITHUB_API_URL", "LICENSEASPECT_HTTP_TIMEOUT", "GITHUB_TOKEN"]


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=False):
        for k in _VARS:
            os.environ.pop(k, None)
        yield


def test_defaults(clean_env):
    s = Settings.from_env()
    assert s.api_url == DEFAULT_API_URL
    assert s.http_timeout == DEFAULT_HTTP_TIMEOUT
    assert s.token is None


def test_overrides(clean_env):
    os.environ["LICENSEASPECT_GITHUB_API_URL"] = "https://ghe.example.com/api/v3/"
    os.environ["LICENSEASPECT_HTTP_TIMEOUT"] = "5"
    os.environ["GITHUB_TOKEN"] = "ghp_abc"
    s = Settings.from_env()
    assert s.api_url == "https://ghe.example.com/api/v3"
    assert s.http_timeout == 5.0
    assert s.token == "ghp_abc"
    assert "ghp_abc" not in repr(s)


@pytest.mark.parametrize("value", ["abc", "0", "-1"])
def test_invalid_timeout(clean_env, value):
    os.environ["LICENSEASPECT_HTTP_TIMEOUT"] = value
    with pytest.raises(ValueError):
        Settings.from_env()
