"""Response schemas for the GitHub license endpoints.

Bodies come back untyped; these models validate only the fields the
aspect reads and ignore the rest.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError


class RepoLicense(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: str
    name: str
    spdx_id: str | None = None
    url: str | None = None


class RepoLicenseResponse(BaseModel):
    """``GET /repos/{owner}/{repo}/license``"""

    model_config = ConfigDict(extra="ignore")

    license: RepoLicense


class LicenseCatalogEntry(BaseModel):
    """One item of ``GET /licenses``."""

    model_config = ConfigDict(extra="ignore")

    key: str
    url: str
    name: str | None = None
    spdx_id: str | None = None


class LicenseText(BaseModel):
    """``GET /licenses/{key}``; ``body`` holds the raw license text."""

    model_config = ConfigDict(extra="ignore")

    body: str


def parse_catalog(body: Any) -> list[LicenseCatalogEntry]:
    """Valid catalog entries from *body*, in order. Empty for a non-list body."""
    if not isinstance(body, list):
        return []
    entries: list[LicenseCatalogEntry] = []
    for item in body:
        try:
            entries.append(LicenseCatalogEntry.model_validate(item))
        except ValidationError:
            continue
    return entries


def parse_license_text(body: Any) -> str | None:
    """The license text from *body*, or None if missing or empty."""
    if not body:
        return None
    try:
        text = LicenseText.model_validate(body).body
    except ValidationError:
        return None
    return text or None
