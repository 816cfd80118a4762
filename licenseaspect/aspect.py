"""LicenseAspect — fingerprint a repository's GitHub license and write it back as LICENSE."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import structlog
from pydantic import BaseModel, ConfigDict

from licenseaspect.core.config import DEFAULT_API_URL
from licenseaspect.credentials import headers
from licenseaspect.http import HttpClientFactory, HttpMethod, RetryOptions
from licenseaspect.models import FINGERPRINT_TYPE, UNKNOWN, Fingerprint, LicenseRecord
from licenseaspect.project import Project
from licenseaspect.schemas import RepoLicenseResponse, parse_catalog, parse_license_text

log = structlog.get_logger("licenseaspect.aspect")

LICENSE_FILE = "LICENSE"

_NO_RETRY = RetryOptions(retries=0)


# ── invocation contexts ───────────────────────────────────────────────────


@dataclass
class HttpConfiguration:
    client_factory: HttpClientFactory | None = None


@dataclass
class Configuration:
    http: HttpConfiguration | None = None


@dataclass
class ExtractContext:
    """What the orchestrator hands to ``extract`` for one project."""

    configuration: Configuration
    credentials: Any = None


@dataclass
class ApplyParameters:
    fp: Fingerprint


@dataclass
class ApplyContext:
    """What the orchestrator hands to ``apply``; ``parameters.fp`` is the fingerprint to enforce."""

    configuration: Configuration
    credentials: Any = None
    parameters: ApplyParameters | None = None


def _client_factory(configuration: Configuration | None) -> HttpClientFactory | None:
    if configuration is None or configuration.http is None:
        return None
    return configuration.http.client_factory


# ── aspect contract ───────────────────────────────────────────────────────


class AspectDetails(BaseModel):
    """Registration metadata shown by the host's reporting UI."""

    model_config = ConfigDict(frozen=True)

    description: str
    short_name: str
    unit: str
    category: str
    url: str
    manage: bool = False


@runtime_checkable
class Aspect(Protocol):
    """Interface every aspect exposes to the orchestrator."""

    name: str
    display_name: str
    details: AspectDetails

    async def extract(self, project: Project, ctx: ExtractContext) -> list[Fingerprint]: ...

    async def apply(self, project: Project, ctx: ApplyContext) -> Project: ...

    def to_displayable_fingerprint(self, fp: Fingerprint) -> str: ...

    def to_displayable_fingerprint_name(self) -> str: ...


@dataclass(frozen=True)
class LicenseLookup:
    """Outcome of a license lookup: the record found, or the fallback sentinel."""

    record: LicenseRecord
    fallback: bool = False
    error: str | None = None

    @classmethod
    def found(cls, record: LicenseRecord) -> LicenseLookup:
        return cls(record=record)

    @classmethod
    def unknown(cls, error: str) -> LicenseLookup:
        return cls(record=LicenseRecord.unknown(), fallback=True, error=error)


class LicenseAspect:
    """Repository license as detected by GitHub.

    ``extract`` never fails once an HTTP client factory is configured: an
    unreachable or unrecognised license yields the ``unknown`` sentinel so
    the fingerprint can still be diffed. ``apply`` is best-effort and leaves
    the project untouched whenever a lookup comes back empty.
    """

    name = FINGERPRINT_TYPE
    display_name = "License"
    details = AspectDetails(
        description="Repository licenses as detected by GitHub",
        short_name="gh-license",
        unit="gh-license",
        category="GitHub",
        url="fingerprint/gh-license/gh-license?byOrg=true&trim=false",
        manage=True,
    )

    def __init__(self, api_url: str = DEFAULT_API_URL) -> None:
        self.api_url = api_url.rstrip("/")

    def license_url(self, project: Project) -> str:
        return f"{self.api_url}/repos/{project.id.owner}/{project.id.repo}/license"

    @property
    def catalog_url(self) -> str:
        return f"{self.api_url}/licenses"

    # ── extract ──────────────────────────────────────────────────────────

    async def lookup(self, project: Project, ctx: ExtractContext) -> LicenseLookup | None:
        """Fetch the project's license. None when no HTTP client is configured."""
        factory = _client_factory(ctx.configuration)
        if factory is None:
            return None

        url = self.license_url(project)
        try:
            response = await factory.create(url).exchange(
                url,
                method=HttpMethod.GET,
                headers=headers(ctx),
                retry=_NO_RETRY,
            )
            payload = RepoLicenseResponse.model_validate(response.body).license
        except Exception as exc:
            return LicenseLookup.unknown(f"{type(exc).__name__}: {exc}")

        return LicenseLookup.found(
            LicenseRecord(
                key=payload.key,
                name=payload.name,
                spdx=payload.spdx_id or UNKNOWN,
                url=payload.url,
            )
        )

    async def extract(self, project: Project, ctx: ExtractContext) -> list[Fingerprint]:
        result = await self.lookup(project, ctx)
        if result is None:
            log.debug("license.extract_skipped", repo=project.id.slug, reason="no_http_client")
            return []
        if result.fallback:
            log.info("license.extract_fallback", repo=project.id.slug, error=result.error)
        fp = Fingerprint.of(result.record)
        log.debug("license.extracted", repo=project.id.slug, key=fp.data.key, sha=fp.sha)
        return [fp]

    # ── apply ────────────────────────────────────────────────────────────

    async def fetch_license_text(self, key: str, ctx: ApplyContext) -> str | None:
        """Canonical text for the catalog license *key*, or None if unavailable."""
        factory = _client_factory(ctx.configuration)
        if factory is None:
            return None

        url = self.catalog_url
        try:
            catalog_response = await factory.create(url).exchange(
                url,
                method=HttpMethod.GET,
                headers=headers(ctx),
            )
            catalog = parse_catalog(catalog_response.body)
            if not catalog:
                log.debug("license.apply_skipped", reason="empty_catalog")
                return None

            entry = next((e for e in catalog if e.key == key), None)
            if entry is None:
                log.debug("license.apply_skipped", reason="key_not_in_catalog", key=key)
                return None

            text_response = await factory.create(entry.url).exchange(
                entry.url,
                method=HttpMethod.GET,
            )
        except Exception as exc:
            log.info("license.apply_skipped", reason="http_error", key=key, error=str(exc))
            return None

        text = parse_license_text(text_response.body)
        if text is None:
            log.debug("license.apply_skipped", reason="empty_license_text", key=key)
        return text

    async def apply(self, project: Project, ctx: ApplyContext) -> Project:
        if ctx.parameters is None or _client_factory(ctx.configuration) is None:
            log.debug("license.apply_skipped", repo=project.id.slug, reason="not_configured")
            return project

        key = ctx.parameters.fp.data.key
        text = await self.fetch_license_text(key, ctx)
        if text is None:
            return project

        license_file = await project.get_file(LICENSE_FILE)
        if license_file is not None:
            await license_file.set_content(text)
            log.info("license.file_written", repo=project.id.slug, key=key, created=False)
        else:
            await project.add_file(LICENSE_FILE, text)
            log.info("license.file_written", repo=project.id.slug, key=key, created=True)
        return project

    # ── display ──────────────────────────────────────────────────────────

    def to_displayable_fingerprint(self, fp: Fingerprint) -> str:
        return fp.data.name

    def to_displayable_fingerprint_name(self) -> str:
        return "License"


LICENSE_ASPECT = LicenseAspect()
