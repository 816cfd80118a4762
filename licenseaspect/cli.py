"""CLI entry point for standalone usage: gh-license.

Subcommands:
    gh-license extract [OWNER/REPO] [--path DIR]     # Print the license fingerprint as JSON
    gh-license apply --key mit [--path DIR]          # Write the canonical LICENSE into DIR
    gh-license apply --fingerprint fp.json           # ... using a previously extracted fingerprint
    gh-license show fp.json                          # Displayable name + sha of a fingerprint
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from pydantic import ValidationError

from licenseaspect.aspect import (
    LICENSE_FILE,
    ApplyContext,
    ApplyParameters,
    Configuration,
    ExtractContext,
    HttpConfiguration,
    LicenseAspect,
)
from licenseaspect.core.config import Settings
from licenseaspect.core.logging import setup_logging
from licenseaspect.credentials import TokenCredentials
from licenseaspect.http import HttpxClientFactory
from licenseaspect.models import UNKNOWN, Fingerprint, LicenseRecord
from licenseaspect.project import LocalProject, RepoRef


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


def _configuration(settings: Settings) -> Configuration:
    factory = HttpxClientFactory(timeout=settings.http_timeout)
    return Configuration(http=HttpConfiguration(client_factory=factory))


def _credentials(settings: Settings) -> TokenCredentials | None:
    return TokenCredentials(settings.token) if settings.token else None


def _open_project(path: Path, repo: str | None) -> LocalProject:
    try:
        if repo:
            return LocalProject(path, RepoRef.parse(repo))
        return LocalProject.from_directory(path)
    except ValueError as exc:
        raise click.UsageError(f"{exc} (pass OWNER/REPO explicitly)") from exc


def _read_fingerprint(path: Path) -> Fingerprint:
    try:
        return Fingerprint.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        raise click.BadParameter(f"not a fingerprint file: {path} ({exc})") from exc


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LICENSEASPECT_LOG_LEVEL.",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Override LICENSEASPECT_LOG_FORMAT.",
)
def main(log_level: str | None, log_format: str | None) -> None:
    """GitHub license aspect."""
    setup_logging(level=log_level, fmt=log_format)


@main.command()
@click.argument("repo", required=False)
@click.option(
    "--path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Checkout to read the origin remote from when REPO is omitted.",
)
def extract(repo: str | None, path: Path) -> None:
    """Print the license fingerprint of REPO (owner/repo or URL) as JSON."""
    settings = _load_settings()
    project = _open_project(path, repo)
    aspect = LicenseAspect(api_url=settings.api_url)
    ctx = ExtractContext(configuration=_configuration(settings), credentials=_credentials(settings))

    # a client factory is always configured here, so there is exactly one fingerprint
    (fp,) = asyncio.run(aspect.extract(project, ctx))
    click.echo(json.dumps(fp.model_dump(mode="json"), indent=2))


@main.command()
@click.option("--key", default=None, help="GitHub license key, e.g. mit or apache-2.0.")
@click.option(
    "--fingerprint",
    "fingerprint_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Fingerprint JSON produced by 'extract'.",
)
@click.option(
    "--path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
)
@click.option("--repo", default=None, help="owner/repo, if PATH has no origin remote.")
def apply(key: str | None, fingerprint_path: Path | None, path: Path, repo: str | None) -> None:
    """Write the canonical LICENSE for a license key into PATH."""
    if (key is None) == (fingerprint_path is None):
        raise click.UsageError("pass exactly one of --key or --fingerprint")

    if fingerprint_path is not None:
        fp = _read_fingerprint(fingerprint_path)
    else:
        fp = Fingerprint.of(LicenseRecord(key=key, name=key, spdx=UNKNOWN))

    settings = _load_settings()
    project = _open_project(path, repo)
    aspect = LicenseAspect(api_url=settings.api_url)
    ctx = ApplyContext(
        configuration=_configuration(settings),
        credentials=_credentials(settings),
        parameters=ApplyParameters(fp=fp),
    )

    license_path = path / LICENSE_FILE
    before = license_path.read_text(encoding="utf-8") if license_path.is_file() else None
    asyncio.run(aspect.apply(project, ctx))
    after = license_path.read_text(encoding="utf-8") if license_path.is_file() else None

    if after is None or after == before:
        click.echo(f"{LICENSE_FILE} unchanged")
    elif before is None:
        click.echo(f"{LICENSE_FILE} created ({fp.data.key})")
    else:
        click.echo(f"{LICENSE_FILE} updated ({fp.data.key})")


@main.command()
@click.argument(
    "fingerprint_path",
    metavar="FINGERPRINT",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def show(fingerprint_path: Path) -> None:
    """Print the displayable name and sha of a fingerprint file."""
    fp = _read_fingerprint(fingerprint_path)
    aspect = LicenseAspect()
    click.echo(f"{aspect.to_displayable_fingerprint_name()}: {aspect.to_displayable_fingerprint(fp)}")
    click.echo(f"sha: {fp.sha}")
    if not fp.is_consistent():
        raise click.ClickException("fingerprint sha does not match its data")


if __name__ == "__main__":
    main()
