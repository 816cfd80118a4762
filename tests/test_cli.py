"""Tests for the gh-license CLI — HTTP is faked, no network needed."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from licenseaspect.aspect import Configuration, HttpConfiguration
from licenseaspect.cli import main
from licenseaspect.models import Fingerprint, LicenseRecord

API = "https://api.github.com"
MIT_URL = f"{API}/licenses/mit"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_config(fake_factory):
    config = Configuration(http=HttpConfiguration(client_factory=fake_factory))
    env = {"LICENSEASPECT_GITHUB_API_URL": API}
    with patch("licenseaspect.cli._configuration", return_value=config), patch.dict(os.environ, env):
        os.environ.pop("GITHUB_TOKEN", None)
        os.environ.pop("LICENSEASPECT_HTTP_TIMEOUT", None)
        yield fake_factory


def _invoke(runner, *args):
    return runner.invoke(main, ["--log-level", "WARNING", *args])


class TestExtract:
    def test_prints_fingerprint(self, runner, fake_config, mit_license_response):
        fake_config.routes[f"{API}/repos/acme/widget/license"] = mit_license_response
        result = _invoke(runner, "extract", "acme/widget")
        assert result.exit_code == 0, result.output
        fp = Fingerprint.model_validate_json(result.output)
        assert fp.data.key == "mit"
        assert fp.is_consistent()

    def test_fallback_on_missing_license(self, runner, fake_config):
        result = _invoke(runner, "extract", "https://github.com/acme/widget")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"]["key"] == "unknown"

    def test_repo_from_directory_without_git(self, runner, fake_config, tmp_path: Path):
        result = _invoke(runner, "extract", "--path", str(tmp_path))
        assert result.exit_code == 2

    def test_invalid_timeout_env(self, runner, fake_config):
        with patch.dict(os.environ, {"LICENSEASPECT_HTTP_TIMEOUT": "soon"}):
            result = _invoke(runner, "extract", "acme/widget")
        assert result.exit_code == 2


class TestApply:
    def test_creates_license(self, runner, fake_config, tmp_path: Path):
        fake_config.routes[f"{API}/licenses"] = [{"key": "mit", "url": MIT_URL}]
        fake_config.routes[MIT_URL] = {"body": "MIT License text..."}
        result = _invoke(runner, "apply", "--key", "mit", "--path", str(tmp_path), "--repo", "acme/widget")
        assert result.exit_code == 0, result.output
        assert "LICENSE created (mit)" in result.output
        assert (tmp_path / "LICENSE").read_text() == "MIT License text..."

    def test_updates_from_fingerprint_file(self, runner, fake_config, tmp_path: Path):
        (tmp_path / "LICENSE").write_text("old")
        fp_path = tmp_path / "fp.json"
        fp = Fingerprint.of(LicenseRecord(key="mit", name="MIT License", spdx="MIT"))
        fp_path.write_text(fp.model_dump_json())
        fake_config.routes[f"{API}/licenses"] = [{"key": "mit", "url": MIT_URL}]
        fake_config.routes[MIT_URL] = {"body": "MIT License text..."}

        result = _invoke(
            runner, "apply", "--fingerprint", str(fp_path), "--path", str(tmp_path), "--repo", "acme/widget"
        )
        assert result.exit_code == 0, result.output
        assert "LICENSE updated (mit)" in result.output
        assert (tmp_path / "LICENSE").read_text() == "MIT License text..."

    def test_unchanged_when_key_unknown(self, runner, fake_config, tmp_path: Path):
        fake_config.routes[f"{API}/licenses"] = [{"key": "isc", "url": f"{API}/licenses/isc"}]
        result = _invoke(runner, "apply", "--key", "mit", "--path", str(tmp_path), "--repo", "acme/widget")
        assert result.exit_code == 0, result.output
        assert "LICENSE unchanged" in result.output
        assert not (tmp_path / "LICENSE").exists()

    def test_requires_exactly_one_source(self, runner, fake_config, tmp_path: Path):
        result = _invoke(runner, "apply", "--path", str(tmp_path), "--repo", "acme/widget")
        assert result.exit_code == 2

    def test_bad_fingerprint_file(self, runner, fake_config, tmp_path: Path):
        bad = tmp_path / "fp.json"
        bad.write_text("{}")
        result = _invoke(runner, "apply", "--fingerprint", str(bad), "--path", str(tmp_path), "--repo", "a/b")
        assert result.exit_code == 2


class TestShow:
    def test_show(self, runner, tmp_path: Path):
        fp = Fingerprint.of(LicenseRecord(key="mit", name="MIT License", spdx="MIT"))
        path = tmp_path / "fp.json"
        path.write_text(fp.model_dump_json())
        result = _invoke(runner, "show", str(path))
        assert result.exit_code == 0, result.output
        assert "License: MIT License" in result.output
        assert fp.sha in result.output

    def test_show_tampered(self, runner, tmp_path: Path):
        fp = Fingerprint.of(LicenseRecord(key="mit", name="MIT License", spdx="MIT"))
        path = tmp_path / "fp.json"
        path.write_text(fp.model_copy(update={"sha": "0" * 64}).model_dump_json())
        result = _invoke(runner, "show", str(path))
        assert result.exit_code == 1


class TestLogOptions:
    def _fingerprint_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "fp.json"
        path.write_text(Fingerprint.of(LicenseRecord.unknown()).model_dump_json())
        return path

    def test_unknown_log_level_is_usage_error(self, runner, tmp_path: Path):
        result = runner.invoke(main, ["--log-level", "LOUD", "show", str(self._fingerprint_file(tmp_path))])
        assert result.exit_code == 2
        assert "LOUD" in result.output

    def test_log_level_case_insensitive(self, runner, tmp_path: Path):
        result = runner.invoke(main, ["--log-level", "debug", "show", str(self._fingerprint_file(tmp_path))])
        assert result.exit_code == 0, result.output
        assert "License: Unknown" in result.output
