"""Tests for profile configuration helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from spannerconn import config as config_module
from spannerconn.config import AppConfig, ConnectionProfileConfig, load_config, save_config
from spannerconn.credentials import FileCredentials, NoCredentials

from fakes import FakeCredentialsService


def test_load_config_returns_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    result = load_config()

    assert result == AppConfig()
    assert result.profiles[0].name == "Local Emulator"


def test_load_config_reads_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
active_profile = "Staging"

[[profiles]]
name = "Staging"
uri = "cloudspanner:/projects/p1/instances/i1/databases/d1"
credentials = "/etc/keys/staging.json"

[[profiles]]
name = "Broken"
"""
    )
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result.active_profile == "Staging"
    assert [profile.name for profile in result.profiles] == ["Staging"]
    assert result.profiles[0].credentials == "/etc/keys/staging.json"


def test_load_config_handles_toml_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("active_profile = [unterminated")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result == AppConfig()


def test_save_config_round_trips(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "nested" / "config.toml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)
    config = AppConfig(
        profiles=[
            ConnectionProfileConfig(
                name='Prod "eu"',
                uri="cloudspanner:/projects/p1/instances/i1?readonly=true",
                oauth_token="tok",
            )
        ],
        active_profile='Prod "eu"',
    )

    save_config(config)

    content = config_path.read_text()
    assert "[[profiles]]" in content
    assert 'oauth_token = "tok"' in content
    assert load_config() == config


def test_profile_lookup_and_active_profile() -> None:
    config = AppConfig()

    assert config.profile("Local Emulator").uri.startswith("cloudspanner:")
    assert config.with_active_profile("Local Emulator").active_profile == "Local Emulator"
    with pytest.raises(ValueError, match="Profile 'missing' not found"):
        config.profile("missing")


def test_profile_to_options_applies_overrides() -> None:
    service = FakeCredentialsService()
    profile = ConnectionProfileConfig(
        name="Staging",
        uri="cloudspanner:/projects/p1/instances/i1/databases/d1",
        credentials="/etc/keys/staging.json",
    )

    options = profile.to_options(service)

    assert options.credential_source == FileCredentials("/etc/keys/staging.json")
    assert service.created == ["/etc/keys/staging.json"]


def test_default_profile_resolves_to_emulator() -> None:
    options = AppConfig().profiles[0].to_options()

    assert options.host == "http://localhost:9010"
    assert options.credential_source == NoCredentials()
