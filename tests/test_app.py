"""App-level tests for the Textual inspector."""

from __future__ import annotations

from pathlib import Path

import pytest

from spannerconn.app import SpannerconnApp
from spannerconn.config import AppConfig, ConnectionProfileConfig
from spannerconn.options import ConnectionOptions
from spannerconn.widgets import describe_options
from spannerconn.widgets.options_panel import render_state
from spannerconn.widgets.status_bar import status_line

PROFILES = [
    ConnectionProfileConfig(
        name="Emulator",
        uri="cloudspanner:/projects/p1/instances/i1/databases/d1?autoConfigEmulator=true",
    ),
    ConnectionProfileConfig(
        name="Local",
        uri="cloudspanner://localhost:9010/projects/p1?usePlainText=true;minSessions=1;maxSessions=5",
    ),
]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "config.toml"
    monkeypatch.setattr("spannerconn.config.CONFIG_FILE", path)
    return path


def test_describe_options_lists_resolved_fields() -> None:
    options = (
        ConnectionOptions.builder()
        .set_uri("cloudspanner:/projects/p1?usePlainText=true;optimizerVersion=2;foo=1;lenient=true")
        .build()
    )

    rows = dict(describe_options(options))

    assert rows["Host"] == "https://spanner.googleapis.com"
    assert rows["Credentials"] == "none"
    assert rows["Plain text"] == "true"
    assert rows["Instance"] == "—"
    assert rows["Optimizer version"] == "2"
    assert "foo" in rows["Warnings"]


def test_app_initializes_inspector(monkeypatch: pytest.MonkeyPatch) -> None:
    config = AppConfig(profiles=PROFILES, active_profile="Local")
    monkeypatch.setattr("spannerconn.app._load_app_config", lambda: config)

    app = SpannerconnApp()

    state = app.inspector.state
    assert state is not None
    assert state.profile.name == "Local"
    assert "Sessions" in render_state(state)
    assert "Host: http://localhost:9010" in status_line(state)


def test_switch_profile_persists_choice(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    config = AppConfig(profiles=PROFILES, active_profile="Emulator")
    monkeypatch.setattr("spannerconn.app._load_app_config", lambda: config)
    app = SpannerconnApp()

    app.switch_profile("Local")

    assert app.inspector.active_profile_name == "Local"
    assert 'active_profile = "Local"' in config_path.read_text()


@pytest.mark.anyio
async def test_next_profile_binding_cycles_profiles(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    config = AppConfig(profiles=PROFILES, active_profile="Emulator")
    monkeypatch.setattr("spannerconn.app._load_app_config", lambda: config)
    app = SpannerconnApp()

    async with app.run_test() as pilot:
        await pilot.press("n")
        await pilot.pause()

    assert app.inspector.active_profile_name == "Local"
