"""Tests for the profile inspector."""

from __future__ import annotations

from spannerconn.config import AppConfig, ConnectionProfileConfig
from spannerconn.inspector import InspectionState, ProfileInspector

EMULATOR = ConnectionProfileConfig(
    name="Emulator",
    uri="cloudspanner:/projects/p1/instances/i1/databases/d1?autoConfigEmulator=true",
)
BROKEN = ConnectionProfileConfig(name="Broken", uri="cloudspanner:/instances/i1")
UNKNOWN = ConnectionProfileConfig(
    name="Unknown",
    uri="cloudspanner:/projects/p1?usePlainText=true;colour=blue",
)


def test_inspector_resolves_first_profile_by_default() -> None:
    inspector = ProfileInspector(AppConfig(profiles=[EMULATOR, BROKEN]))

    assert inspector.state is not None
    assert inspector.state.ok
    assert inspector.active_profile_name == "Emulator"
    assert inspector.state.options is not None
    assert inspector.state.options.host == "http://localhost:9010"


def test_inspector_captures_builder_errors() -> None:
    inspector = ProfileInspector(AppConfig(profiles=[EMULATOR, BROKEN, UNKNOWN], active_profile="Broken"))

    assert inspector.state is not None
    assert not inspector.state.ok
    assert inspector.state.error and "not a valid Cloud Spanner connection URI" in inspector.state.error

    state = inspector.select("Unknown")

    assert state.error and "colour" in state.error


def test_select_next_cycles_and_notifies() -> None:
    inspector = ProfileInspector(AppConfig(profiles=[EMULATOR, BROKEN]))
    seen: list[str] = []

    def _listener(state: InspectionState) -> None:
        seen.append(state.profile.name)

    unsubscribe = inspector.subscribe(_listener)
    inspector.select_next()
    inspector.select_next()
    unsubscribe()
    inspector.select_next()

    assert seen == ["Emulator", "Broken", "Emulator"]
    assert inspector.active_profile_name == "Broken"


def test_inspector_with_no_profiles_is_idle() -> None:
    inspector = ProfileInspector(AppConfig(profiles=[]))

    assert inspector.state is None
    assert inspector.select_next() is None
