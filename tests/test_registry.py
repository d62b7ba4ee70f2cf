"""Tests for the shared client registry."""

from __future__ import annotations

import pytest

from spannerconn.errors import ClientsStillInUseError
from spannerconn.options import ConnectionOptions
from spannerconn.registry import ClientKey, ClientRegistry, RegistryEvent

from fakes import FakeClientFactory

EMULATOR_URI = "cloudspanner:/projects/p1/instances/i1/databases/d1?autoConfigEmulator=true"


def _options(uri: str = EMULATOR_URI) -> ConnectionOptions:
    return ConnectionOptions.builder().set_uri(uri).build()


def test_acquire_shares_client_for_equal_options() -> None:
    factory = FakeClientFactory()
    registry = ClientRegistry(factory)

    first = registry.acquire(_options(), "conn-1")
    second = registry.acquire(_options(EMULATOR_URI + ";autocommit=false"), "conn-2")

    assert first is second
    assert len(factory.created) == 1
    assert len(registry) == 1
    assert registry.owners() == ("conn-1", "conn-2")


def test_acquire_creates_separate_clients_for_different_keys() -> None:
    factory = FakeClientFactory()
    registry = ClientRegistry(factory)

    registry.acquire(_options(), "conn-1")
    registry.acquire(_options(EMULATOR_URI + ";numChannels=8"), "conn-2")

    assert len(factory.created) == 2
    assert ClientKey.of(_options()) != ClientKey.of(_options(EMULATOR_URI + ";numChannels=8"))


def test_close_all_fails_while_owners_remain() -> None:
    registry = ClientRegistry(FakeClientFactory())
    registry.acquire(_options(), "conn-1")

    with pytest.raises(ClientsStillInUseError) as excinfo:
        registry.close_all()

    assert excinfo.value.owners == ("conn-1",)
    assert len(registry) == 1


def test_close_all_closes_released_clients_and_notifies() -> None:
    factory = FakeClientFactory()
    registry = ClientRegistry(factory)
    events: list[RegistryEvent] = []
    registry.subscribe(events.append)
    options = _options()

    registry.acquire(options, "conn-1")
    registry.release(options, "conn-1")
    registry.close_all()

    assert factory.created[0].closed is True
    assert len(registry) == 0
    assert [event.action for event in events] == ["created", "closed"]


def test_release_unknown_owner_raises() -> None:
    registry = ClientRegistry(FakeClientFactory())

    with pytest.raises(ValueError):
        registry.release(_options(), "ghost")


def test_unsubscribe_stops_notifications() -> None:
    registry = ClientRegistry(FakeClientFactory())
    events: list[RegistryEvent] = []
    unsubscribe = registry.subscribe(events.append)
    unsubscribe()

    registry.acquire(_options(), "conn-1")

    assert events == []


def test_registry_requires_factory_protocol() -> None:
    with pytest.raises(TypeError):
        ClientRegistry(object())  # type: ignore[arg-type]


def test_close_all_closes_remaining_clients_when_one_fails() -> None:
    factory = FakeClientFactory()
    registry = ClientRegistry(factory)
    events: list[RegistryEvent] = []
    registry.subscribe(events.append)
    first = _options()
    second = _options(EMULATOR_URI + ";numChannels=8")

    registry.acquire(first, "conn-1")
    registry.acquire(second, "conn-2")
    registry.release(first, "conn-1")
    registry.release(second, "conn-2")
    broken = factory.created[0]

    def _fail() -> None:
        raise RuntimeError("channel shutdown failed")

    broken.close = _fail

    with pytest.raises(RuntimeError, match="channel shutdown failed"):
        registry.close_all()

    assert factory.created[1].closed is True
    assert len(registry) == 1
    assert [event.action for event in events] == ["created", "created", "closed"]
    assert events[-1].key == ClientKey.of(second)
