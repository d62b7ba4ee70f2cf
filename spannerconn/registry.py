"""Shared client registry keyed by the options that affect a client."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable

from .credentials import CredentialSource
from .errors import ClientsStillInUseError
from .options import ConnectionOptions, SessionPoolOptions

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClientKey:
    """Options that must match for two connections to share a client."""

    host: str
    project_id: str | None
    credential_source: CredentialSource
    num_channels: int | None
    session_pool_options: SessionPoolOptions | None
    user_agent: str | None
    use_plain_text: bool

    @classmethod
    def of(cls, options: ConnectionOptions) -> ClientKey:
        return cls(
            host=options.host,
            project_id=options.project_id,
            credential_source=options.credential_source,
            num_channels=options.num_channels,
            session_pool_options=options.session_pool_options,
            user_agent=options.user_agent,
            use_plain_text=options.use_plain_text,
        )


@runtime_checkable
class ClientFactory(Protocol):
    """Creates the client object backing a set of connection options."""

    def create(self, options: ConnectionOptions) -> Any:
        """Return a new client for ``options``."""


@dataclass(frozen=True, slots=True)
class RegistryEvent:
    """Emitted whenever a shared client is created or closed."""

    action: str
    key: ClientKey


RegistryListener = Callable[[RegistryEvent], None]


@dataclass(slots=True)
class _Entry:
    client: Any
    owners: set[str] = field(default_factory=set)


class ClientRegistry:
    """Hands out one client per ClientKey and tracks who is using it.

    Callers own the registry; there is no process-wide instance.
    """

    def __init__(self, factory: ClientFactory) -> None:
        if not isinstance(factory, ClientFactory):
            raise TypeError(f"{type(factory).__name__} does not implement ClientFactory")
        self._factory = factory
        self._entries: dict[ClientKey, _Entry] = {}
        self._listeners: set[RegistryListener] = set()
        self._lock = threading.Lock()

    def acquire(self, options: ConnectionOptions, owner: str) -> Any:
        """Return the shared client for ``options`` and record ``owner`` on it."""

        key = ClientKey.of(options)
        created = False
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(client=self._factory.create(options))
                self._entries[key] = entry
                created = True
            entry.owners.add(owner)
        if created:
            LOG.debug("Created shared client", extra={"host": key.host, "project": key.project_id})
            self._emit(RegistryEvent("created", key))
        return entry.client

    def release(self, options: ConnectionOptions, owner: str) -> None:
        key = ClientKey.of(options)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or owner not in entry.owners:
                raise ValueError(f"Owner '{owner}' does not hold a client for {options}")
            entry.owners.discard(owner)

    def owners(self) -> tuple[str, ...]:
        """Owners currently holding a client, sorted."""

        with self._lock:
            return tuple(sorted(owner for entry in self._entries.values() for owner in entry.owners))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def close_all(self) -> None:
        """Close every shared client; fails if any owner still holds one.

        Every client is attempted. The first close failure is re-raised after the
        rest have been closed.
        """

        with self._lock:
            open_owners = tuple(sorted(owner for entry in self._entries.values() for owner in entry.owners))
            if open_owners:
                raise ClientsStillInUseError(open_owners)
            entries = list(self._entries.items())
            self._entries.clear()
        failures: list[Exception] = []
        for key, entry in entries:
            close = getattr(entry.client, "close", None)
            if callable(close):
                try:
                    close()
                except Exception as exc:
                    LOG.exception("Failed to close shared client", extra={"host": key.host})
                    failures.append(exc)
                    # Clients that failed to close stay registered.
                    with self._lock:
                        self._entries.setdefault(key, entry)
                    continue
            self._emit(RegistryEvent("closed", key))
        if failures:
            raise failures[0]

    def subscribe(self, listener: RegistryListener) -> Callable[[], None]:
        """Subscribe to registry events; returns an unsubscribe handle."""

        self._listeners.add(listener)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def _emit(self, event: RegistryEvent) -> None:
        for listener in tuple(self._listeners):
            listener(event)


__all__ = [
    "ClientFactory",
    "ClientKey",
    "ClientRegistry",
    "RegistryEvent",
    "RegistryListener",
]
