"""Resolves configured profiles into connection options for the inspector UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from .config import AppConfig, ConnectionProfileConfig
from .credentials import CredentialsService
from .errors import ConnectionOptionsError, CredentialsError
from .options import ConnectionOptions

LOG = logging.getLogger(__name__)

InspectionListener = Callable[["InspectionState"], None]


@dataclass(frozen=True, slots=True)
class InspectionState:
    """Outcome of building options for the active profile."""

    profile: ConnectionProfileConfig
    options: ConnectionOptions | None
    error: str | None
    resolved_at: datetime

    @property
    def ok(self) -> bool:
        return self.options is not None


class ProfileInspector:
    """Builds connection options for one profile at a time and notifies listeners."""

    def __init__(
        self,
        config: AppConfig,
        *,
        credentials_service: CredentialsService | None = None,
    ) -> None:
        self._config = config
        self._profiles = tuple(config.profiles)
        self._credentials_service = credentials_service
        self._listeners: set[InspectionListener] = set()
        self._state: InspectionState | None = None
        active_name = config.active_profile or (self._profiles[0].name if self._profiles else None)
        if active_name and self._profiles:
            self.select(active_name)

    @property
    def profiles(self) -> tuple[ConnectionProfileConfig, ...]:
        return self._profiles

    @property
    def state(self) -> InspectionState | None:
        return self._state

    @property
    def active_profile_name(self) -> str | None:
        if self._state:
            return self._state.profile.name
        return None

    def select(self, name: str) -> InspectionState:
        """Resolve the named profile; builder errors are captured in the state."""

        profile = self._config.profile(name)
        options: ConnectionOptions | None = None
        error: str | None = None
        try:
            options = profile.to_options(self._credentials_service)
        except (ConnectionOptionsError, CredentialsError) as exc:
            LOG.warning("Profile could not be resolved", extra={"profile": name, "error": str(exc)})
            error = str(exc)
        self._state = InspectionState(
            profile=profile,
            options=options,
            error=error,
            resolved_at=datetime.now(tz=timezone.utc),
        )
        self._notify()
        return self._state

    def select_next(self) -> InspectionState | None:
        """Cycle to the next configured profile."""

        if not self._profiles:
            return None
        names = [profile.name for profile in self._profiles]
        current = self.active_profile_name
        index = names.index(current) + 1 if current in names else 0
        return self.select(names[index % len(names)])

    def subscribe(self, listener: InspectionListener) -> Callable[[], None]:
        """Subscribe to inspection updates; returns an unsubscribe handle."""

        self._listeners.add(listener)
        if self._state:
            listener(self._state)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def _notify(self) -> None:
        if not self._state:
            return
        for listener in tuple(self._listeners):
            listener(self._state)


__all__ = ["InspectionState", "ProfileInspector"]
