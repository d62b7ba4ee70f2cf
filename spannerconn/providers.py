"""Command palette providers for the inspector."""

from __future__ import annotations

from textual.command import DiscoveryHit, Hit, Hits, Provider
from textual.types import IgnoreReturnCallbackType

from .inspector import ProfileInspector


class ProfileSwitchProvider(Provider):
    """Expose connection profiles to the command palette."""

    async def search(self, query: str) -> Hits:
        inspector = self._inspector
        if inspector is None:
            return
        matcher = self.matcher(query)
        for profile in inspector.profiles:
            match = matcher.match(profile.name)
            if match > 0:
                yield Hit(
                    score=match,
                    match_display=f"Inspect profile: {matcher.highlight(profile.name)}",
                    command=self._build_callback(profile.name),
                    help="Resolve the connection options of this profile.",
                )

    async def discover(self) -> Hits:
        inspector = self._inspector
        if inspector is None:
            return
        for profile in inspector.profiles:
            yield DiscoveryHit(
                display=f"Inspect profile: {profile.name}",
                command=self._build_callback(profile.name),
                help="Resolve the connection options of this profile.",
            )

    @property
    def _inspector(self) -> ProfileInspector | None:
        inspector = getattr(self.app, "inspector", None)
        if isinstance(inspector, ProfileInspector):
            return inspector
        return None

    def _build_callback(self, name: str) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            switcher = getattr(self.app, "switch_profile", None)
            if switcher is None:
                return
            switcher(name)

        return _run


__all__ = ["ProfileSwitchProvider"]
