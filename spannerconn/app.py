"""Textual inspector for configured connection profiles."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header

from .config import AppConfig, load_config, save_config
from .inspector import ProfileInspector
from .providers import ProfileSwitchProvider
from .widgets import OptionsPanel, StatusBar

LOG = logging.getLogger(__name__)


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for test overrides."""

    return load_config()


class SpannerconnApp(App[None]):
    """Shows how each configured connection URI resolves."""

    COMMANDS = App.COMMANDS | {ProfileSwitchProvider}

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("n", "next_profile", "Next Profile"),
        ("ctrl+p", "command_palette", "Command Palette"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._config = _load_app_config()
        self._inspector = ProfileInspector(self._config)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield OptionsPanel(self._inspector)
        yield StatusBar(self._inspector)
        yield Footer()

    @property
    def inspector(self) -> ProfileInspector:
        """Expose the inspector for tests and command providers."""

        return self._inspector

    def action_next_profile(self) -> None:
        state = self._inspector.select_next()
        if state is not None:
            self._remember_profile(state.profile.name)

    def switch_profile(self, name: str) -> None:
        """Inspect the requested profile and persist the choice."""

        try:
            state = self._inspector.select(name)
        except ValueError as exc:
            self.notify(str(exc), severity="error")
            return
        self._remember_profile(state.profile.name)
        if state.error:
            self.notify(state.error, severity="warning")

    def _remember_profile(self, name: str) -> None:
        if self._config.active_profile == name:
            return
        self._config = self._config.with_active_profile(name)
        try:
            save_config(self._config)
        except OSError:
            LOG.exception("Failed to persist active profile", extra={"profile": name})


def main() -> None:
    """Entry point used by `python -m spannerconn`."""

    SpannerconnApp().run()


__all__ = ["SpannerconnApp", "main"]
