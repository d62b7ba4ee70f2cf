"""Status bar widget that mirrors the inspector state."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from spannerconn.inspector import InspectionState, ProfileInspector


class StatusBar(Static):
    """Compact status strip rendered above Textual's footer."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $surface-darken-3;
        color: $text;
    }
    """

    def __init__(self, inspector: ProfileInspector) -> None:
        super().__init__("", id="status-bar")
        self._inspector = inspector
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._inspector.subscribe(self._handle_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_update(self, state: InspectionState) -> None:
        self.update(status_line(state))


def status_line(state: InspectionState) -> str:
    resolved = state.resolved_at.astimezone().strftime("%H:%M:%S")
    parts = [f"Profile: {state.profile.name}"]
    if state.options is None:
        reason = (state.error or "unknown error").splitlines()[0][:80]
        parts.append(f"Error: {reason}")
    else:
        parts.append(f"Host: {state.options.host}")
        parts.append(f"Credentials: {state.options.credential_source.kind.value}")
        if state.options.warnings:
            parts.append("Warnings: yes")
    parts.append(f"Resolved: {resolved}")
    return " | ".join(parts)


__all__ = ["StatusBar", "status_line"]
