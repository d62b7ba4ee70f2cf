"""Panel that renders the resolved options of the active profile."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from spannerconn.inspector import InspectionState, ProfileInspector
from spannerconn.options import ConnectionOptions


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _optional(value: object | None) -> str:
    return "—" if value is None or value == "" else str(value)


def describe_options(options: ConnectionOptions) -> list[tuple[str, str]]:
    """Label/value rows shown for a set of connection options."""

    rows = [
        ("Host", options.host),
        ("Project", _optional(options.project_id)),
        ("Instance", _optional(options.instance_id)),
        ("Database", _optional(options.database_name)),
        ("Credentials", options.credential_source.kind.value),
        ("Autocommit", _flag(options.autocommit)),
        ("Read-only", _flag(options.read_only)),
        ("Retry aborts internally", _flag(options.retry_aborts_internally)),
        ("Plain text", _flag(options.use_plain_text)),
        ("Return commit stats", _flag(options.return_commit_stats)),
        ("Emulator", _flag(options.auto_config_emulator)),
        ("Channels", _optional(options.num_channels)),
    ]
    pool = options.session_pool_options
    if pool is not None:
        rows.append(("Sessions", f"{pool.min_sessions}-{pool.max_sessions}"))
    if options.query_options.optimizer_version:
        rows.append(("Optimizer version", options.query_options.optimizer_version))
    if options.query_options.optimizer_statistics_package:
        rows.append(("Statistics package", options.query_options.optimizer_statistics_package))
    if options.warnings:
        rows.append(("Warnings", options.warnings))
    return rows


class OptionsPanel(Static):
    """Two-column listing of the active profile's connection options."""

    DEFAULT_CSS = """
    OptionsPanel {
        padding: 1 2;
        height: 1fr;
    }
    """

    def __init__(self, inspector: ProfileInspector) -> None:
        super().__init__("", id="options-panel")
        self._inspector = inspector
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._inspector.subscribe(self._handle_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_update(self, state: InspectionState) -> None:
        self.update(render_state(state))


def render_state(state: InspectionState) -> str:
    lines = [f"Profile: {state.profile.name}", f"URI: {state.profile.uri}", ""]
    if state.options is None:
        lines.append(f"Error: {state.error}")
        return "\n".join(lines)
    rows = describe_options(state.options)
    width = max(len(label) for label, _ in rows)
    lines.extend(f"{label.ljust(width)}  {value}" for label, value in rows)
    return "\n".join(lines)


__all__ = ["OptionsPanel", "describe_options", "render_state"]
