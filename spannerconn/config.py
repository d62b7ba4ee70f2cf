"""Connection profile configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field

from .credentials import CredentialsService
from .options import ConnectionOptions

CONFIG_FILE = Path.home() / ".config" / "spannerconn" / "config.toml"

EMULATOR_URI = (
    "cloudspanner:/projects/test-project/instances/test-instance/databases/test-database"
    "?autoConfigEmulator=true"
)


class ConnectionProfileConfig(BaseModel):
    """Connection profile stored in config.toml."""

    name: str
    uri: str
    credentials: str | None = None
    oauth_token: str | None = None

    def to_options(self, credentials_service: CredentialsService | None = None) -> ConnectionOptions:
        """Build connection options from the profile."""

        builder = ConnectionOptions.builder().set_uri(self.uri)
        if self.credentials is not None:
            builder.set_credentials_url(self.credentials)
        if self.oauth_token is not None:
            builder.set_oauth_token(self.oauth_token)
        if credentials_service is not None:
            builder.set_credentials_service(credentials_service)
        return builder.build()


class AppConfig(BaseModel):
    """Shape of the configuration file."""

    profiles: list[ConnectionProfileConfig] = Field(default_factory=lambda: list(_default_profiles()))
    active_profile: str | None = None

    def profile(self, name: str) -> ConnectionProfileConfig:
        for profile in self.profiles:
            if profile.name == name:
                return profile
        raise ValueError(f"Profile '{name}' not found.")

    def with_active_profile(self, name: str) -> AppConfig:
        """Return a copy with the active profile updated."""

        return self.model_copy(update={"active_profile": name})


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()

    profiles_data = data.get("profiles")
    profiles: list[ConnectionProfileConfig] | None = None
    if isinstance(profiles_data, list):
        profiles = [ConnectionProfileConfig(**profile) for profile in profiles_data]

    return AppConfig(
        profiles=profiles if profiles is not None else list(_default_profiles()),
        active_profile=data.get("active_profile"),
    )


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = []
    if config.active_profile:
        lines.append(f"active_profile = {_quote(config.active_profile)}")
    for profile in config.profiles:
        lines.append("")
        lines.append("[[profiles]]")
        lines.append(f"name = {_quote(profile.name)}")
        lines.append(f"uri = {_quote(profile.uri)}")
        if profile.credentials:
            lines.append(f"credentials = {_quote(profile.credentials)}")
        if profile.oauth_token:
            lines.append(f"oauth_token = {_quote(profile.oauth_token)}")
    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    active_profile = raw.get("active_profile")
    if isinstance(active_profile, str):
        data["active_profile"] = active_profile
    profiles = raw.get("profiles")
    if isinstance(profiles, list):
        parsed_profiles: list[dict[str, str]] = []
        for profile in profiles:
            if not isinstance(profile, dict):
                continue
            parsed: dict[str, str] = {}
            for key in ("name", "uri", "credentials", "oauth_token"):
                value = profile.get(key)
                if isinstance(value, str):
                    parsed[key] = value
            if parsed.get("name") and parsed.get("uri"):
                parsed_profiles.append(parsed)
        if parsed_profiles:
            data["profiles"] = parsed_profiles
    return data


def _default_profiles() -> tuple[ConnectionProfileConfig, ...]:
    """Default profile shown on first run before config is customized."""

    return (ConnectionProfileConfig(name="Local Emulator", uri=EMULATOR_URI),)


__all__ = [
    "AppConfig",
    "CONFIG_FILE",
    "ConnectionProfileConfig",
    "load_config",
    "save_config",
]
