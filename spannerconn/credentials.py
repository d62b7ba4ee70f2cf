"""Credential sources and their resolution through google-auth."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import google.auth
from google.auth import credentials as ga_credentials
from google.auth import exceptions as ga_exceptions
from google.oauth2 import credentials as oauth2_credentials

from .errors import ConflictingCredentialsError, CredentialsError

LOG = logging.getLogger(__name__)

SPANNER_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/spanner.admin",
    "https://www.googleapis.com/auth/spanner.data",
)

PROJECT_ENV_VARS: tuple[str, ...] = ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT")

FILE_URL_PREFIX = "file:"


class CredentialKind(str, Enum):
    """Where the credentials of a connection come from."""

    EXPLICIT = "explicit"
    OAUTH_TOKEN = "oauth_token"
    ENCODED = "encoded"
    FILE = "file"
    NONE = "none"
    ENVIRONMENT = "environment"


@dataclass(frozen=True, slots=True)
class ExplicitCredentials:
    credentials: Any
    kind: CredentialKind = CredentialKind.EXPLICIT


@dataclass(frozen=True, slots=True)
class OAuthTokenCredentials:
    token: str
    kind: CredentialKind = CredentialKind.OAUTH_TOKEN


@dataclass(frozen=True, slots=True)
class EncodedCredentials:
    encoded: str
    kind: CredentialKind = CredentialKind.ENCODED


@dataclass(frozen=True, slots=True)
class FileCredentials:
    location: str
    kind: CredentialKind = CredentialKind.FILE


@dataclass(frozen=True, slots=True)
class NoCredentials:
    """Plain-text connections that carry no credentials at all."""

    kind: CredentialKind = CredentialKind.NONE


@dataclass(frozen=True, slots=True)
class EnvironmentCredentials:
    """Application default credentials of the runtime environment."""

    kind: CredentialKind = CredentialKind.ENVIRONMENT


CredentialSource = (
    ExplicitCredentials
    | OAuthTokenCredentials
    | EncodedCredentials
    | FileCredentials
    | NoCredentials
    | EnvironmentCredentials
)


def select_credential_source(
    *,
    explicit: Any | None = None,
    oauth_token: str | None = None,
    encoded: str | None = None,
    location: str | None = None,
    use_plain_text: bool = False,
) -> CredentialSource:
    """Pick the single credential source allowed for a connection."""

    if location is not None and encoded is not None:
        raise ConflictingCredentialsError(
            "Cannot specify both a credentials URL and encoded credentials. "
            "Only set one of the properties."
        )
    if oauth_token is not None and (explicit is not None or location is not None or encoded is not None):
        raise ConflictingCredentialsError("Cannot specify both credentials and an OAuth token.")
    if explicit is not None and (location is not None or encoded is not None):
        raise ConflictingCredentialsError(
            "Cannot specify both explicit credentials and a credentials URL or encoded credentials."
        )
    if explicit is not None:
        return ExplicitCredentials(explicit)
    if oauth_token is not None:
        return OAuthTokenCredentials(oauth_token)
    if encoded is not None:
        return EncodedCredentials(encoded)
    if location is not None:
        return FileCredentials(location)
    # Credentials are never sent over a plain text channel.
    if use_plain_text:
        return NoCredentials()
    return EnvironmentCredentials()


class CredentialsService:
    """Turns credential sources into google-auth credentials objects."""

    def __init__(self, scopes: tuple[str, ...] = SPANNER_SCOPES) -> None:
        self._scopes = scopes

    def resolve(self, source: CredentialSource) -> Any:
        credentials, _ = self.resolve_with_project(source)
        return credentials

    def resolve_with_project(self, source: CredentialSource) -> tuple[Any, str | None]:
        """Resolve ``source`` along with the ambient project when it comes from the environment."""

        if isinstance(source, EnvironmentCredentials):
            return self.default_credentials()
        if isinstance(source, ExplicitCredentials):
            return source.credentials, None
        if isinstance(source, OAuthTokenCredentials):
            return oauth2_credentials.Credentials(token=source.token), None
        if isinstance(source, EncodedCredentials):
            return self.decode_credentials(source.encoded), None
        if isinstance(source, FileCredentials):
            return self.create_credentials(source.location), None
        return ga_credentials.AnonymousCredentials(), None

    def default_credentials(self) -> tuple[Any, str | None]:
        """Application default credentials and the project google-auth resolved with them."""

        try:
            creds, project = google.auth.default(scopes=list(self._scopes))
        except ga_exceptions.GoogleAuthError as exc:
            raise CredentialsError(f"Unable to load default credentials: {exc}") from exc
        return creds, project

    def decode_credentials(self, encoded: str) -> Any:
        """Decode a base64 JSON key (standard or URL-safe alphabet)."""

        normalized = encoded.strip().translate(str.maketrans("-_", "+/"))
        normalized += "=" * (-len(normalized) % 4)
        try:
            info = json.loads(base64.b64decode(normalized, validate=True))
        except (binascii.Error, ValueError) as exc:
            raise CredentialsError(f"Invalid encoded credentials: {exc}") from exc
        if not isinstance(info, dict):
            raise CredentialsError("Invalid encoded credentials: expected a JSON object")
        try:
            creds, _ = google.auth.load_credentials_from_dict(info, scopes=list(self._scopes))
        except ga_exceptions.GoogleAuthError as exc:
            raise CredentialsError(f"Invalid encoded credentials: {exc}") from exc
        return creds

    def create_credentials(self, location: str | None) -> Any:
        """Load credentials from ``location``, or the environment defaults when None."""

        if location is None:
            creds, _ = self.default_credentials()
            return creds
        path = location[len(FILE_URL_PREFIX):] if location.startswith(FILE_URL_PREFIX) else location
        LOG.debug("Loading credentials file", extra={"path": path})
        try:
            creds, _ = google.auth.load_credentials_from_file(path, scopes=list(self._scopes))
        except ga_exceptions.GoogleAuthError as exc:
            raise CredentialsError(f"Invalid credentials path specified: {location}") from exc
        return creds


def get_default_project_id(
    credentials: Any | None,
    environ: Mapping[str, str] | None = None,
    ambient_project: str | None = None,
) -> str | None:
    """Resolve the project behind the DEFAULT_PROJECT_ID placeholder.

    Environment variables win, then the project google-auth found next to the
    application default credentials (gcloud config, metadata server), then the
    project embedded in a service account key.
    """

    env = os.environ if environ is None else environ
    for name in PROJECT_ENV_VARS:
        value = env.get(name)
        if value:
            return value
    if ambient_project:
        return ambient_project
    # Service account keys carry the project they belong to.
    project_id = getattr(credentials, "project_id", None)
    if isinstance(project_id, str) and project_id:
        return project_id
    return None


__all__ = [
    "CredentialKind",
    "CredentialSource",
    "CredentialsService",
    "EncodedCredentials",
    "EnvironmentCredentials",
    "ExplicitCredentials",
    "FileCredentials",
    "NoCredentials",
    "OAuthTokenCredentials",
    "SPANNER_SCOPES",
    "get_default_project_id",
    "select_credential_source",
]
