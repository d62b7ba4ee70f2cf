"""Connection URI parsing and validation for Cloud Spanner clients."""

from __future__ import annotations

__version__ = "0.1.0"

from .credentials import (
    CredentialKind,
    CredentialSource,
    CredentialsService,
    EncodedCredentials,
    EnvironmentCredentials,
    ExplicitCredentials,
    FileCredentials,
    NoCredentials,
    OAuthTokenCredentials,
    get_default_project_id,
)
from .errors import (
    ClientsStillInUseError,
    ConflictingCredentialsError,
    ConnectionOptionsError,
    CredentialsError,
    InvalidIntegerPropertyError,
    InvalidUriError,
    MissingFieldError,
    MissingUriError,
    UnknownPropertyError,
)
from .interceptors import StatementExecutionInterceptor, StatementExecutionStep
from .options import (
    ConnectionOptions,
    ConnectionOptionsBuilder,
    DatabaseId,
    QueryOptions,
    SessionPoolOptions,
)
from .properties import ConnectionProperty, INTERNAL_PROPERTIES, VALID_PROPERTIES
from .registry import ClientFactory, ClientKey, ClientRegistry

__all__ = [
    "ClientFactory",
    "ClientKey",
    "ClientRegistry",
    "ClientsStillInUseError",
    "ConflictingCredentialsError",
    "ConnectionOptions",
    "ConnectionOptionsBuilder",
    "ConnectionOptionsError",
    "ConnectionProperty",
    "CredentialKind",
    "CredentialSource",
    "CredentialsError",
    "CredentialsService",
    "DatabaseId",
    "EncodedCredentials",
    "EnvironmentCredentials",
    "ExplicitCredentials",
    "FileCredentials",
    "INTERNAL_PROPERTIES",
    "InvalidIntegerPropertyError",
    "InvalidUriError",
    "MissingFieldError",
    "MissingUriError",
    "NoCredentials",
    "OAuthTokenCredentials",
    "QueryOptions",
    "SessionPoolOptions",
    "StatementExecutionInterceptor",
    "StatementExecutionStep",
    "UnknownPropertyError",
    "VALID_PROPERTIES",
    "get_default_project_id",
    "__version__",
]
