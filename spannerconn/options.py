"""Immutable connection options and the builder that validates them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from . import properties as props
from .credentials import (
    CredentialSource,
    CredentialsService,
    get_default_project_id,
    select_credential_source,
)
from .errors import ConnectionOptionsError, MissingFieldError, MissingUriError
from .interceptors import StatementExecutionInterceptor, ensure_interceptors
from .uri import (
    DEFAULT_PROJECT_ID_PLACEHOLDER,
    UriMatch,
    check_valid_properties,
    match_uri,
    parse_boolean,
    parse_integer_property,
    parse_uri_property,
)

LOG = logging.getLogger(__name__)

DEFAULT_HOST = "https://spanner.googleapis.com"
DEFAULT_EMULATOR_HOST = "http://localhost:9010"
PLAIN_TEXT_PROTOCOL = "http:"
HOST_PROTOCOL = "https:"

OptionsConfigurator = Callable[[Any], None]


class SessionPoolOptions(BaseModel):
    """Session pool sizing handed to the session pool factory."""

    model_config = ConfigDict(frozen=True)

    min_sessions: int = Field(default=100, ge=0)
    max_sessions: int = Field(default=400, ge=0)
    write_sessions_fraction: float = Field(default=0.2, ge=0.0, le=1.0)
    fail_if_pool_exhausted: bool = False

    @model_validator(mode="after")
    def _check_bounds(self) -> "SessionPoolOptions":
        if self.min_sessions > self.max_sessions:
            raise ValueError(
                f"Min sessions({self.min_sessions}) must be <= max sessions({self.max_sessions})"
            )
        return self

    def with_overrides(
        self,
        *,
        min_sessions: int | None = None,
        max_sessions: int | None = None,
    ) -> SessionPoolOptions:
        """Return a validated copy with the given pool sizes applied."""

        data = self.model_dump()
        if min_sessions is not None:
            data["min_sessions"] = min_sessions
        if max_sessions is not None:
            data["max_sessions"] = max_sessions
        return SessionPoolOptions.model_validate(data)


class QueryOptions(BaseModel):
    """Default query options applied to every statement on the connection."""

    model_config = ConfigDict(frozen=True)

    optimizer_version: str = props.DEFAULT_OPTIMIZER_VERSION
    optimizer_statistics_package: str = props.DEFAULT_OPTIMIZER_STATISTICS_PACKAGE


@dataclass(frozen=True, slots=True)
class DatabaseId:
    project: str
    instance: str
    database: str

    @property
    def name(self) -> str:
        return f"projects/{self.project}/instances/{self.instance}/databases/{self.database}"


@dataclass(frozen=True, slots=True)
class ConnectionOptions:
    """Validated configuration of a single logical connection.

    Instances are created through :class:`ConnectionOptionsBuilder` and never
    change afterwards. ``str()`` gives back the URI they were parsed from.
    """

    uri: str
    host: str
    project_id: str | None
    instance_id: str | None
    database_name: str | None
    credential_source: CredentialSource
    credentials: Any
    credentials_url: str | None = None
    encoded_credentials: str | None = None
    oauth_token: str | None = None
    fixed_credentials: Any = None
    autocommit: bool = props.DEFAULT_AUTOCOMMIT
    read_only: bool = props.DEFAULT_READONLY
    retry_aborts_internally: bool = props.DEFAULT_RETRY_ABORTS_INTERNALLY
    use_plain_text: bool = props.DEFAULT_USE_PLAIN_TEXT
    return_commit_stats: bool = props.DEFAULT_RETURN_COMMIT_STATS
    auto_config_emulator: bool = props.DEFAULT_AUTO_CONFIG_EMULATOR
    min_sessions: int | None = None
    max_sessions: int | None = None
    num_channels: int | None = None
    session_pool_options: SessionPoolOptions | None = None
    user_agent: str | None = None
    query_options: QueryOptions = QueryOptions()
    statement_execution_interceptors: tuple[StatementExecutionInterceptor, ...] = ()
    warnings: str | None = None
    configurator: OptionsConfigurator | None = None

    @classmethod
    def builder(cls) -> ConnectionOptionsBuilder:
        return ConnectionOptionsBuilder()

    @property
    def database_id(self) -> DatabaseId:
        """Fully qualified database id; every coordinate must be resolved."""

        if self.project_id is None:
            raise MissingFieldError("Project ID is not specified")
        if self.instance_id is None:
            raise MissingFieldError("Instance ID is not specified")
        if self.database_name is None:
            raise MissingFieldError("Database name is not specified")
        return DatabaseId(self.project_id, self.instance_id, self.database_name)

    def __str__(self) -> str:
        return self.uri


class ConnectionOptionsBuilder:
    """Collects a URI and programmatic overrides, then validates them in build()."""

    def __init__(self) -> None:
        self._uri: str | None = None
        self._credentials_url: str | None = None
        self._oauth_token: str | None = None
        self._credentials: Any = None
        self._session_pool_options: SessionPoolOptions | None = None
        self._interceptors: tuple[StatementExecutionInterceptor, ...] = ()
        self._configurator: OptionsConfigurator | None = None
        self._credentials_service: CredentialsService | None = None

    def set_uri(self, uri: str) -> ConnectionOptionsBuilder:
        """Set the connection URI; the grammar and property keys are checked here."""

        match_uri(uri)
        check_valid_properties(uri)
        self._uri = uri
        return self

    def set_credentials_url(self, credentials_url: str | None) -> ConnectionOptionsBuilder:
        self._credentials_url = credentials_url
        return self

    def set_oauth_token(self, oauth_token: str | None) -> ConnectionOptionsBuilder:
        self._oauth_token = oauth_token
        return self

    def set_credentials(self, credentials: Any) -> ConnectionOptionsBuilder:
        self._credentials = credentials
        return self

    def set_session_pool_options(self, options: SessionPoolOptions) -> ConnectionOptionsBuilder:
        if options is None:
            raise TypeError("session pool options must not be None")
        self._session_pool_options = options
        return self

    def set_statement_execution_interceptors(
        self,
        interceptors: Iterable[StatementExecutionInterceptor],
    ) -> ConnectionOptionsBuilder:
        self._interceptors = ensure_interceptors(interceptors)
        return self

    def set_configurator(self, configurator: OptionsConfigurator) -> ConnectionOptionsBuilder:
        """Hook that receives the client options before a client is created."""

        if configurator is None:
            raise TypeError("configurator must not be None")
        self._configurator = configurator
        return self

    def set_credentials_service(self, service: CredentialsService) -> ConnectionOptionsBuilder:
        self._credentials_service = service
        return self

    def build(self) -> ConnectionOptions:
        if self._uri is None:
            raise MissingUriError("Connection URI is required")
        uri = self._uri
        match = match_uri(uri)
        warnings = check_valid_properties(uri)
        if warnings:
            LOG.warning("Ignoring unknown connection properties", extra={"warnings": warnings})

        credentials_url = (
            self._credentials_url
            if self._credentials_url is not None
            else parse_uri_property(uri, props.CREDENTIALS)
        )
        encoded_credentials = parse_uri_property(uri, props.ENCODED_CREDENTIALS)
        oauth_token = (
            self._oauth_token
            if self._oauth_token is not None
            else parse_uri_property(uri, props.OAUTH_TOKEN)
        )

        user_agent = parse_uri_property(uri, props.USER_AGENT)
        query_options = QueryOptions(
            optimizer_version=_string_property(uri, props.OPTIMIZER_VERSION, props.DEFAULT_OPTIMIZER_VERSION),
            optimizer_statistics_package=_string_property(
                uri,
                props.OPTIMIZER_STATISTICS_PACKAGE,
                props.DEFAULT_OPTIMIZER_STATISTICS_PACKAGE,
            ),
        )
        return_commit_stats = _bool_property(uri, props.RETURN_COMMIT_STATS, props.DEFAULT_RETURN_COMMIT_STATS)
        auto_config_emulator = _bool_property(uri, props.AUTO_CONFIG_EMULATOR, props.DEFAULT_AUTO_CONFIG_EMULATOR)
        use_plain_text = auto_config_emulator or _bool_property(
            uri, props.USE_PLAIN_TEXT, props.DEFAULT_USE_PLAIN_TEXT
        )
        host = _determine_host(match, auto_config_emulator=auto_config_emulator, use_plain_text=use_plain_text)

        source = select_credential_source(
            explicit=self._credentials,
            oauth_token=oauth_token,
            encoded=encoded_credentials,
            location=credentials_url,
            use_plain_text=use_plain_text,
        )
        service = self._credentials_service or CredentialsService()
        credentials, ambient_project = service.resolve_with_project(source)

        min_sessions = parse_integer_property(props.MIN_SESSIONS, parse_uri_property(uri, props.MIN_SESSIONS))
        max_sessions = parse_integer_property(props.MAX_SESSIONS, parse_uri_property(uri, props.MAX_SESSIONS))
        num_channels = parse_integer_property(props.NUM_CHANNELS, parse_uri_property(uri, props.NUM_CHANNELS))

        project_id: str | None = match.project
        if project_id.upper() == DEFAULT_PROJECT_ID_PLACEHOLDER:
            project_id = get_default_project_id(credentials, ambient_project=ambient_project)

        session_pool_options = self._session_pool_options
        if min_sessions is not None or max_sessions is not None:
            base = session_pool_options or SessionPoolOptions()
            try:
                session_pool_options = base.with_overrides(min_sessions=min_sessions, max_sessions=max_sessions)
            except ValidationError as exc:
                raise ConnectionOptionsError(f"Invalid session pool settings in connection URI: {exc}") from exc

        options = ConnectionOptions(
            uri=uri,
            host=host,
            project_id=project_id,
            instance_id=match.instance,
            database_name=match.database,
            credential_source=source,
            credentials=credentials,
            credentials_url=credentials_url,
            encoded_credentials=encoded_credentials,
            oauth_token=oauth_token,
            fixed_credentials=self._credentials,
            autocommit=_bool_property(uri, props.AUTOCOMMIT, props.DEFAULT_AUTOCOMMIT),
            read_only=_bool_property(uri, props.READONLY, props.DEFAULT_READONLY),
            retry_aborts_internally=_bool_property(
                uri, props.RETRY_ABORTS_INTERNALLY, props.DEFAULT_RETRY_ABORTS_INTERNALLY
            ),
            use_plain_text=use_plain_text,
            return_commit_stats=return_commit_stats,
            auto_config_emulator=auto_config_emulator,
            min_sessions=min_sessions,
            max_sessions=max_sessions,
            num_channels=num_channels,
            session_pool_options=session_pool_options,
            user_agent=user_agent,
            query_options=query_options,
            statement_execution_interceptors=self._interceptors,
            warnings=warnings,
            configurator=self._configurator,
        )
        LOG.debug(
            "Built connection options",
            extra={"host": host, "project": project_id, "credentials": source.kind.value},
        )
        return options


def _determine_host(match: UriMatch, *, auto_config_emulator: bool, use_plain_text: bool) -> str:
    if match.host is None:
        return DEFAULT_EMULATOR_HOST if auto_config_emulator else DEFAULT_HOST
    protocol = PLAIN_TEXT_PROTOCOL if use_plain_text else HOST_PROTOCOL
    return protocol + match.host


def _bool_property(uri: str, name: str, default: bool) -> bool:
    return parse_boolean(parse_uri_property(uri, name), default)


def _string_property(uri: str, name: str, default: str) -> str:
    value = parse_uri_property(uri, name)
    return value if value is not None else default


__all__ = [
    "ConnectionOptions",
    "ConnectionOptionsBuilder",
    "DEFAULT_EMULATOR_HOST",
    "DEFAULT_HOST",
    "DatabaseId",
    "QueryOptions",
    "SessionPoolOptions",
]
