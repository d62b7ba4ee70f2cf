"""Registry of the properties recognized in a connection URI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

BOOLEAN_VALUES: tuple[str, ...] = ("true", "false")

AUTOCOMMIT = "autocommit"
READONLY = "readonly"
RETRY_ABORTS_INTERNALLY = "retryAbortsInternally"
CREDENTIALS = "credentials"
ENCODED_CREDENTIALS = "encodedCredentials"
OAUTH_TOKEN = "oauthToken"
MIN_SESSIONS = "minSessions"
MAX_SESSIONS = "maxSessions"
NUM_CHANNELS = "numChannels"
USE_PLAIN_TEXT = "usePlainText"
USER_AGENT = "userAgent"
OPTIMIZER_VERSION = "optimizerVersion"
OPTIMIZER_STATISTICS_PACKAGE = "optimizerStatisticsPackage"
RETURN_COMMIT_STATS = "returnCommitStats"
AUTO_CONFIG_EMULATOR = "autoConfigEmulator"
LENIENT = "lenient"

DEFAULT_AUTOCOMMIT = True
DEFAULT_READONLY = False
DEFAULT_RETRY_ABORTS_INTERNALLY = True
DEFAULT_USE_PLAIN_TEXT = False
DEFAULT_RETURN_COMMIT_STATS = False
DEFAULT_AUTO_CONFIG_EMULATOR = False
DEFAULT_LENIENT = False
DEFAULT_OPTIMIZER_VERSION = ""
DEFAULT_OPTIMIZER_STATISTICS_PACKAGE = ""


@dataclass(frozen=True, slots=True)
class ConnectionProperty:
    """A recognized connection property; compared case-insensitively by name."""

    name: str
    description: str = field(default="", compare=False)
    default_value: str = field(default="", compare=False)
    valid_values: tuple[str, ...] | None = field(default=None, compare=False)

    @classmethod
    def string(cls, name: str, description: str) -> "ConnectionProperty":
        return cls(name, description, "", None)

    @classmethod
    def boolean(cls, name: str, description: str, default: bool) -> "ConnectionProperty":
        return cls(name, description, str(default).lower(), BOOLEAN_VALUES)

    @classmethod
    def empty(cls, name: str) -> "ConnectionProperty":
        """Key-only property used for lookups."""

        return cls(name)

    @property
    def key(self) -> str:
        return self.name.lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConnectionProperty):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


VALID_PROPERTIES: frozenset[ConnectionProperty] = frozenset(
    (
        ConnectionProperty.boolean(
            AUTOCOMMIT,
            "Should the connection start in autocommit (true/false)",
            DEFAULT_AUTOCOMMIT,
        ),
        ConnectionProperty.boolean(
            READONLY,
            "Should the connection start in read-only mode (true/false)",
            DEFAULT_READONLY,
        ),
        ConnectionProperty.boolean(
            RETRY_ABORTS_INTERNALLY,
            "Should the connection automatically retry Aborted errors (true/false)",
            DEFAULT_RETRY_ABORTS_INTERNALLY,
        ),
        ConnectionProperty.string(
            CREDENTIALS,
            "The location of the credentials file to use for this connection. If neither this "
            "property or encoded credentials are set, the connection will use the default Google "
            "Cloud credentials for the runtime environment.",
        ),
        ConnectionProperty.string(
            ENCODED_CREDENTIALS,
            "Base64-encoded credentials to use for this connection. If neither this property or a "
            "credentials location are set, the connection will use the default Google Cloud "
            "credentials for the runtime environment.",
        ),
        ConnectionProperty.string(
            OAUTH_TOKEN,
            "A valid pre-existing OAuth token to use for authentication for this connection. "
            "Setting this property will take precedence over any value set for a credentials file.",
        ),
        ConnectionProperty.string(
            MIN_SESSIONS,
            "The minimum number of sessions in the backing session pool. The default is 100.",
        ),
        ConnectionProperty.string(
            MAX_SESSIONS,
            "The maximum number of sessions in the backing session pool. The default is 400.",
        ),
        ConnectionProperty.string(
            NUM_CHANNELS,
            "The number of gRPC channels to use to communicate with Cloud Spanner. The default is 4.",
        ),
        ConnectionProperty.boolean(
            USE_PLAIN_TEXT,
            "Use a plain text communication channel (i.e. non-TLS) for communicating with the "
            "server (true/false). Set this value to true for communication with the Cloud "
            "Spanner emulator.",
            DEFAULT_USE_PLAIN_TEXT,
        ),
        ConnectionProperty.string(
            USER_AGENT,
            "The custom user-agent property name to use when communicating with Cloud Spanner. "
            "This property is intended for internal library usage, and should not be set by "
            "applications.",
        ),
        ConnectionProperty.string(
            OPTIMIZER_VERSION,
            "Sets the default query optimizer version to use for this connection.",
        ),
        ConnectionProperty.string(OPTIMIZER_STATISTICS_PACKAGE, ""),
        ConnectionProperty.boolean(RETURN_COMMIT_STATS, "", DEFAULT_RETURN_COMMIT_STATS),
        ConnectionProperty.boolean(
            AUTO_CONFIG_EMULATOR,
            "Automatically configure the connection to try to connect to the Cloud Spanner "
            "emulator (true/false). The instance and database in the connection string will "
            "automatically be created if these do not yet exist on the emulator.",
            DEFAULT_AUTO_CONFIG_EMULATOR,
        ),
        ConnectionProperty.boolean(
            LENIENT,
            "Silently ignore unknown properties in the connection string/properties (true/false)",
            DEFAULT_LENIENT,
        ),
    )
)

INTERNAL_PROPERTIES: frozenset[ConnectionProperty] = frozenset(
    (ConnectionProperty.string(USER_AGENT, ""),)
)


def _index(properties: Iterable[ConnectionProperty]) -> Mapping[str, ConnectionProperty]:
    return {prop.key: prop for prop in properties}


# Public descriptors win over the internal placeholder for userAgent.
_KNOWN: Mapping[str, ConnectionProperty] = {
    **_index(INTERNAL_PROPERTIES),
    **_index(VALID_PROPERTIES),
}


def get_property(name: str) -> ConnectionProperty | None:
    """Return the descriptor for ``name`` (case-insensitive), if recognized."""

    return _KNOWN.get(name.lower())


def is_known_property(name: str) -> bool:
    return name.lower() in _KNOWN


__all__ = [
    "AUTOCOMMIT",
    "AUTO_CONFIG_EMULATOR",
    "BOOLEAN_VALUES",
    "CREDENTIALS",
    "ConnectionProperty",
    "ENCODED_CREDENTIALS",
    "INTERNAL_PROPERTIES",
    "LENIENT",
    "MAX_SESSIONS",
    "MIN_SESSIONS",
    "NUM_CHANNELS",
    "OAUTH_TOKEN",
    "OPTIMIZER_STATISTICS_PACKAGE",
    "OPTIMIZER_VERSION",
    "READONLY",
    "RETRY_ABORTS_INTERNALLY",
    "RETURN_COMMIT_STATS",
    "USER_AGENT",
    "USE_PLAIN_TEXT",
    "VALID_PROPERTIES",
    "get_property",
    "is_known_property",
]
