"""Errors raised while building connection options."""

from __future__ import annotations


class ConnectionOptionsError(ValueError):
    """Base error for invalid connection URIs and builder input."""


class InvalidUriError(ConnectionOptionsError):
    """Raised when a URI does not match the connection URI grammar."""


class UnknownPropertyError(ConnectionOptionsError):
    """Raised when a URI carries properties that are not recognized."""

    def __init__(self, message: str, properties: tuple[str, ...]) -> None:
        super().__init__(message)
        self.properties = properties


class ConflictingCredentialsError(ConnectionOptionsError):
    """Raised when more than one credential source was supplied."""


class InvalidIntegerPropertyError(ConnectionOptionsError):
    """Raised when an integer-valued property cannot be parsed."""

    error_code = "INVALID_ARGUMENT"

    def __init__(self, property_name: str, value: str) -> None:
        super().__init__(f"Invalid {property_name} value specified: {value}")
        self.property_name = property_name
        self.value = value


class MissingUriError(ConnectionOptionsError):
    """Raised when build() is called before a URI was set."""


class MissingFieldError(ConnectionOptionsError):
    """Raised when a coordinate required by the caller was not resolved."""


class CredentialsError(RuntimeError):
    """Raised when credentials cannot be decoded or loaded."""


class ClientsStillInUseError(RuntimeError):
    """Raised when shared clients are closed while owners still hold them."""

    def __init__(self, owners: tuple[str, ...]) -> None:
        super().__init__(
            f"{len(owners)} connection(s) still open. Close all connections before "
            f"closing the shared clients. Open owners: {', '.join(owners)}"
        )
        self.owners = owners


__all__ = [
    "ClientsStillInUseError",
    "ConflictingCredentialsError",
    "ConnectionOptionsError",
    "CredentialsError",
    "InvalidIntegerPropertyError",
    "InvalidUriError",
    "MissingFieldError",
    "MissingUriError",
    "UnknownPropertyError",
]
