"""Connection URI grammar and property extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import InvalidIntegerPropertyError, InvalidUriError, UnknownPropertyError
from .properties import DEFAULT_LENIENT, LENIENT, is_known_property

DEFAULT_PROJECT_ID_PLACEHOLDER = "DEFAULT_PROJECT_ID"

URI_FORMAT_HINT = (
    "cloudspanner:[//host[:port]]/projects/project-id[/instances/instance-id"
    "[/databases/database-name]][\\?property-name=property-value[;property-name=property-value]*]?"
)

URI_FORMAT = (
    r"(?:cloudspanner:)"
    r"(?P<host>//[\w.-]+(?:\.[\w\.-]+)*[\w\-\._~:/?#\[\]@!\$&'\(\)\*\+,;=.]+)?"
    r"/projects/(?P<project>(([a-z]|[-.:]|[0-9])+|(" + DEFAULT_PROJECT_ID_PLACEHOLDER + r")))"
    r"(/instances/(?P<instance>([a-z]|[-]|[0-9])+)"
    r"(/databases/(?P<database>([a-z]|[-]|[_]|[0-9])+))?)?"
    r"(?:[?|;].*)?"
)

_URI_PATTERN = re.compile(URI_FORMAT, re.IGNORECASE | re.DOTALL)
_PROPERTY_KEY_PATTERN = re.compile(r"(?:\?|;)(?P<property>.*?)=", re.IGNORECASE | re.DOTALL)
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


@dataclass(frozen=True, slots=True)
class UriMatch:
    """Coordinates captured from a connection URI."""

    host: str | None
    project: str
    instance: str | None
    database: str | None


def is_valid_uri(uri: str) -> bool:
    """Return True when ``uri`` matches the complete connection URI grammar."""

    return _URI_PATTERN.fullmatch(uri) is not None


def match_uri(uri: str) -> UriMatch:
    """Split ``uri`` into its coordinates or raise InvalidUriError."""

    match = _URI_PATTERN.fullmatch(uri)
    if match is None:
        raise InvalidUriError(
            "The specified URI is not a valid Cloud Spanner connection URI. "
            f'Please specify a URI in the format "{URI_FORMAT_HINT}"'
        )
    return UriMatch(
        host=match.group("host"),
        project=match.group("project"),
        instance=match.group("instance"),
        database=match.group("database"),
    )


def parse_uri_property(uri: str, name: str) -> str | None:
    """Return the value of the first ``;name=`` or ``?name=`` segment, if any."""

    pattern = re.compile(
        rf"(?:;|\?){re.escape(name)}=(.*?)(?:;|$)",
        re.IGNORECASE | re.DOTALL,
    )
    match = pattern.search(uri)
    if match is None:
        return None
    return match.group(1)


def parse_properties(uri: str) -> list[str]:
    """Return every property key in ``uri`` in order of appearance."""

    return [match.group("property") for match in _PROPERTY_KEY_PATTERN.finditer(uri)]


def parse_boolean(value: str | None, default: bool) -> bool:
    """Interpret a boolean property; anything other than "true" is False."""

    if value is None:
        return default
    return value.lower() == "true"


def parse_integer_property(name: str, value: str | None) -> int | None:
    if value is None:
        return None
    if _INTEGER_PATTERN.fullmatch(value) is None:
        raise InvalidIntegerPropertyError(name, value)
    parsed = int(value)
    if not INT32_MIN <= parsed <= INT32_MAX:
        raise InvalidIntegerPropertyError(name, value)
    return parsed


def parse_lenient(uri: str) -> bool:
    return parse_boolean(parse_uri_property(uri, LENIENT), DEFAULT_LENIENT)


def check_valid_properties(uri: str) -> str | None:
    """Reject unknown properties, or describe them when lenient=true.

    Returns the warning string collected in lenient mode, ``None`` when every
    property is recognized.
    """

    invalid = tuple(name for name in parse_properties(uri) if not is_known_property(name))
    if not invalid:
        return None
    listing = ", ".join(invalid)
    if parse_lenient(uri):
        return f"Invalid properties found in connection URI: {listing}"
    raise UnknownPropertyError(
        "Invalid properties found in connection URI. Add lenient=true to the connection "
        f"string to ignore unknown properties. Invalid properties: {listing}",
        invalid,
    )


__all__ = [
    "DEFAULT_PROJECT_ID_PLACEHOLDER",
    "URI_FORMAT",
    "URI_FORMAT_HINT",
    "UriMatch",
    "check_valid_properties",
    "is_valid_uri",
    "match_uri",
    "parse_boolean",
    "parse_integer_property",
    "parse_lenient",
    "parse_properties",
    "parse_uri_property",
]
