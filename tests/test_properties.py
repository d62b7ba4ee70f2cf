"""Tests for the connection property registry."""

from __future__ import annotations

from spannerconn.properties import (
    AUTOCOMMIT,
    INTERNAL_PROPERTIES,
    VALID_PROPERTIES,
    ConnectionProperty,
    get_property,
    is_known_property,
)


def test_valid_properties_cover_every_public_key() -> None:
    names = {prop.name for prop in VALID_PROPERTIES}

    assert len(VALID_PROPERTIES) == 16
    assert {"autocommit", "readonly", "lenient", "autoConfigEmulator", "userAgent"} <= names


def test_property_equality_ignores_case() -> None:
    assert ConnectionProperty.empty("AutoCommit") == ConnectionProperty.empty("autocommit")
    assert hash(ConnectionProperty.empty("AUTOCOMMIT")) == hash(ConnectionProperty.empty("autocommit"))
    assert ConnectionProperty.empty("READONLY") in VALID_PROPERTIES


def test_boolean_property_exposes_default_and_valid_values() -> None:
    prop = get_property("AUTOCOMMIT")

    assert prop is not None
    assert prop.name == AUTOCOMMIT
    assert prop.default_value == "true"
    assert prop.valid_values == ("true", "false")


def test_string_property_is_unrestricted() -> None:
    prop = get_property("credentials")

    assert prop is not None
    assert prop.default_value == ""
    assert prop.valid_values is None
    assert "credentials file" in prop.description


def test_user_agent_is_internal_and_known() -> None:
    assert ConnectionProperty.empty("userAgent") in INTERNAL_PROPERTIES
    assert is_known_property("useragent")
    assert not is_known_property("unknownProperty")
