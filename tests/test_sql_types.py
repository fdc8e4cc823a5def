"""Unit tests for SqlType and TypeMappings."""

from __future__ import annotations

import pytest

from fragql.errors import UnknownTypeError
from fragql.schema.sql_types import SqlType, TypeMappings, string_to_sql_type


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("INTEGER", SqlType.INTEGER),
        ("integer", SqlType.INTEGER),
        ("  Varchar ", SqlType.VARCHAR),
        ("VARCHAR(40)", SqlType.VARCHAR),
        ("numeric(10, 2)", SqlType.NUMERIC),
        ("BOOLEAN", SqlType.BOOLEAN),
        ("bool", SqlType.BOOLEAN),
        ("INT", SqlType.INTEGER),
        ("TEXT", SqlType.LONGVARCHAR),
        ("datetime", SqlType.TIMESTAMP),
        ("double precision", SqlType.DOUBLE),
        ("character  varying(10)", SqlType.VARCHAR),
    ],
)
def test_string_to_sql_type(name, expected):
    assert string_to_sql_type(name) is expected


def test_codes_match_driver_constants():
    assert SqlType.INTEGER == 4
    assert SqlType.VARCHAR == 12
    assert SqlType.TIMESTAMP == 93
    assert SqlType.BOOLEAN == 16


def test_unknown_is_not_a_declared_type_name():
    with pytest.raises(UnknownTypeError):
        string_to_sql_type("UNKNOWN")


def test_unknown_name_raises_with_known_names():
    with pytest.raises(UnknownTypeError) as exc_info:
        string_to_sql_type("GEOMETRY")
    err = exc_info.value
    assert err.type_name == "GEOMETRY"
    assert "INTEGER" in err.known
    assert "GEOMETRY" in str(err)


def test_registered_alias_is_case_insensitive():
    mappings = TypeMappings()
    mappings.register("money", SqlType.DECIMAL)
    assert mappings.string_to_sql_type("MONEY") is SqlType.DECIMAL
    assert "MONEY" in mappings.known_names


def test_registration_does_not_leak_into_default_mappings():
    TypeMappings({"GEOGRAPHY": SqlType.OTHER})
    with pytest.raises(UnknownTypeError):
        string_to_sql_type("GEOGRAPHY")
