"""SQL type codes and the type-name lookup service.

``SqlType`` enumerates the driver-level type codes a binding may carry.  The
numeric values are the widely used JDBC / ODBC codes so they can be handed to
drivers and bridges that expect them; ``SqlType.UNKNOWN`` is the sentinel
used when a placeholder has no declared type.

``TypeMappings`` converts declared type names (``"INTEGER"``,
``"varchar(40)"``, ``"bool"``) into ``SqlType`` codes.  The default instance
backs the module-level :func:`string_to_sql_type`; callers may build their own
instance and register additional aliases::

    mappings = TypeMappings()
    mappings.register("MONEY", SqlType.DECIMAL)
    mappings.string_to_sql_type("money")   # SqlType.DECIMAL
"""
from __future__ import annotations

import re
from enum import IntEnum

from fragql.errors import UnknownTypeError


class SqlType(IntEnum):
    """Driver-level SQL type codes."""

    UNKNOWN = -(2**31)

    ARRAY = 2003
    BIGINT = -5
    BINARY = -2
    BIT = -7
    BLOB = 2004
    BOOLEAN = 16
    CHAR = 1
    CLOB = 2005
    DATALINK = 70
    DATE = 91
    DECIMAL = 3
    DISTINCT = 2001
    DOUBLE = 8
    FLOAT = 6
    INTEGER = 4
    JAVA_OBJECT = 2000
    LONGNVARCHAR = -16
    LONGVARBINARY = -4
    LONGVARCHAR = -1
    NCHAR = -15
    NCLOB = 2011
    NULL = 0
    NUMERIC = 2
    NVARCHAR = -9
    OTHER = 1111
    REAL = 7
    REF = 2006
    ROWID = -8
    SMALLINT = 5
    SQLXML = 2009
    STRUCT = 2002
    TIME = 92
    TIMESTAMP = 93
    TINYINT = -6
    VARBINARY = -3
    VARCHAR = 12


# Common spellings that are not enum member names.
_DEFAULT_ALIASES: dict[str, SqlType] = {
    "BOOL": SqlType.BOOLEAN,
    "BYTEA": SqlType.VARBINARY,
    "CHARACTER": SqlType.CHAR,
    "CHARACTER VARYING": SqlType.VARCHAR,
    "DATETIME": SqlType.TIMESTAMP,
    "DEC": SqlType.DECIMAL,
    "DOUBLE PRECISION": SqlType.DOUBLE,
    "INT": SqlType.INTEGER,
    "INT2": SqlType.SMALLINT,
    "INT4": SqlType.INTEGER,
    "INT8": SqlType.BIGINT,
    "NUMBER": SqlType.NUMERIC,
    "STRING": SqlType.VARCHAR,
    "TEXT": SqlType.LONGVARCHAR,
    "VARCHAR2": SqlType.VARCHAR,
    "XML": SqlType.SQLXML,
}

# Strips a trailing length / precision spec: ``VARCHAR(40)``, ``NUMERIC(10, 2)``.
_TYPE_ARGS_RE = re.compile(r"\s*\(.*\)\s*$")


def _normalize(name: str) -> str:
    return " ".join(_TYPE_ARGS_RE.sub("", name).split()).upper()


class TypeMappings:
    """Case-insensitive type-name → :class:`SqlType` lookup.

    Args:
        aliases: Extra name → type entries layered over the built-in ones.
    """

    def __init__(self, aliases: dict[str, SqlType] | None = None) -> None:
        self._names: dict[str, SqlType] = {
            member.name: member for member in SqlType if member is not SqlType.UNKNOWN
        }
        self._names.update(_DEFAULT_ALIASES)
        for alias, sql_type in (aliases or {}).items():
            self.register(alias, sql_type)

    def register(self, name: str, sql_type: SqlType) -> None:
        """Register ``name`` (case-insensitive) as an alias for ``sql_type``."""
        self._names[_normalize(name)] = SqlType(sql_type)

    def string_to_sql_type(self, name: str) -> SqlType:
        """Convert a declared type name to its :class:`SqlType` code.

        Args:
            name: Type name such as ``"INTEGER"`` or ``"varchar(40)"``.

        Returns:
            The matching :class:`SqlType`.

        Raises:
            UnknownTypeError: If ``name`` is not a known type or alias.
        """
        sql_type = self._names.get(_normalize(name))
        if sql_type is None:
            raise UnknownTypeError(name, known=self.known_names)
        return sql_type

    @property
    def known_names(self) -> list[str]:
        """Returns every accepted type name, sorted."""
        return sorted(self._names)


_DEFAULT_MAPPINGS = TypeMappings()


def default_type_mappings() -> TypeMappings:
    """Return the process-wide :class:`TypeMappings` instance."""
    return _DEFAULT_MAPPINGS


def string_to_sql_type(name: str) -> SqlType:
    """Convert ``name`` using the process-wide :class:`TypeMappings`."""
    return _DEFAULT_MAPPINGS.string_to_sql_type(name)
