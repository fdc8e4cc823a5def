"""Bridges between fragQL and SQLAlchemy.

Type mapping
------------
:func:`sql_type_to_sqlalchemy` and :func:`sql_type_from_sqlalchemy` convert
between :class:`~fragql.schema.sql_types.SqlType` codes and SQLAlchemy's
generic types.  :func:`declared_types_from_table` turns a reflected
:class:`~sqlalchemy.schema.Table` into a declared-types mapping for
``compile_template``.

Execution
---------
:func:`to_sqlalchemy_text` binds a compiled template against an invocation
and returns a :class:`~sqlalchemy.sql.expression.TextClause` whose bind
parameters carry the mapped SQLAlchemy types.

Install the optional dependency before using this module::

    pip install "fragql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from fragql import InvocationContext, compile_template
    from fragql.schema.converters import to_sqlalchemy_text

    engine = create_engine("sqlite:///mydb.db")
    template = compile_template("SELECT * FROM emp WHERE id = {emp_id}", {"emp_id": "INTEGER"})
    clause = to_sqlalchemy_text(template, InvocationContext.bind(find, 42))
    with engine.connect() as conn:
        rows = conn.execute(clause).all()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fragql.compile.assembler import StatementAssembler
from fragql.resolve.resolver import ValueResolver
from fragql.schema.invocation import InvocationContext
from fragql.schema.sql_types import SqlType
from fragql.schema.template import CompiledTemplate

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.sql.expression import TextClause
    from sqlalchemy.types import TypeEngine


def _require_sqlalchemy():
    try:
        import sqlalchemy
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for fragql.schema.converters. "
            'Install it with: pip install "fragql[sqlalchemy]"'
        ) from exc
    return sqlalchemy


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------


def sql_type_to_sqlalchemy(sql_type: SqlType) -> TypeEngine | None:
    """Return a SQLAlchemy type instance for ``sql_type``.

    Returns ``None`` for ``SqlType.UNKNOWN`` and for codes without a generic
    SQLAlchemy equivalent (``ARRAY``, ``STRUCT``, ``REF``, …); SQLAlchemy then
    infers the type from the bound value.
    """
    sa = _require_sqlalchemy()
    factories = {
        SqlType.BIGINT: sa.BigInteger,
        SqlType.BINARY: sa.LargeBinary,
        SqlType.BIT: sa.Boolean,
        SqlType.BLOB: sa.LargeBinary,
        SqlType.BOOLEAN: sa.Boolean,
        SqlType.CHAR: sa.String,
        SqlType.CLOB: sa.Text,
        SqlType.DATE: sa.Date,
        SqlType.DECIMAL: sa.Numeric,
        SqlType.DOUBLE: sa.Float,
        SqlType.FLOAT: sa.Float,
        SqlType.INTEGER: sa.Integer,
        SqlType.LONGNVARCHAR: sa.UnicodeText,
        SqlType.LONGVARBINARY: sa.LargeBinary,
        SqlType.LONGVARCHAR: sa.Text,
        SqlType.NCHAR: sa.Unicode,
        SqlType.NCLOB: sa.UnicodeText,
        SqlType.NULL: sa.types.NullType,
        SqlType.NUMERIC: sa.Numeric,
        SqlType.NVARCHAR: sa.Unicode,
        SqlType.REAL: sa.Float,
        SqlType.SMALLINT: sa.SmallInteger,
        SqlType.TIME: sa.Time,
        SqlType.TIMESTAMP: sa.DateTime,
        SqlType.TINYINT: sa.SmallInteger,
        SqlType.VARBINARY: sa.LargeBinary,
        SqlType.VARCHAR: sa.String,
    }
    factory = factories.get(sql_type)
    return factory() if factory is not None else None


def sql_type_from_sqlalchemy(type_: TypeEngine) -> SqlType:
    """Return the :class:`SqlType` closest to a SQLAlchemy type instance.

    Subclasses are checked before their bases (``Text`` before ``String``,
    ``Float`` before ``Numeric``); anything unrecognised maps to
    ``SqlType.UNKNOWN``.
    """
    sa = _require_sqlalchemy()
    ordered = (
        (sa.Boolean, SqlType.BOOLEAN),
        (sa.BigInteger, SqlType.BIGINT),
        (sa.SmallInteger, SqlType.SMALLINT),
        (sa.Integer, SqlType.INTEGER),
        (sa.Float, SqlType.DOUBLE),
        (sa.Numeric, SqlType.NUMERIC),
        (sa.DateTime, SqlType.TIMESTAMP),
        (sa.Date, SqlType.DATE),
        (sa.Time, SqlType.TIME),
        (sa.UnicodeText, SqlType.LONGNVARCHAR),
        (sa.Text, SqlType.LONGVARCHAR),
        (sa.Unicode, SqlType.NVARCHAR),
        (sa.String, SqlType.VARCHAR),
        (sa.LargeBinary, SqlType.VARBINARY),
    )
    for sa_type, sql_type in ordered:
        if isinstance(type_, sa_type):
            return sql_type
    return SqlType.UNKNOWN


def declared_types_from_table(table: Table, parameter: str) -> dict[str, str]:
    """Build a declared-types mapping for ``{parameter.<column>}`` placeholders.

    Columns whose type has no :class:`SqlType` equivalent are skipped.

    Args:
        table: A SQLAlchemy table, declared or reflected.
        parameter: The method parameter holding the row object.

    Returns:
        Mapping such as ``{"emp.name": "VARCHAR", "emp.hired": "DATE"}``.
    """
    declared: dict[str, str] = {}
    for column in table.columns:
        sql_type = sql_type_from_sqlalchemy(column.type)
        if sql_type is not SqlType.UNKNOWN:
            declared[f"{parameter}.{column.name}"] = sql_type.name
    return declared


# ---------------------------------------------------------------------------
# Execution bridge
# ---------------------------------------------------------------------------


def to_sqlalchemy_text(
    template: CompiledTemplate,
    context: InvocationContext,
    resolver: ValueResolver | None = None,
) -> TextClause:
    """Bind ``template`` for one invocation as a SQLAlchemy ``TextClause``.

    Markers are rendered in the ``named`` paramstyle (``:p0``, ``:p1``, …) and
    each bind parameter receives the SQLAlchemy type mapped from its
    declared :class:`SqlType`.

    Raises:
        ResolutionError: (or subclass) if a placeholder cannot be resolved.
        ImportError: If ``sqlalchemy`` is not installed.
    """
    sa = _require_sqlalchemy()
    statement = StatementAssembler(paramstyle="named", resolver=resolver).bind(template, context)
    bind_params = [
        sa.bindparam(name, value=binding.value, type_=sql_type_to_sqlalchemy(binding.sql_type))
        for name, binding in zip(statement.names, statement.bindings)
    ]
    return sa.text(statement.sql).bindparams(*bind_params)
