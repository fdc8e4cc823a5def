"""Unit tests for fragql.schema.converters (SQLAlchemy bridge)."""

from __future__ import annotations

import pytest
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    LargeBinary,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    Unicode,
    create_engine,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.types import JSON

from fragql.compile.parser import compile_template
from fragql.errors import UnresolvablePropertyError
from fragql.schema.converters import (
    declared_types_from_table,
    sql_type_from_sqlalchemy,
    sql_type_to_sqlalchemy,
    to_sqlalchemy_text,
)
from fragql.schema.invocation import InvocationContext
from fragql.schema.sql_types import SqlType
from tests.fixtures import load_ddl


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_engine() -> Engine:
    """Return an in-memory SQLite engine loaded with the sample schema."""
    engine = create_engine("sqlite:///:memory:")
    with engine.begin() as conn:
        for statement in load_ddl().split(";"):
            if statement.strip():
                conn.execute(text(statement))
        conn.execute(text("INSERT INTO departments VALUES (3, 'Research')"))
        conn.execute(
            text(
                "INSERT INTO employees VALUES "
                "(7, 'Ada', 3, 'Seattle', 1, 1200.5), "
                "(8, 'Grace', 3, 'Arlington', 0, 900.0)"
            )
        )
    return engine


@pytest.fixture()
def engine() -> Engine:
    return _make_engine()


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("sa_type", "expected"),
    [
        (Integer(), SqlType.INTEGER),
        (BigInteger(), SqlType.BIGINT),
        (Boolean(), SqlType.BOOLEAN),
        (String(40), SqlType.VARCHAR),
        (Unicode(40), SqlType.NVARCHAR),
        (Text(), SqlType.LONGVARCHAR),
        (Float(), SqlType.DOUBLE),
        (Numeric(10, 2), SqlType.NUMERIC),
        (Date(), SqlType.DATE),
        (DateTime(), SqlType.TIMESTAMP),
        (LargeBinary(), SqlType.VARBINARY),
        (JSON(), SqlType.UNKNOWN),
    ],
)
def test_sql_type_from_sqlalchemy(sa_type, expected):
    assert sql_type_from_sqlalchemy(sa_type) is expected


@pytest.mark.parametrize(
    ("sql_type", "expected"),
    [
        (SqlType.INTEGER, Integer),
        (SqlType.VARCHAR, String),
        (SqlType.TIMESTAMP, DateTime),
        (SqlType.BOOLEAN, Boolean),
        (SqlType.BIT, Boolean),
        (SqlType.DECIMAL, Numeric),
    ],
)
def test_sql_type_to_sqlalchemy(sql_type, expected):
    assert isinstance(sql_type_to_sqlalchemy(sql_type), expected)


@pytest.mark.parametrize("sql_type", [SqlType.UNKNOWN, SqlType.ARRAY, SqlType.STRUCT])
def test_sql_type_without_equivalent_maps_to_none(sql_type):
    assert sql_type_to_sqlalchemy(sql_type) is None


# ---------------------------------------------------------------------------
# declared_types_from_table
# ---------------------------------------------------------------------------


def test_declared_types_from_declared_table():
    table = Table(
        "employees",
        MetaData(),
        Column("emp_id", Integer, primary_key=True),
        Column("first_name", String(40)),
        Column("hired", Date),
        Column("profile", JSON),
    )
    assert declared_types_from_table(table, "emp") == {
        "emp.emp_id": "INTEGER",
        "emp.first_name": "VARCHAR",
        "emp.hired": "DATE",
    }


def test_declared_types_from_reflected_table(engine):
    metadata = MetaData()
    metadata.reflect(bind=engine)
    declared = declared_types_from_table(metadata.tables["employees"], "emp")
    assert declared["emp.emp_id"] == "INTEGER"
    assert declared["emp.first_name"] == "LONGVARCHAR"


def test_declared_types_compile_into_template():
    table = Table("departments", MetaData(), Column("dept_id", Integer), Column("name", String))
    template = compile_template(
        "UPDATE departments SET name = {dept.name} WHERE dept_id = {dept.dept_id}",
        declared_types_from_table(table, "dept"),
    )
    assert [f.sql_type for f in template.reflection_fragments] == [
        SqlType.VARCHAR,
        SqlType.INTEGER,
    ]


# ---------------------------------------------------------------------------
# to_sqlalchemy_text
# ---------------------------------------------------------------------------


def test_to_sqlalchemy_text_executes(engine, employee):
    def find(emp, min_salary):
        ...

    template = compile_template(
        "SELECT first_name FROM employees "
        "WHERE dept_id = {emp.department.dept_id} AND salary >= {min_salary} ORDER BY emp_id",
        {"emp.department.dept_id": "INTEGER", "min_salary": "DOUBLE"},
    )
    clause = to_sqlalchemy_text(template, InvocationContext.bind(find, employee, 1000))

    assert str(clause) == (
        "SELECT first_name FROM employees WHERE dept_id = :p0 AND salary >= :p1 ORDER BY emp_id"
    )
    assert isinstance(clause._bindparams["p0"].type, Integer)
    with engine.connect() as conn:
        rows = conn.execute(clause).all()
    assert [r.first_name for r in rows] == ["Ada"]


def test_to_sqlalchemy_text_propagates_resolution_errors(employee):
    def find(emp):
        ...

    template = compile_template("SELECT * FROM employees WHERE x = {emp.missing}")
    with pytest.raises(UnresolvablePropertyError):
        to_sqlalchemy_text(template, InvocationContext.bind(find, employee))
