"""fragQL examples runner.

Seeds an in-memory SQLite database from the test DDL, declares a small
repository of ``@sql_statement`` methods, and executes each one, printing
the rendered SQL and its bindings.

Usage
-----
Run every example::

    python examples/runner.py

Show the bindings and declared types as well::

    python examples/runner.py -v

Render ``named`` markers instead of ``?``::

    python examples/runner.py --paramstyle named
"""
from __future__ import annotations

import argparse
import logging
import sqlite3
import sys
from dataclasses import dataclass, field
from pathlib import Path

# ---------------------------------------------------------------------------
# Adjust sys.path so the package is importable when run as a script
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

import fragql
from fragql import FragQLError, SqlStatement, TemplateSettings

_DDL_PATH = _REPO_ROOT / "tests" / "fixtures" / "ddl_sqlite.sql"

_DEPARTMENTS = [(1, "Engineering"), (2, "Marketing"), (3, "Research")]

_EMPLOYEES = [
    (1, "Linus", 1, "Portland", 1, 1500.0),
    (2, "Margaret", 1, "Boston", 0, 1700.0),
    (3, "Hedy", 2, "Vienna", 1, 1300.0),
    (7, "Ada", 3, "Seattle", 1, 1200.5),
    (8, "Grace", 3, "Arlington", 1, 1250.0),
]


@dataclass
class Department:
    dept_id: int
    name: str
    settings: dict[str, str] = field(default_factory=dict)

    def is_active_only(self) -> bool:
        return self.settings.get("active_only", "true") == "true"


def make_sqlite_conn() -> sqlite3.Connection:
    """Return an in-memory SQLite connection seeded with example data."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript(_DDL_PATH.read_text())
    conn.executemany("INSERT INTO departments VALUES (?,?)", _DEPARTMENTS)
    conn.executemany("INSERT INTO employees VALUES (?,?,?,?,?,?)", _EMPLOYEES)
    conn.commit()
    return conn


def build_statements(settings: TemplateSettings) -> dict[str, tuple[SqlStatement, tuple]]:
    """Declare the example statements and the arguments each is run with."""

    @fragql.sql_statement(
        "SELECT first_name FROM employees "
        "WHERE dept_id = {dept.dept_id} AND active = {dept.active_only} ORDER BY emp_id",
        types={"dept.dept_id": "INTEGER", "dept.active_only": "BOOLEAN"},
        settings=settings,
    )
    def by_department(dept):
        ...

    @fragql.sql_statement(
        "SELECT first_name, salary FROM employees "
        "WHERE salary >= {limits.min} ORDER BY {sql: limits.order}",
        settings=settings,
    )
    def salary_band(limits):
        ...

    @fragql.sql_statement(
        "SELECT {fn UCASE(first_name)} AS name FROM employees WHERE city = {city}",
        settings=settings,
    )
    def in_city(city):
        ...

    research = Department(3, "Research")
    return {
        "by_department": (by_department, (research,)),
        "salary_band": (salary_band, ({"min": 1300, "order": "salary DESC"},)),
        "in_city": (in_city, ("Vienna",)),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--paramstyle", default="qmark", choices=("qmark", "named"))
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    conn = make_sqlite_conn()
    settings = TemplateSettings(paramstyle=args.paramstyle)

    for name, (statement, call_args) in build_statements(settings).items():
        try:
            bound = statement(*call_args)
        except FragQLError as exc:
            print(f"[{name}] failed: {exc}")
            return 1
        print(f"[{name}] {bound.sql}")
        if args.verbose:
            for binding in bound.bindings:
                print(f"    {binding.value!r} ({binding.sql_type.name})")
        # sqlite3 does not understand driver escape sequences.
        sql = bound.sql.replace("{fn UCASE(first_name)}", "UPPER(first_name)")
        for row in conn.execute(sql, bound.params):
            print(f"    {tuple(row)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
