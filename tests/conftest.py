"""Shared pytest fixtures for fragQL unit and integration tests."""
from __future__ import annotations

import pytest

from fragql.compile.assembler import StatementAssembler
from fragql.compile.cache import TemplateCache
from fragql.resolve.resolver import ValueResolver
from fragql.schema.invocation import MethodMetadata
from tests.fixtures import Address, Department, Employee


@pytest.fixture()
def cache() -> TemplateCache:
    """A fresh, private template cache so tests never share entries."""
    return TemplateCache(max_size=8)


@pytest.fixture(scope="session")
def resolver() -> ValueResolver:
    return ValueResolver()


@pytest.fixture(scope="session")
def assembler() -> StatementAssembler:
    return StatementAssembler()


@pytest.fixture()
def employee() -> Employee:
    return Employee(
        emp_id=7,
        first_name="Ada",
        department=Department(dept_id=3, name="Research", tags={"remote": "true"}),
        address=Address(street="500 Pine St", city="Seattle"),
        salary=1200.5,
    )


@pytest.fixture(scope="session")
def find_employee() -> MethodMetadata:
    """Metadata for ``find_employee(emp, active=True)``."""

    def find_employee(emp, active=True):  # noqa: ARG001
        ...

    return MethodMetadata.from_callable(find_employee)
