"""``@sql_statement`` – attach a SQL template to a Python function.

The template is compiled and validated against the function's signature
once, when the decorator runs.  Each call then binds the call's arguments
and returns a :class:`~fragql.compile.assembler.BoundStatement`; the body of
the decorated function is never executed::

    class EmployeeQueries:
        @sql_statement(
            "SELECT * FROM employees WHERE dept = {dept.name} AND active = {active}",
            types={"active": "BOOLEAN"},
        )
        def by_department(self, dept, active=True): ...

    stmt = EmployeeQueries().by_department(sales)
    cursor.execute(stmt.sql, stmt.params)
"""
from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from typing import Any

from fragql.compile.assembler import BoundStatement, StatementAssembler
from fragql.compile.parser import compile_template
from fragql.resolve.resolver import ValueResolver
from fragql.schema.invocation import InvocationContext, MethodMetadata
from fragql.schema.settings import TemplateSettings
from fragql.schema.template import CompiledTemplate
from fragql.validate.validator import TemplateValidator


class SqlStatement:
    """A function bound to a compiled SQL template.

    Args:
        func: The decorated function; only its signature is used.
        template: The annotated SQL statement.
        types: Optional placeholder expression → SQL type name mapping.
        settings: fragQL settings; defaults to ``TemplateSettings()``.

    Raises:
        TemplateSyntaxError: If ``template`` is malformed.
        UnknownTypeError: If a declared type name is not recognised.
        UnknownParameterError: If a placeholder root is not a parameter of
            ``func``.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        template: str,
        types: Mapping[str, str] | None = None,
        settings: TemplateSettings | None = None,
    ) -> None:
        settings = settings or TemplateSettings()
        self._method = MethodMetadata.from_callable(func)
        self._template = compile_template(template, types)
        TemplateValidator(self._method).validate(self._template)
        self._assembler = StatementAssembler(
            paramstyle=settings.paramstyle,
            resolver=ValueResolver(settings.resolver),
        )
        functools.update_wrapper(self, func)

    @property
    def template(self) -> CompiledTemplate:
        return self._template

    @property
    def method(self) -> MethodMetadata:
        return self._method

    def __call__(self, *args: Any, **kwargs: Any) -> BoundStatement:
        context = InvocationContext.bind(self._method, *args, **kwargs)
        return self._assembler.bind(self._template, context)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return functools.partial(self, instance)


def sql_statement(
    template: str,
    *,
    types: Mapping[str, str] | None = None,
    settings: TemplateSettings | None = None,
) -> Callable[[Callable[..., Any]], SqlStatement]:
    """Decorator form of :class:`SqlStatement`."""

    def decorator(func: Callable[..., Any]) -> SqlStatement:
        return SqlStatement(func, template, types=types, settings=settings)

    return decorator
