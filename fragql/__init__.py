"""fragQL – compiled SQL templates with reflective parameter binding.

Write SQL once, bind it from your method arguments.

Public API
----------
``compile_template``
    Compile (and cache) an annotated SQL statement such as
    ``"SELECT * FROM emp WHERE city = {addr.city}"`` into fragments.

``bind_statement``
    Resolve every placeholder of a template against one invocation and
    render the final SQL text plus its ordered ``(value, sql_type)`` bindings.

``sql_statement``
    Decorator attaching a template to a Python function signature.

``configure``
    Apply :class:`TemplateSettings` to the process-wide template cache.

Re-exported types
-----------------
``CompiledTemplate``, ``BoundStatement``, ``Binding``, ``InvocationContext``,
``MethodMetadata``, ``SqlType``, ``TemplateSettings``, and all error classes.

Extensibility
-------------
New placeholder styles can be registered via::

    from fragql.compile.registry import PlaceholderStyleRegistry

    @PlaceholderStyleRegistry.register("dollar")
    class DollarStyle(PlaceholderStyle):
        ...

After registration, ``TemplateSettings(paramstyle="dollar")`` picks it up.
"""

from __future__ import annotations

from collections.abc import Mapping

from fragql.compile.assembler import Binding, BoundStatement, StatementAssembler
from fragql.compile.cache import TemplateCache, configure_default_cache
from fragql.compile.parser import TemplateParser, compile_template
from fragql.compile.registry import PlaceholderStyle, PlaceholderStyleRegistry
from fragql.errors import (
    AccessDeniedError,
    AccessorInvocationError,
    BindingCountError,
    ConfigurationError,
    FragQLError,
    ResolutionError,
    TemplateSyntaxError,
    UnknownParameterError,
    UnknownTypeError,
    UnresolvablePropertyError,
)
from fragql.resolve.resolver import ValueResolver
from fragql.resolve.strategies import ResolutionStrategy, default_strategies
from fragql.schema.converters import (
    declared_types_from_table,
    sql_type_from_sqlalchemy,
    sql_type_to_sqlalchemy,
    to_sqlalchemy_text,
)
from fragql.schema.fragments import (
    Fragment,
    LiteralFragment,
    ReflectionFragment,
    SubstitutionFragment,
)
from fragql.schema.invocation import InvocationContext, MethodMetadata, ParameterInfo
from fragql.schema.settings import ResolverSettings, TemplateSettings
from fragql.schema.sql_types import SqlType, TypeMappings, string_to_sql_type
from fragql.schema.template import CompiledTemplate
from fragql.statement import SqlStatement, sql_statement
from fragql.validate.validator import TemplateValidator

__all__ = [
    # Core pipeline
    "compile_template",
    "bind_statement",
    "sql_statement",
    "configure",
    # Compilation
    "TemplateParser",
    "TemplateCache",
    "CompiledTemplate",
    "StatementAssembler",
    "BoundStatement",
    "Binding",
    "PlaceholderStyle",
    "PlaceholderStyleRegistry",
    "SqlStatement",
    # Fragments
    "Fragment",
    "LiteralFragment",
    "ReflectionFragment",
    "SubstitutionFragment",
    # Resolution
    "ValueResolver",
    "ResolutionStrategy",
    "default_strategies",
    "InvocationContext",
    "MethodMetadata",
    "ParameterInfo",
    "TemplateValidator",
    # Types and settings
    "SqlType",
    "TypeMappings",
    "string_to_sql_type",
    "ResolverSettings",
    "TemplateSettings",
    # SQLAlchemy converters
    "declared_types_from_table",
    "sql_type_from_sqlalchemy",
    "sql_type_to_sqlalchemy",
    "to_sqlalchemy_text",
    # Errors
    "FragQLError",
    "TemplateSyntaxError",
    "UnknownTypeError",
    "ConfigurationError",
    "BindingCountError",
    "ResolutionError",
    "UnknownParameterError",
    "UnresolvablePropertyError",
    "AccessorInvocationError",
    "AccessDeniedError",
]


def bind_statement(
    template: str | CompiledTemplate,
    context: InvocationContext,
    types: Mapping[str, str] | None = None,
    settings: TemplateSettings | None = None,
) -> BoundStatement:
    """Compile (if needed), resolve and render one statement invocation.

    This is the main entry point for ad-hoc use::

        def find(table_name): ...

        stmt = fragql.bind_statement(
            "SELECT * FROM {table_name}",
            fragql.InvocationContext.bind(find, "Employees"),
        )
        stmt.sql        # 'SELECT * FROM ?'
        stmt.bindings   # (Binding(value='Employees', sql_type=<SqlType.UNKNOWN>),)

    Args:
        template: Template text or an already compiled template.
        context: The invocation whose arguments feed the placeholders.
        types: Declared types; only used when ``template`` is text.
        settings: Optional settings; defaults to ``TemplateSettings()``.

    Returns:
        ``BoundStatement`` with ``sql`` text and ordered ``bindings``.

    Raises:
        TemplateSyntaxError: If the template text is malformed.
        UnknownTypeError: If a declared type name is not recognised.
        ResolutionError: (or subclass) if a placeholder cannot be resolved.
    """
    settings = settings or TemplateSettings()
    if isinstance(template, str):
        template = compile_template(template, types)
    assembler = StatementAssembler(
        paramstyle=settings.paramstyle,
        resolver=ValueResolver(settings.resolver),
    )
    return assembler.bind(template, context)


def configure(settings: TemplateSettings) -> TemplateCache:
    """Apply ``settings`` to process-wide state.

    Replaces the default template cache with an empty one sized to
    ``settings.cache_max_size`` and validates ``settings.paramstyle``.

    Returns:
        The new default :class:`TemplateCache`.

    Raises:
        ConfigurationError: If ``settings.paramstyle`` is not registered.
    """
    PlaceholderStyleRegistry.create(settings.paramstyle)
    return configure_default_cache(settings.cache_max_size)
