"""fragQL schema models: fragments, templates, invocation context, settings."""
from fragql.schema.fragments import (
    Fragment,
    LiteralFragment,
    ReflectionFragment,
    SubstitutionFragment,
    ValueFragment,
)
from fragql.schema.invocation import InvocationContext, MethodMetadata, ParameterInfo
from fragql.schema.settings import ResolverSettings, TemplateSettings
from fragql.schema.sql_types import SqlType, TypeMappings, string_to_sql_type
from fragql.schema.template import CompiledTemplate

__all__ = [
    "Fragment",
    "LiteralFragment",
    "ReflectionFragment",
    "SubstitutionFragment",
    "ValueFragment",
    "CompiledTemplate",
    "InvocationContext",
    "MethodMetadata",
    "ParameterInfo",
    "ResolverSettings",
    "TemplateSettings",
    "SqlType",
    "TypeMappings",
    "string_to_sql_type",
]
