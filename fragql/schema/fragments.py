"""Fragment types produced by the template parser.

A compiled template is an ordered sequence of fragments:

``LiteralFragment``
    Fixed SQL text, emitted verbatim.
``ReflectionFragment``
    A ``{name.sub}`` placeholder.  Resolved against the call's arguments and
    emitted as one positional placeholder marker with one binding.
``SubstitutionFragment``
    A ``{sql: name.sub}`` placeholder.  Resolved like a reflection fragment
    but its value is rendered inline as SQL text and produces no binding.
    Only use it with trusted values (identifiers, sort directions).

Fragments are frozen, so a compiled template can be shared across threads.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from fragql.schema.sql_types import SqlType


def is_qualifier(part: str) -> bool:
    """True when ``part`` is a valid path segment (any Python identifier)."""
    return part.isidentifier()


def split_path(expression: str) -> tuple[str, ...]:
    """Split a dotted placeholder expression into its qualifiers.

    Args:
        expression: The text between the braces, e.g. ``"addr.city"``.

    Returns:
        The qualifiers, e.g. ``("addr", "city")``.

    Raises:
        ValueError: If any qualifier is empty or not an identifier.
    """
    path = tuple(part.strip() for part in expression.strip().split("."))
    for part in path:
        if not is_qualifier(part):
            raise ValueError(f"Invalid qualifier {part!r} in placeholder {expression!r}.")
    return path


@dataclass(frozen=True)
class LiteralFragment:
    """Literal SQL text.

    Attributes:
        text: The SQL text, emitted verbatim.
    """

    carries_value: ClassVar[bool] = False
    binds: ClassVar[bool] = False

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class _PathFragment:
    path: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("A placeholder path needs at least one qualifier.")
        for part in self.path:
            if not is_qualifier(part):
                raise ValueError(f"Invalid qualifier {part!r} in placeholder path.")

    @property
    def parameter_name(self) -> str:
        """The root qualifier, i.e. the method parameter name."""
        return self.path[0]

    @property
    def expression(self) -> str:
        """The dotted path as written in the template."""
        return ".".join(self.path)


@dataclass(frozen=True)
class ReflectionFragment(_PathFragment):
    """A method parameter substitution bound as a prepared-statement value.

    Attributes:
        path: Qualifiers; the first is the parameter name.
        sql_type: Declared SQL type, ``SqlType.UNKNOWN`` when undeclared.
    """

    carries_value: ClassVar[bool] = True
    binds: ClassVar[bool] = True

    sql_type: SqlType = SqlType.UNKNOWN

    @classmethod
    def parse(cls, expression: str, sql_type: SqlType = SqlType.UNKNOWN) -> ReflectionFragment:
        """Build a fragment from a dotted expression such as ``"addr.city"``."""
        return cls(path=split_path(expression), sql_type=sql_type)

    def __str__(self) -> str:
        return f"{{{self.expression}}}"


@dataclass(frozen=True)
class SubstitutionFragment(_PathFragment):
    """A parameter value rendered inline into the SQL text.

    Attributes:
        path: Qualifiers; the first is the parameter name.
    """

    carries_value: ClassVar[bool] = True
    binds: ClassVar[bool] = False

    @classmethod
    def parse(cls, expression: str) -> SubstitutionFragment:
        """Build a fragment from a dotted expression such as ``"sort.column"``."""
        return cls(path=split_path(expression))

    def __str__(self) -> str:
        return f"{{sql: {self.expression}}}"


Fragment = Union[LiteralFragment, ReflectionFragment, SubstitutionFragment]

#: Fragments that must be resolved against the invocation's arguments.
ValueFragment = Union[ReflectionFragment, SubstitutionFragment]
