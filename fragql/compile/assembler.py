"""Statement assembly: compiled template + resolved values → bound statement.

The assembler walks the fragments of a :class:`CompiledTemplate` in order:

* literal fragments are copied verbatim,
* each reflection fragment emits one placeholder marker and one
  :class:`Binding`,
* each substitution fragment writes ``str(value)`` into the SQL text.

Literal and substituted text pass through the placeholder style's
``escape_literal`` so, for example, ``%`` is doubled for the ``format`` and
``pyformat`` paramstyles.

Because markers and bindings are produced in the same pass, the N-th marker
always corresponds to the N-th binding.  Rendering is a pure function of the
template and the values.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple

from fragql.compile.registry import PlaceholderStyle, PlaceholderStyleRegistry
from fragql.errors import BindingCountError
from fragql.resolve.resolver import ValueResolver
from fragql.schema.fragments import LiteralFragment, ReflectionFragment
from fragql.schema.invocation import InvocationContext
from fragql.schema.sql_types import SqlType
from fragql.schema.template import CompiledTemplate


class Binding(NamedTuple):
    """One ``(value, sql_type)`` pair for one placeholder marker."""

    value: Any
    sql_type: SqlType = SqlType.UNKNOWN


@dataclass(frozen=True)
class BoundStatement:
    """The output of assembling one invocation.

    Attributes:
        sql: Rendered SQL text with placeholder markers.
        bindings: One binding per marker, in marker order.
        paramstyle: The DB-API paramstyle the markers use.
        names: Bind parameter names, for named paramstyles.
    """

    sql: str
    bindings: tuple[Binding, ...]
    paramstyle: str = "qmark"
    names: tuple[str, ...] = ()

    @property
    def params(self) -> tuple[Any, ...] | dict[str, Any]:
        """Binding values shaped for ``cursor.execute(sql, params)``.

        A tuple for positional paramstyles, a dict for named ones.
        """
        if self.names:
            return {name: b.value for name, b in zip(self.names, self.bindings)}
        return tuple(b.value for b in self.bindings)

    @property
    def sql_types(self) -> tuple[SqlType, ...]:
        """Declared SQL type of every binding, in marker order."""
        return tuple(b.sql_type for b in self.bindings)


class StatementAssembler:
    """Renders compiled templates into :class:`BoundStatement` objects.

    Args:
        paramstyle: Registered paramstyle name (default ``"qmark"``).
        resolver: Resolver used by :meth:`bind`.
    """

    def __init__(
        self,
        paramstyle: str = "qmark",
        resolver: ValueResolver | None = None,
    ) -> None:
        self._paramstyle = paramstyle
        self._style: PlaceholderStyle = PlaceholderStyleRegistry.create(paramstyle)
        self._resolver = resolver or ValueResolver()

    @property
    def paramstyle(self) -> str:
        return self._paramstyle

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, template: CompiledTemplate, values: Sequence[Any]) -> BoundStatement:
        """Render ``template`` with already-resolved ``values``.

        Args:
            template: The compiled template.
            values: One value per value-carrying fragment, in fragment order.

        Returns:
            The rendered SQL text and its bindings.

        Raises:
            BindingCountError: If ``values`` has the wrong length.
        """
        expected = len(template.value_fragments)
        if len(values) != expected:
            raise BindingCountError(expected, len(values))

        parts: list[str] = []
        bindings: list[Binding] = []
        names: list[str] = []
        remaining = iter(values)

        for fragment in template.fragments:
            if isinstance(fragment, LiteralFragment):
                parts.append(self._style.escape_literal(fragment.text))
                continue
            value = next(remaining)
            if isinstance(fragment, ReflectionFragment):
                index = len(bindings)
                parts.append(self._style.marker(index))
                bindings.append(Binding(value, fragment.sql_type))
                if not self._style.positional:
                    names.append(self._style.bind_name(index))
            else:
                parts.append(self._style.escape_literal(str(value)))

        return BoundStatement(
            sql="".join(parts),
            bindings=tuple(bindings),
            paramstyle=self._paramstyle,
            names=tuple(names),
        )

    def bind(self, template: CompiledTemplate, context: InvocationContext) -> BoundStatement:
        """Resolve every placeholder against ``context`` and render.

        Raises:
            ResolutionError: (or subclass) if any placeholder cannot be resolved.
        """
        return self.render(template, self._resolver.resolve_all(template, context))
