"""Method metadata and the per-call invocation context.

``MethodMetadata`` describes the formal parameters of a data-access method.
``InvocationContext`` pairs that metadata with the actual arguments of one
call and is the only place the resolver looks up root parameter values::

    def find_employee(self, dept, active=True): ...

    meta = MethodMetadata.from_callable(find_employee)
    ctx = InvocationContext.bind(meta, repo, dept)
    ctx.resolve_parameter("dept")      # -> dept
    ctx.resolve_parameter("active")    # -> True (default applied)

An ``InvocationContext`` is created per call and discarded afterwards; it is
never stored on a compiled template.
"""
from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from fragql.errors import UnknownParameterError


@dataclass(frozen=True)
class ParameterInfo:
    """A formal parameter.

    Attributes:
        name: Parameter name as referenced by ``{name}`` placeholders.
        annotation: Declared annotation, or ``inspect.Parameter.empty``.
    """

    name: str
    annotation: Any = inspect.Parameter.empty


@dataclass(frozen=True)
class MethodMetadata:
    """Name and ordered formal parameters of an invoked method.

    Attributes:
        name: Method name, used in diagnostics only.
        parameters: Formal parameters in declaration order.
        signature: The Python signature when built from a callable.
    """

    name: str
    parameters: tuple[ParameterInfo, ...]
    signature: inspect.Signature | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_callable(cls, func: Callable[..., Any]) -> MethodMetadata:
        """Build metadata from any Python callable via :func:`inspect.signature`."""
        signature = inspect.signature(func)
        parameters = tuple(
            ParameterInfo(name=p.name, annotation=p.annotation)
            for p in signature.parameters.values()
        )
        name = getattr(func, "__qualname__", None) or getattr(func, "__name__", repr(func))
        return cls(name=name, parameters=parameters, signature=signature)

    @classmethod
    def from_names(cls, name: str, parameter_names: Sequence[str]) -> MethodMetadata:
        """Build metadata from a plain list of parameter names."""
        return cls(name=name, parameters=tuple(ParameterInfo(n) for n in parameter_names))

    @property
    def parameter_names(self) -> list[str]:
        """Returns all formal parameter names in declaration order."""
        return [p.name for p in self.parameters]

    def has_parameter(self, name: str) -> bool:
        """True when ``name`` is a formal parameter of this method."""
        return any(p.name == name for p in self.parameters)


@dataclass(frozen=True)
class InvocationContext:
    """Formal parameters plus actual argument values for one call.

    Attributes:
        method: Metadata of the invoked method.
        arguments: Read-only mapping of parameter name to actual value.
    """

    method: MethodMetadata
    arguments: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_args(cls, method: MethodMetadata, args: Sequence[Any]) -> InvocationContext:
        """Pair positional ``args`` with ``method``'s parameters by position.

        Raises:
            TypeError: If the number of arguments differs from the number of
                formal parameters.
        """
        if len(args) != len(method.parameters):
            raise TypeError(
                f"{method.name}() takes {len(method.parameters)} argument(s) "
                f"but {len(args)} were given"
            )
        return cls(method=method, arguments=dict(zip(method.parameter_names, args)))

    @classmethod
    def bind(
        cls,
        method: MethodMetadata | Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> InvocationContext:
        """Bind call arguments the way Python would, applying defaults.

        Args:
            method: Metadata built with :meth:`MethodMetadata.from_callable`,
                or the callable itself.
            *args: Positional arguments of the call.
            **kwargs: Keyword arguments of the call.

        Raises:
            TypeError: If the arguments do not fit the signature.
        """
        if not isinstance(method, MethodMetadata):
            method = MethodMetadata.from_callable(method)
        if method.signature is None:
            if kwargs:
                merged = dict(zip(method.parameter_names, args))
                merged.update(kwargs)
                return cls(method=method, arguments=merged)
            return cls.from_args(method, args)
        bound = method.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        return cls(method=method, arguments=bound.arguments)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve_parameter(self, name: str, path: str | None = None) -> Any:
        """Return the actual value of parameter ``name``.

        Args:
            name: Root qualifier of a placeholder.
            path: Full dotted path, used in the error message.

        Raises:
            UnknownParameterError: If ``name`` is not a formal parameter.
        """
        if not self.method.has_parameter(name) or name not in self.arguments:
            raise UnknownParameterError(
                name, path or name, parameters=self.method.parameter_names
            )
        return self.arguments[name]
