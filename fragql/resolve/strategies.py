"""Property-resolution strategies.

Each strategy knows one way of reading property ``q`` out of a value.  The
resolver tries them in a fixed priority order and uses the first one that
*locates* an accessor:

1. :class:`BooleanAccessorStrategy` – ``value.is_q()`` / ``value.isQ()``,
   accepted only when it returns a ``bool``.
2. :class:`GeneralAccessorStrategy` – ``value.get_q()`` / ``value.getQ()``.
3. :class:`PublicFieldStrategy`     – ``value.q`` (attribute, slot, property).
4. :class:`KeyedLookupStrategy`     – ``value["q"]`` for mappings.

Locating is static: :func:`inspect.getattr_static` is used so that no user
code runs until the chosen accessor is invoked.  Failures *inside* an
accessor are therefore never confused with "not found".  The one exception
is an object answering attributes through ``__getattr__``: its accessor is
marked ``dynamic`` and an ``AttributeError`` raised on invocation means the
attribute does not exist.
"""
from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

_MISSING = object()

_BOOL_ANNOTATIONS = (bool, "bool", "builtins.bool")


class MemberNotAccessible(Exception):
    """Raised by a strategy that located a member it is not allowed to read."""

    def __init__(self, member: str, reason: str) -> None:
        super().__init__(reason)
        self.member = member
        self.reason = reason


@dataclass(frozen=True)
class Accessor:
    """A located way of reading one property.

    Attributes:
        name: Human-readable accessor name for diagnostics.
        invoke: Zero-argument callable returning the property value.
        requires_bool: When ``True`` the result is only accepted if it is a
            ``bool``; otherwise resolution falls through to the next strategy.
        dynamic: When ``True`` an ``AttributeError`` from ``invoke`` means
            the member was not found rather than that the accessor failed.
    """

    name: str
    invoke: Callable[[], Any]
    requires_bool: bool = False
    dynamic: bool = False


def capitalize(qualifier: str) -> str:
    """``"firstName"`` → ``"FirstName"`` (only the first letter changes)."""
    return qualifier[:1].upper() + qualifier[1:]


def _is_method(raw: Any) -> bool:
    return isinstance(raw, (staticmethod, classmethod)) or inspect.isroutine(raw)


def _type_name(value: Any) -> str:
    return type(value).__name__


class ResolutionStrategy(ABC):
    """One way of reading a named property out of a value."""

    #: Short strategy label used in debug logging.
    name: ClassVar[str]

    @abstractmethod
    def locate(self, value: Any, qualifier: str) -> Accessor | None:
        """Return an :class:`Accessor` for ``qualifier`` or ``None``.

        Raises:
            MemberNotAccessible: If the member exists but is not public.
        """


# ---------------------------------------------------------------------------
# Method-based accessors
# ---------------------------------------------------------------------------


class _MethodAccessorStrategy(ResolutionStrategy):
    """Shared lookup for zero-argument accessor methods."""

    prefix: ClassVar[str]

    def candidates(self, qualifier: str) -> tuple[str, str]:
        return (f"{self.prefix}_{qualifier}", f"{self.prefix}{capitalize(qualifier)}")

    def locate(self, value: Any, qualifier: str) -> Accessor | None:
        for candidate in self.candidates(qualifier):
            raw = inspect.getattr_static(value, candidate, _MISSING)
            if raw is _MISSING or not _is_method(raw):
                continue
            method = getattr(value, candidate)
            signature = _signature(method)
            if signature is not None and not _accepts_no_arguments(signature):
                continue
            accessor = self._accept(value, candidate, method, signature)
            if accessor is not None:
                return accessor
        return None

    @abstractmethod
    def _accept(
        self,
        value: Any,
        candidate: str,
        method: Callable[[], Any],
        signature: inspect.Signature | None,
    ) -> Accessor | None:
        """Decide whether a zero-argument method qualifies."""


class BooleanAccessorStrategy(_MethodAccessorStrategy):
    """``is_q()`` / ``isQ()``; only boolean-returning methods qualify.

    A declared return annotation decides up front.  Without one the method is
    invoked and its result must be a ``bool``.
    """

    name = "boolean-accessor"
    prefix = "is"

    def _accept(self, value, candidate, method, signature):
        annotation = signature.return_annotation if signature is not None else inspect.Signature.empty
        accessor_name = f"{_type_name(value)}.{candidate}()"
        if annotation is inspect.Signature.empty:
            return Accessor(name=accessor_name, invoke=method, requires_bool=True)
        if annotation in _BOOL_ANNOTATIONS:
            return Accessor(name=accessor_name, invoke=method)
        return None


class GeneralAccessorStrategy(_MethodAccessorStrategy):
    """``get_q()`` / ``getQ()``; any return type qualifies."""

    name = "general-accessor"
    prefix = "get"

    def _accept(self, value, candidate, method, signature):
        return Accessor(name=f"{_type_name(value)}.{candidate}()", invoke=method)


# ---------------------------------------------------------------------------
# Attribute and mapping access
# ---------------------------------------------------------------------------


class PublicFieldStrategy(ResolutionStrategy):
    """``value.q`` for instance attributes, slots, class attributes and properties.

    Methods are not fields.  Names with a leading underscore are located but
    rejected as non-public.
    """

    name = "public-field"

    def locate(self, value: Any, qualifier: str) -> Accessor | None:
        accessor_name = f"{_type_name(value)}.{qualifier}"
        raw = inspect.getattr_static(value, qualifier, _MISSING)
        if raw is _MISSING:
            # Attributes served by __getattr__ are invisible to getattr_static.
            if qualifier.startswith("_") or not self._has_getattr_hook(value):
                return None
            return Accessor(
                name=accessor_name,
                invoke=lambda: getattr(value, qualifier),
                dynamic=True,
            )
        if _is_method(raw):
            return None

        if qualifier.startswith("_"):
            raise MemberNotAccessible(
                accessor_name,
                "Attributes starting with '_' are not public.",
            )
        return Accessor(name=accessor_name, invoke=lambda: getattr(value, qualifier))

    @staticmethod
    def _has_getattr_hook(value: Any) -> bool:
        return inspect.getattr_static(type(value), "__getattr__", _MISSING) is not _MISSING


class KeyedLookupStrategy(ResolutionStrategy):
    """``value["q"]`` when ``value`` is a :class:`~collections.abc.Mapping`.

    Args:
        strict: When ``False`` (default) an absent key resolves to ``None``
            like ``dict.get``.  When ``True`` an absent key is "not found".
    """

    name = "keyed-lookup"

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def locate(self, value: Any, qualifier: str) -> Accessor | None:
        if not isinstance(value, Mapping):
            return None
        accessor_name = f"{_type_name(value)}[{qualifier!r}]"
        if self._strict:
            if qualifier not in value:
                return None
            return Accessor(name=accessor_name, invoke=lambda: value[qualifier])
        return Accessor(name=accessor_name, invoke=lambda: value.get(qualifier))


def default_strategies(strict_mapping_keys: bool = False) -> tuple[ResolutionStrategy, ...]:
    """Return the standard strategy chain in priority order."""
    return (
        BooleanAccessorStrategy(),
        GeneralAccessorStrategy(),
        PublicFieldStrategy(),
        KeyedLookupStrategy(strict=strict_mapping_keys),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _signature(method: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(method)
    except (TypeError, ValueError):
        # Some builtins expose no signature.
        return None


def _accepts_no_arguments(signature: inspect.Signature) -> bool:
    try:
        signature.bind()
    except TypeError:
        return False
    return True
