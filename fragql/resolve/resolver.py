"""Value resolution: placeholder path + invocation context → bound value.

``ValueResolver`` looks up the root qualifier of a path as a parameter of the
invoked method, then walks each following qualifier against the previously
resolved value using the strategy chain from
:mod:`fragql.resolve.strategies`::

    {order.customer.address.city}
      order                    -> ctx.resolve_parameter("order")
      order.customer           -> order.get_customer()
      customer.address         -> customer.address
      address.city             -> address["city"]

The resolver holds no per-call state and may be shared between threads.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fragql.errors import (
    AccessDeniedError,
    AccessorInvocationError,
    UnresolvablePropertyError,
)
from fragql.resolve.strategies import (
    Accessor,
    MemberNotAccessible,
    ResolutionStrategy,
    default_strategies,
)
from fragql.schema.fragments import ValueFragment
from fragql.schema.invocation import InvocationContext
from fragql.schema.settings import ResolverSettings
from fragql.schema.template import CompiledTemplate

logger = logging.getLogger(__name__)

_NOT_FOUND = object()


class ValueResolver:
    """Resolves placeholder paths against an :class:`InvocationContext`.

    Args:
        settings: Resolver options; defaults to ``ResolverSettings()``.
        strategies: Strategy chain in priority order.  Defaults to
            :func:`~fragql.resolve.strategies.default_strategies`.
    """

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        strategies: Sequence[ResolutionStrategy] | None = None,
    ) -> None:
        self._settings = settings or ResolverSettings()
        self._strategies: tuple[ResolutionStrategy, ...] = (
            tuple(strategies)
            if strategies is not None
            else default_strategies(self._settings.strict_mapping_keys)
        )

    @property
    def strategies(self) -> tuple[ResolutionStrategy, ...]:
        return self._strategies

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, fragment: ValueFragment, context: InvocationContext) -> Any:
        """Return the value ``fragment`` stands for in this invocation.

        Raises:
            UnknownParameterError: If the root qualifier is not a parameter.
            UnresolvablePropertyError: If a path segment cannot be read.
            AccessorInvocationError: If a located accessor raises.
            AccessDeniedError: If a located member is not public.
        """
        return self.resolve_path(fragment.path, context)

    def resolve_all(self, template: CompiledTemplate, context: InvocationContext) -> list[Any]:
        """Resolve every value-carrying fragment of ``template``, in order."""
        return [self.resolve(f, context) for f in template.value_fragments]

    def resolve_path(self, path: Sequence[str], context: InvocationContext) -> Any:
        """Walk ``path`` starting from the invocation's arguments."""
        full_path = ".".join(path)
        value = context.resolve_parameter(path[0], full_path)
        for previous, qualifier in zip(path, path[1:]):
            value = self._extract(value, previous, qualifier, full_path)
        return value

    # ------------------------------------------------------------------
    # Path walking
    # ------------------------------------------------------------------

    def _extract(self, value: Any, owner: str, qualifier: str, full_path: str) -> Any:
        """Read ``qualifier`` out of ``value`` (which was resolved as ``owner``)."""
        if value is None:
            raise UnresolvablePropertyError(
                qualifier, owner, full_path, reason=f"The value of '{owner}' is None."
            )

        for strategy in self._strategies:
            try:
                accessor = strategy.locate(value, qualifier)
            except MemberNotAccessible as exc:
                raise AccessDeniedError(exc.member, full_path, exc.reason) from exc
            if accessor is None:
                continue

            result = self._invoke(accessor, full_path)
            if result is _NOT_FOUND:
                logger.debug("%s raised AttributeError; trying next strategy", accessor.name)
                continue
            if accessor.requires_bool and not isinstance(result, bool):
                logger.debug(
                    "%s returned %s, not bool; trying next strategy",
                    accessor.name,
                    type(result).__name__,
                )
                continue
            logger.debug("Resolved '%s' in '%s' via %s", qualifier, full_path, strategy.name)
            return result

        raise UnresolvablePropertyError(qualifier, owner, full_path)

    @staticmethod
    def _invoke(accessor: Accessor, full_path: str) -> Any:
        try:
            return accessor.invoke()
        except PermissionError as exc:
            raise AccessDeniedError(accessor.name, full_path, str(exc)) from exc
        except AttributeError as exc:
            if accessor.dynamic:
                return _NOT_FOUND
            raise AccessorInvocationError(accessor.name, full_path, exc) from exc
        except Exception as exc:
            raise AccessorInvocationError(accessor.name, full_path, exc) from exc
