"""Custom exception hierarchy for fragQL.

All public errors inherit from FragQLError so callers can catch the base
class for any fragQL-specific failure.

Compile-time errors (``TemplateSyntaxError``, ``UnknownTypeError``) are raised
while a template is being turned into fragments.  Per-call errors inherit from
``ResolutionError`` and are raised while a placeholder path is walked against
the actual arguments of one invocation.
"""
from __future__ import annotations

from typing import Any


class FragQLError(Exception):
    """Base exception for all fragQL errors."""


# ---------------------------------------------------------------------------
# Compile-time errors
# ---------------------------------------------------------------------------


class TemplateSyntaxError(FragQLError):
    """Raised when a SQL template has malformed placeholder delimiters.

    Args:
        message: Human-readable description.
        template: The raw template that failed to compile.
        position: Zero-based character offset of the offending delimiter.
    """

    def __init__(
        self,
        message: str,
        template: str | None = None,
        position: int | None = None,
    ) -> None:
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.template = template
        self.position = position


class UnknownTypeError(FragQLError):
    """Raised when a declared SQL type name is not recognised.

    Args:
        type_name: The unrecognised type name.
        known: Sorted list of accepted type names.
    """

    def __init__(self, type_name: str, known: list[str] | None = None) -> None:
        super().__init__(f"Unknown SQL type name: '{type_name}'.")
        self.type_name = type_name
        self.known: list[str] = known or []


class ConfigurationError(FragQLError):
    """Raised when fragQL is configured with an unsupported option.

    Args:
        message: Human-readable description.
        option: The offending setting name.
    """

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


class BindingCountError(FragQLError):
    """Raised when the assembler receives the wrong number of resolved values."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Template expects {expected} resolved value(s) but {actual} were supplied."
        )
        self.expected = expected
        self.actual = actual


# ---------------------------------------------------------------------------
# Per-call resolution errors
# ---------------------------------------------------------------------------


class ResolutionError(FragQLError):
    """Raised when a placeholder path cannot be resolved for one invocation.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. UNKNOWN_PARAMETER).
        details: Extra context for diagnostics.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response for logging or API payloads."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class UnknownParameterError(ResolutionError):
    """Raised when a placeholder's root name is not a parameter of the method."""

    def __init__(
        self,
        name: str,
        path: str,
        parameters: list[str] | None = None,
    ) -> None:
        super().__init__(
            f"Invalid argument name in SQL statement: '{name}' (placeholder '{{{path}}}').",
            code="UNKNOWN_PARAMETER",
            details={
                "name": name,
                "path": path,
                "parameters": parameters or [],
            },
        )


class UnresolvablePropertyError(ResolutionError):
    """Raised when no accessor, attribute, or mapping key matches a segment."""

    def __init__(self, qualifier: str, owner: str, path: str, reason: str = "") -> None:
        message = (
            f"Illegal argument in SQL statement: '{path}'; unable to find a suitable "
            f"way of retrieving property '{qualifier}' out of object '{owner}'."
        )
        if reason:
            message = f"{message} {reason}"
        super().__init__(
            message,
            code="UNRESOLVABLE_PROPERTY",
            details={"qualifier": qualifier, "owner": owner, "path": path},
        )


class AccessorInvocationError(ResolutionError):
    """Raised when a located accessor fails while being invoked.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, accessor: str, path: str, cause: BaseException) -> None:
        super().__init__(
            f"Exception thrown when executing '{accessor}' to resolve '{path}': "
            f"{type(cause).__name__}: {cause}",
            code="ACCESSOR_FAILED",
            details={
                "accessor": accessor,
                "path": path,
                "cause": type(cause).__name__,
            },
        )


class AccessDeniedError(ResolutionError):
    """Raised when a located accessor or attribute is not publicly accessible."""

    def __init__(self, member: str, path: str, reason: str = "") -> None:
        message = f"Unable to access member '{member}' while resolving '{path}'."
        if reason:
            message = f"{message} {reason}"
        super().__init__(
            message,
            code="ACCESS_DENIED",
            details={"member": member, "path": path},
        )
