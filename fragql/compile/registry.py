"""Placeholder-style registry.

The statement assembler emits one marker per reflection fragment.  Which
marker depends on the DB-API ``paramstyle`` of the target driver; ``qmark``
(``?``) is the default.  Styles are registered by name so new ones can be
added without touching the assembler::

    from fragql.compile.registry import PlaceholderStyle, PlaceholderStyleRegistry

    @PlaceholderStyleRegistry.register("dollar")
    class DollarStyle(PlaceholderStyle):
        positional = True

        def marker(self, index: int) -> str:
            return f"${index + 1}"
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import ClassVar

from fragql.errors import ConfigurationError


class PlaceholderStyle(ABC):
    """Renders the placeholder marker for the N-th binding (0-based)."""

    #: ``True`` when bindings are passed as a sequence, ``False`` for a dict.
    positional: ClassVar[bool] = True

    @abstractmethod
    def marker(self, index: int) -> str:
        """Return the marker text for binding ``index``."""

    def bind_name(self, index: int) -> str:
        """Return the parameter name for binding ``index`` (named styles)."""
        return f"p{index}"

    def escape_literal(self, text: str) -> str:
        """Return SQL text escaped so the driver reads it back verbatim."""
        return text


class QmarkStyle(PlaceholderStyle):
    """``WHERE id = ?``"""

    def marker(self, index: int) -> str:
        return "?"


class NumericStyle(PlaceholderStyle):
    """``WHERE id = :1``"""

    def marker(self, index: int) -> str:
        return f":{index + 1}"


class FormatStyle(PlaceholderStyle):
    """``WHERE id = %s``"""

    def marker(self, index: int) -> str:
        return "%s"

    def escape_literal(self, text: str) -> str:
        return text.replace("%", "%%")


class NamedStyle(PlaceholderStyle):
    """``WHERE id = :p0``"""

    positional = False

    def marker(self, index: int) -> str:
        return f":{self.bind_name(index)}"


class PyformatStyle(PlaceholderStyle):
    """``WHERE id = %(p0)s``"""

    positional = False

    def marker(self, index: int) -> str:
        return f"%({self.bind_name(index)})s"

    def escape_literal(self, text: str) -> str:
        return text.replace("%", "%%")


class PlaceholderStyleRegistry:
    """Registry mapping paramstyle names to :class:`PlaceholderStyle` classes."""

    _styles: ClassVar[dict[str, type[PlaceholderStyle]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[PlaceholderStyle]], type[PlaceholderStyle]]:
        """Decorator that registers a style class under ``name``."""

        def decorator(style_cls: type[PlaceholderStyle]) -> type[PlaceholderStyle]:
            cls._styles[name] = style_cls
            return style_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, style_cls: type[PlaceholderStyle]) -> None:
        """Register a style class without using the decorator form."""
        cls._styles[name] = style_cls

    @classmethod
    def create(cls, name: str) -> PlaceholderStyle:
        """Instantiate the style registered for ``name``.

        Raises:
            ConfigurationError: If no style is registered for ``name``.
        """
        style_cls = cls._styles.get(name)
        if style_cls is None:
            raise ConfigurationError(
                f"Unsupported paramstyle: '{name}'. Registered styles: {sorted(cls._styles)}.",
                option="paramstyle",
            )
        return style_cls()

    @classmethod
    def registered_styles(cls) -> list[str]:
        """Return the sorted list of registered paramstyle names."""
        return sorted(cls._styles)


PlaceholderStyleRegistry.register_class("qmark", QmarkStyle)
PlaceholderStyleRegistry.register_class("numeric", NumericStyle)
PlaceholderStyleRegistry.register_class("format", FormatStyle)
PlaceholderStyleRegistry.register_class("named", NamedStyle)
PlaceholderStyleRegistry.register_class("pyformat", PyformatStyle)
