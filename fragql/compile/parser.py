"""Template parser: annotated SQL text → :class:`CompiledTemplate`.

Placeholder syntax
------------------
``{name}`` / ``{name.sub.sub}``
    Reflection fragment.  Bound as one prepared-statement value.
``{sql: name.sub}``
    Substitution fragment.  The resolved value is written into the SQL text.
``{fn ...}``, ``{d ...}``, ``{t ...}``, ``{ts ...}``, ``{call ...}``,
``{?= call ...}``, ``{oj ...}``, ``{escape ...}``, ``{limit ...}``
    Driver escape sequences.  Kept verbatim (braces included) as literal
    text; placeholders inside them are still compiled, e.g.
    ``{call update_emp({emp.id}, {emp.name})}``.

Everything outside braces is literal text; adjacent literal runs are merged
into one fragment.  Declared SQL types are supplied out of band as a mapping
from placeholder expression to type name::

    compile_template(
        "UPDATE emp SET hired = {hired} WHERE id = {emp.id}",
        types={"hired": "DATE", "emp.id": "INTEGER"},
    )

:func:`compile_template` memoises results in the process-wide
:class:`~fragql.compile.cache.TemplateCache`; :class:`TemplateParser` itself
is stateless and never caches.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from fragql.compile.cache import TemplateCache, default_cache
from fragql.errors import TemplateSyntaxError
from fragql.schema.fragments import (
    Fragment,
    LiteralFragment,
    ReflectionFragment,
    SubstitutionFragment,
    split_path,
)
from fragql.schema.sql_types import SqlType, TypeMappings, default_type_mappings
from fragql.schema.template import CompiledTemplate

logger = logging.getLogger(__name__)

#: Leading keywords of driver escape sequences that are passed through.
ESCAPE_KEYWORDS: frozenset[str] = frozenset(
    {"fn", "d", "t", "ts", "call", "oj", "escape", "limit"}
)

_SUBSTITUTION_PREFIX = "sql:"

_BRACE_RE = re.compile(r"[{}]")
_ESCAPE_KEYWORD_RE = re.compile(r"\s*([A-Za-z]+)\s")


class TemplateParser:
    """Splits an annotated SQL statement into an ordered fragment sequence.

    Args:
        type_mappings: Lookup used to convert declared type names.  Defaults
            to the process-wide :class:`~fragql.schema.sql_types.TypeMappings`.
    """

    def __init__(self, type_mappings: TypeMappings | None = None) -> None:
        self._type_mappings = type_mappings or default_type_mappings()

    @property
    def type_mappings(self) -> TypeMappings:
        return self._type_mappings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(
        self,
        template: str,
        types: Mapping[str, str] | None = None,
    ) -> CompiledTemplate:
        """Compile ``template`` into a :class:`CompiledTemplate`.

        Args:
            template: The annotated SQL statement.
            types: Optional placeholder expression → SQL type name mapping.

        Returns:
            The compiled template.

        Raises:
            TemplateSyntaxError: On unbalanced, nested, or empty braces, or a
                malformed placeholder path.
            UnknownTypeError: If a declared type name is not recognised.
        """
        declared = self._declared_types(template, types or {})
        fragments: list[Fragment] = []
        literal: list[str] = []
        seen: set[tuple[str, ...]] = set()
        # Offsets of the '{' of every escape sequence still open.
        open_escapes: list[int] = []

        def flush() -> None:
            text = "".join(literal)
            if text:
                fragments.append(LiteralFragment(text))
            literal.clear()

        pos = 0
        while True:
            match = _BRACE_RE.search(template, pos)
            if match is None:
                literal.append(template[pos:])
                break
            at = match.start()
            literal.append(template[pos:at])

            if match.group() == "}":
                if not open_escapes:
                    raise TemplateSyntaxError("Unmatched '}' in SQL statement.", template, at)
                open_escapes.pop()
                literal.append("}")
                pos = at + 1
                continue

            if _starts_escape_sequence(template, at + 1):
                open_escapes.append(at)
                literal.append("{")
                pos = at + 1
                continue

            close_at = template.find("}", at + 1)
            if close_at == -1:
                raise TemplateSyntaxError("Unclosed '{' in SQL statement.", template, at)
            nested_at = template.find("{", at + 1, close_at)
            if nested_at != -1:
                raise TemplateSyntaxError("Nested '{' in SQL statement.", template, nested_at)

            fragment = self._parse_placeholder(template[at + 1 : close_at], template, at, declared)
            flush()
            fragments.append(fragment)
            seen.add(fragment.path)
            pos = close_at + 1

        if open_escapes:
            raise TemplateSyntaxError(
                "Unclosed escape sequence in SQL statement.", template, open_escapes[-1]
            )
        flush()

        unused = set(declared) - seen
        if unused:
            logger.debug(
                "Ignoring declared type(s) for absent placeholder(s): %s",
                sorted(".".join(p) for p in unused),
            )

        compiled = CompiledTemplate(source=template, fragments=tuple(fragments))
        logger.debug(
            "Compiled SQL template into %d fragment(s), %d binding(s)",
            len(compiled.fragments),
            compiled.param_count,
        )
        return compiled

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _declared_types(
        self, template: str, types: Mapping[str, str]
    ) -> dict[tuple[str, ...], SqlType]:
        declared: dict[tuple[str, ...], SqlType] = {}
        for expression, type_name in types.items():
            try:
                path = split_path(expression)
            except ValueError as exc:
                raise TemplateSyntaxError(
                    f"Invalid placeholder in declared types: {exc}", template
                ) from exc
            declared[path] = self._type_mappings.string_to_sql_type(type_name)
        return declared

    @staticmethod
    def _parse_placeholder(
        body: str,
        template: str,
        position: int,
        declared: Mapping[tuple[str, ...], SqlType],
    ) -> ReflectionFragment | SubstitutionFragment:
        stripped = body.strip()
        if not stripped:
            raise TemplateSyntaxError("Empty placeholder '{}' in SQL statement.", template, position)

        try:
            if stripped[: len(_SUBSTITUTION_PREFIX)].lower() == _SUBSTITUTION_PREFIX:
                return SubstitutionFragment.parse(stripped[len(_SUBSTITUTION_PREFIX) :])
            path = split_path(stripped)
        except ValueError as exc:
            raise TemplateSyntaxError(str(exc), template, position) from exc
        return ReflectionFragment(path=path, sql_type=declared.get(path, SqlType.UNKNOWN))


def _starts_escape_sequence(template: str, start: int) -> bool:
    """True when the text after a '{' at ``start - 1`` opens an escape sequence."""
    if template[start:].lstrip().startswith("?="):
        return True
    match = _ESCAPE_KEYWORD_RE.match(template, start)
    return match is not None and match.group(1).lower() in ESCAPE_KEYWORDS


def _cache_key(
    template: str, types: Mapping[str, str] | None, type_mappings: TypeMappings
) -> tuple:
    # TypeMappings hashes by identity, so each lookup table gets its own entries.
    return (template, frozenset((types or {}).items()), type_mappings)


def compile_template(
    template: str,
    types: Mapping[str, str] | None = None,
    *,
    cache: TemplateCache | None = None,
    parser: TemplateParser | None = None,
) -> CompiledTemplate:
    """Compile ``template``, reusing a previously compiled result if cached.

    Args:
        template: The annotated SQL statement.
        types: Optional placeholder expression → SQL type name mapping.
        cache: Cache to use; defaults to the process-wide cache.
        parser: Parser to use on a cache miss.

    Returns:
        The (possibly shared) compiled template.

    Raises:
        TemplateSyntaxError: On malformed placeholders.
        UnknownTypeError: On unrecognised declared type names.
    """
    cache = cache if cache is not None else default_cache()
    parser = parser or TemplateParser()
    return cache.get_or_compile(
        _cache_key(template, types, parser.type_mappings),
        lambda: parser.parse(template, types),
    )
