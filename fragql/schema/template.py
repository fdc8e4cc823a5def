"""The compiled form of an annotated SQL statement."""
from __future__ import annotations

from dataclasses import dataclass

from fragql.schema.fragments import (
    Fragment,
    ReflectionFragment,
    ValueFragment,
)


@dataclass(frozen=True)
class CompiledTemplate:
    """An immutable, ordered sequence of fragments.

    Created once per statement (usually via
    :func:`~fragql.compile.parser.compile_template`, which caches it) and
    reused for every invocation.  No per-call state is ever stored here.

    Attributes:
        source: The raw template text.
        fragments: Fragments in template order.
    """

    source: str
    fragments: tuple[Fragment, ...]

    @property
    def value_fragments(self) -> tuple[ValueFragment, ...]:
        """Fragments that need a resolved value per call, in template order."""
        return tuple(f for f in self.fragments if f.carries_value)  # type: ignore[misc]

    @property
    def reflection_fragments(self) -> tuple[ReflectionFragment, ...]:
        """Fragments that produce a binding, in template order."""
        return tuple(f for f in self.fragments if isinstance(f, ReflectionFragment))

    @property
    def param_count(self) -> int:
        """Number of placeholder markers (and bindings) per rendered call."""
        return len(self.reflection_fragments)

    @property
    def parameter_names(self) -> list[str]:
        """Distinct root parameter names, in order of first appearance."""
        names: list[str] = []
        for fragment in self.value_fragments:
            if fragment.parameter_name not in names:
                names.append(fragment.parameter_name)
        return names

    def __str__(self) -> str:
        return "".join(str(f) for f in self.fragments)
