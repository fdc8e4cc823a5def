"""Pydantic configuration models.

``TemplateSettings`` groups the knobs that change how templates are cached,
rendered and resolved.  The defaults reproduce the classic behaviour: ``?``
markers, a bounded compile cache, and ``Map.get``-style mapping lookups that
yield ``None`` for absent keys::

    from fragql import TemplateSettings

    settings = TemplateSettings(paramstyle="named", strict_mapping_keys=True)
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ResolverSettings(BaseModel):
    """Options for the value resolver.

    Attributes:
        strict_mapping_keys: When ``True`` a key missing from a mapping raises
            :class:`~fragql.errors.UnresolvablePropertyError`; when ``False``
            (default) it resolves to ``None``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    strict_mapping_keys: bool = False


class TemplateSettings(BaseModel):
    """Top-level fragQL configuration.

    Attributes:
        cache_max_size: Maximum number of compiled templates kept by the
            process-wide cache (``0`` disables caching).
        paramstyle: DB-API paramstyle used for placeholder markers.  Must be
            registered in :class:`~fragql.compile.registry.PlaceholderStyleRegistry`.
        strict_mapping_keys: See :class:`ResolverSettings`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    cache_max_size: int = Field(default=512, ge=0)
    paramstyle: str = "qmark"
    strict_mapping_keys: bool = False

    @property
    def resolver(self) -> ResolverSettings:
        """Returns the resolver-specific subset of these settings."""
        return ResolverSettings(strict_mapping_keys=self.strict_mapping_keys)
