"""Process-wide, read-mostly cache of compiled templates.

Compilation is a pure function of its key, so the cache never holds its lock
while compiling.  Two threads missing on the same key may both compile; the
first result published wins and every caller receives that same object.
Entries are evicted least-recently-used once ``max_size`` is exceeded.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable

from fragql.schema.template import CompiledTemplate

logger = logging.getLogger(__name__)

_DEFAULT_MAX_SIZE = 512


class TemplateCache:
    """Bounded LRU map of cache key → :class:`CompiledTemplate`.

    Args:
        max_size: Maximum number of entries; ``0`` disables caching.
    """

    def __init__(self, max_size: int = _DEFAULT_MAX_SIZE) -> None:
        if max_size < 0:
            raise ValueError("max_size must be >= 0")
        self._max_size = max_size
        self._entries: OrderedDict[Hashable, CompiledTemplate] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get_or_compile(
        self,
        key: Hashable,
        compile_fn: Callable[[], CompiledTemplate],
    ) -> CompiledTemplate:
        """Return the cached template for ``key``, compiling it on a miss.

        Exceptions raised by ``compile_fn`` propagate and nothing is cached.
        """
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                return cached

        logger.debug("Template cache miss; compiling")
        compiled = compile_fn()
        if self._max_size == 0:
            return compiled

        with self._lock:
            published = self._entries.setdefault(key, compiled)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)
                logger.debug("Template cache full; evicted least recently used entry")
        return published

    def clear(self) -> None:
        """Drop every cached template."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


_DEFAULT_CACHE = TemplateCache()


def default_cache() -> TemplateCache:
    """Return the process-wide :class:`TemplateCache`."""
    return _DEFAULT_CACHE


def configure_default_cache(max_size: int) -> TemplateCache:
    """Replace the process-wide cache with an empty one of ``max_size``.

    Returns:
        The new default cache.
    """
    global _DEFAULT_CACHE
    _DEFAULT_CACHE = TemplateCache(max_size)
    return _DEFAULT_CACHE
