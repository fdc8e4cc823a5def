"""fragQL value resolution: placeholder paths → argument values."""
from fragql.resolve.resolver import ValueResolver
from fragql.resolve.strategies import (
    Accessor,
    BooleanAccessorStrategy,
    GeneralAccessorStrategy,
    KeyedLookupStrategy,
    PublicFieldStrategy,
    ResolutionStrategy,
    default_strategies,
)

__all__ = [
    "ValueResolver",
    "Accessor",
    "ResolutionStrategy",
    "BooleanAccessorStrategy",
    "GeneralAccessorStrategy",
    "PublicFieldStrategy",
    "KeyedLookupStrategy",
    "default_strategies",
]
