"""nugrant - Recursive configuration bags with indifferent access.

This package provides the Bag container used to hold nested configuration
values, and the deep merge used to layer configuration sources.
"""

from nugrant.bag import Bag, KeyErrorHandler, convert_key, raise_undefined_key
from nugrant.exceptions import (
    BagError,
    InvalidArrayStrategyError,
    KeyNormalizationError,
    UndefinedKeyError,
)
from nugrant.merge import ArrayStrategy, deep_merge
from nugrant.settings import (
    BagSettings,
    ConversionSettings,
    MergeSettings,
    clear_settings,
    get_settings,
    set_settings,
)

__all__ = [
    # Container
    "Bag",
    "KeyErrorHandler",
    "convert_key",
    "raise_undefined_key",
    # Exceptions
    "BagError",
    "InvalidArrayStrategyError",
    "KeyNormalizationError",
    "UndefinedKeyError",
    # Merge
    "ArrayStrategy",
    "deep_merge",
    # Settings
    "BagSettings",
    "ConversionSettings",
    "MergeSettings",
    "get_settings",
    "set_settings",
    "clear_settings",
]
