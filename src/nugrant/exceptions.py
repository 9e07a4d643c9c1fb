"""Exceptions raised by nugrant bags."""

from typing import Any


class BagError(Exception):
    """Base exception for bag errors."""

    pass


class KeyNormalizationError(BagError, TypeError):
    """Raised when a key cannot be converted to the canonical key form.

    Only strings and enum members can be used as keys. Anything else,
    for example ``42`` or ``object()``, is rejected at construction,
    assignment, lookup and merge time alike.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        self.key_type = type(key)
        super().__init__(
            f"Key cannot be converted to a string key, current value "
            f"[{key!r}] ({self.key_type.__name__})"
        )


class UndefinedKeyError(BagError, KeyError, AttributeError):
    """Raised by the default key error handler when a key is absent.

    Also an AttributeError, so hasattr() and getattr() with a default work
    on attribute-style lookups.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the key
        return f"Undefined parameter '{self.key}'"


class InvalidArrayStrategyError(BagError, ValueError):
    """Raised when a merge is asked for an unknown array strategy."""

    def __init__(self, strategy: Any, allowed: list[str]) -> None:
        self.strategy = strategy
        self.allowed = allowed
        super().__init__(
            f"Invalid array strategy: {strategy!r}. "
            f"Expected one of: {', '.join(allowed)}"
        )
