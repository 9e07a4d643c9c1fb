"""Recursive configuration bag with indifferent key access.

A Bag is a mutable mapping whose keys are normalized to plain strings, so
``bag["name"]`` and ``bag[Keys.name]`` address the same entry. Nested
mappings are wrapped into bags on assignment, and values can be read as
attributes (``bag.vm.box``). Bags are layered with :meth:`Bag.merge_into`.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping
from enum import Enum
from typing import Any

from nugrant.exceptions import KeyNormalizationError, UndefinedKeyError
from nugrant.merge import ArrayStrategy, coerce_array_strategy, combine_arrays
from nugrant.settings import ConversionSettings, MergeSettings, get_settings

log = logging.getLogger(__name__)

KeyErrorHandler = Callable[[str], Any]

# Absent marker for raw lookups, distinct from a stored None
_MISSING = object()


def convert_key(key: Any) -> str:
    """Convert a key to its canonical string form.

    Args:
        key: A string or an enum member. String-valued members (StrEnum)
            are keyed by value like any other string, other members by name.

    Returns:
        The canonical key.

    Raises:
        KeyNormalizationError: If the key has no string form.
    """
    if isinstance(key, str):
        # Drop any str subclass (StrEnum included) so stored keys are plain
        return str.__str__(key)
    if isinstance(key, Enum):
        return key.name
    raise KeyNormalizationError(key)


def raise_undefined_key(key: str) -> Any:
    """Default key error handler."""
    log.debug("Undefined parameter %r", key)
    raise UndefinedKeyError(key)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _pairs(elements: Mapping[Any, Any] | Iterable[tuple[Any, Any]]) -> Iterable[tuple[Any, Any]]:
    if isinstance(elements, Mapping):
        return elements.items()
    return elements


class Bag(MutableMapping):
    """Mapping of normalized keys to primitives, sequences or nested bags.

    Missing keys are delegated to a ``key_error`` handler chosen at
    construction. The handler receives the normalized key and either raises
    or returns the value the lookup should produce. By default it raises
    UndefinedKeyError.

    Attribute access is redirected to keyed lookup for every name that is
    not a real attribute, except names starting with an underscore.

    Examples:
        >>> bag = Bag({"vm": {"box": "ubuntu"}})
        >>> bag.vm.box
        'ubuntu'
        >>> Bag(key_error=lambda key: 0).missing
        0
    """

    __slots__ = ("_data", "_key_error")

    def __init__(
        self,
        elements: Mapping[Any, Any] | Iterable[tuple[Any, Any]] | None = None,
        *,
        key_error: KeyErrorHandler | None = None,
    ) -> None:
        """Initialize the bag.

        Args:
            elements: Initial mapping or iterable of ``(key, value)`` pairs.
            key_error: Handler called with the normalized key when a lookup
                misses. Propagated to every nested bag.

        Raises:
            KeyNormalizationError: If any key cannot be normalized.
        """
        self._data: dict[str, Any] = {}
        self._key_error: KeyErrorHandler = key_error or raise_undefined_key

        if elements is None:
            return
        for key, value in _pairs(elements):
            self[key] = value

    @property
    def key_error(self) -> KeyErrorHandler:
        """The missing-key handler of this bag."""
        return self._key_error

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, key: Any) -> Any:
        key = convert_key(key)
        value = self._data.get(key, _MISSING)
        if value is _MISSING:
            return self._key_error(key)
        return value

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[convert_key(key)] = self._wrap(value)

    def __delitem__(self, key: Any) -> None:
        key = convert_key(key)
        if key not in self._data:
            raise UndefinedKeyError(key)
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        return convert_key(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def has_key(self, key: Any) -> bool:
        """Report whether ``key`` is present, without calling the handler."""
        return key in self

    def get(self, key: Any, default: Any = None) -> Any:
        value = self._get_raw(key)
        return default if value is _MISSING else value

    def pop(self, key: Any, *default: Any) -> Any:
        key = convert_key(key)
        if key in self._data:
            return self._data.pop(key)
        if default:
            return default[0]
        raise UndefinedKeyError(key)

    def setdefault(self, key: Any, default: Any = None) -> Any:
        key = convert_key(key)
        if key not in self._data:
            self[key] = default
        return self._data[key]

    def copy(self) -> "Bag":
        """Return a copy with every nested bag rebuilt.

        Leaf values, including sequences, are shared with this bag.
        """
        clone = type(self)(key_error=self._key_error)
        for key, value in self._data.items():
            clone._data[key] = value.copy() if isinstance(value, Bag) else value
        return clone

    def merge_into(
        self,
        other: Mapping[Any, Any] | Iterable[tuple[Any, Any]],
        *,
        array_strategy: ArrayStrategy | str | None = None,
    ) -> None:
        """Deep merge ``other`` into this bag, in place.

        For each incoming pair, the first matching rule applies:

        1. No current value (absent or None): store the incoming value.
           Incoming bags are rebuilt with this bag's handler, never shared.
        2. Both values are mappings: merge recursively into the nested bag.
        3. Both values are sequences: combine them with ``array_strategy``.
        4. Incoming value is not None: overwrite the current value.
        5. Otherwise leave the current value untouched.

        Args:
            other: Mapping or iterable of ``(key, value)`` pairs.
            array_strategy: ``replace`` (incoming wins), ``extend`` (union,
                current elements first) or ``concat`` (current then incoming,
                duplicates kept). Defaults to the configured strategy.

        Raises:
            InvalidArrayStrategyError: If the strategy is unknown.
            KeyNormalizationError: If an incoming key cannot be normalized.
        """
        if array_strategy is None:
            strategy = get_settings(MergeSettings).array_strategy
        else:
            strategy = coerce_array_strategy(array_strategy)

        for key, value in _pairs(other):
            current = self._get_raw(key)

            if current is _MISSING or current is None:
                log.debug("merge %r: set", key)
                self[key] = self._adopt(value)
            elif isinstance(current, Mapping) and isinstance(value, Mapping):
                log.debug("merge %r: nested", key)
                current.merge_into(value, array_strategy=strategy)
            elif _is_sequence(current) and _is_sequence(value):
                log.debug("merge %r: %s arrays", key, strategy.value)
                self[key] = combine_arrays(current, value, strategy)
            elif value is not None:
                log.debug("merge %r: override", key)
                self[key] = self._adopt(value)

    def to_dict(self, *, use_string_keys: bool | None = None) -> dict[Any, Any]:
        """Convert this bag and every nested bag to plain dicts.

        Bags held inside sequences are left as they are.

        Args:
            use_string_keys: Emit ``str()`` keys. Defaults to the configured
                value.

        Returns:
            A plain nested dict.
        """
        if use_string_keys is None:
            use_string_keys = get_settings(ConversionSettings).use_string_keys
        if not self._data:
            return {}

        return {
            (str(key) if use_string_keys else key): (
                value.to_dict(use_string_keys=use_string_keys)
                if isinstance(value, Bag)
                else value
            )
            for key, value in self._data.items()
        }

    to_plain_mapping = to_dict

    def to_list(self) -> list[tuple[str, Any]]:
        """Return the ``(key, value)`` pairs in insertion order."""
        return list(self._data.items())

    def _get_raw(self, key: Any) -> Any:
        # Never calls the key error handler
        return self._data.get(convert_key(key), _MISSING)

    def _adopt(self, value: Any) -> Any:
        # Merged-in bags are rebuilt so the receiver owns them
        if isinstance(value, Bag):
            return type(self)(value.to_dict(use_string_keys=False), key_error=self._key_error)
        return value

    def _wrap(self, value: Any) -> Any:
        if isinstance(value, Mapping) and not isinstance(value, Bag):
            return type(self)(value, key_error=self._key_error)
        return value
