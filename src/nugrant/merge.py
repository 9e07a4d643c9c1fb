"""Array strategies and the layering helper used by bag merges."""

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from itertools import chain
from typing import TYPE_CHECKING, Any

from nugrant.exceptions import InvalidArrayStrategyError

if TYPE_CHECKING:
    from nugrant.bag import Bag, KeyErrorHandler


class ArrayStrategy(str, Enum):
    """How two sequences found under the same key are combined."""

    REPLACE = "replace"
    EXTEND = "extend"
    CONCAT = "concat"


def replace_arrays(current: Sequence[Any], incoming: Sequence[Any]) -> Sequence[Any]:
    """Incoming values win, current values are discarded."""
    return incoming


def extend_arrays(current: Sequence[Any], incoming: Sequence[Any]) -> list[Any]:
    """Union of both sequences without duplicates.

    Current elements keep their relative order and come first, followed by
    the incoming elements that were not already present. Two elements are
    duplicates only when they have the same type and compare equal, so
    ``1``, ``1.0`` and ``True`` stay distinct. Unhashable values (dicts,
    bags) are supported.

    Examples:
        >>> extend_arrays([1, 2], [2, 3])
        [1, 2, 3]
    """
    result: list[Any] = []
    for item in chain(current, incoming):
        if not any(type(seen) is type(item) and seen == item for seen in result):
            result.append(item)
    return result


def concat_arrays(current: Sequence[Any], incoming: Sequence[Any]) -> list[Any]:
    """Current values followed by incoming values, duplicates retained.

    Examples:
        >>> concat_arrays([1, 2], [2, 3])
        [1, 2, 2, 3]
    """
    return [*current, *incoming]


ARRAY_MERGERS: dict[ArrayStrategy, Callable[[Sequence[Any], Sequence[Any]], Sequence[Any]]] = {
    ArrayStrategy.REPLACE: replace_arrays,
    ArrayStrategy.EXTEND: extend_arrays,
    ArrayStrategy.CONCAT: concat_arrays,
}


def coerce_array_strategy(strategy: "ArrayStrategy | str") -> ArrayStrategy:
    """Convert a strategy name to an ArrayStrategy.

    Args:
        strategy: An ArrayStrategy member or its string value.

    Returns:
        The matching ArrayStrategy.

    Raises:
        InvalidArrayStrategyError: If the strategy is unknown.
    """
    try:
        return ArrayStrategy(strategy)
    except ValueError:
        raise InvalidArrayStrategyError(
            strategy, [member.value for member in ArrayStrategy]
        ) from None


def combine_arrays(
    current: Sequence[Any], incoming: Sequence[Any], strategy: ArrayStrategy
) -> Sequence[Any]:
    """Combine two sequences according to ``strategy``."""
    return ARRAY_MERGERS[strategy](current, incoming)


def deep_merge(
    base: Mapping[Any, Any],
    override: Mapping[Any, Any],
    *,
    array_strategy: "ArrayStrategy | str | None" = None,
    key_error: "KeyErrorHandler | None" = None,
) -> "Bag":
    """Deep merge two mappings into a new bag.

    Builds a fresh bag from ``base`` and merges ``override`` into it with
    :meth:`Bag.merge_into`. Useful for layering configuration sources
    (defaults, then user overrides, then environment-specific overrides)
    without touching any of the layers.

    Args:
        base: The mapping to merge into.
        override: The mapping whose values take precedence.
        array_strategy: How sequences are combined. Defaults to the
            configured strategy (``replace`` unless overridden).
        key_error: Missing-key handler for the resulting bag. Defaults to
            the handler of ``base`` when it is a bag.

    Returns:
        A new Bag with merged values. Neither input is modified.

    Examples:
        >>> deep_merge({"a": {"x": 1}}, {"a": {"y": 2}}).to_dict()
        {'a': {'x': 1, 'y': 2}}

        >>> deep_merge({"a": [1, 2]}, {"a": [3, 4]}).to_dict()
        {'a': [3, 4]}
    """
    from nugrant.bag import Bag

    # Rebuild from plain dicts so no nested bag is shared with the inputs
    if isinstance(base, Bag):
        if key_error is None:
            key_error = base.key_error
        base = base.to_dict()
    if isinstance(override, Bag):
        override = override.to_dict()

    result = Bag(base, key_error=key_error)
    result.merge_into(override, array_strategy=array_strategy)
    return result
