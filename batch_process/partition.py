"""
Splitting of an ordered sequence into fixed-size groups.
"""

from typing import Any, Iterable, List, TypeVar

from telemetry.exceptions import InvalidConfigurationError

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 1


def validate_batch_size(value: Any, field: str = "batch_size") -> int:
    """Return ``value`` if it is an integer >= 1, raise otherwise."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfigurationError(
            f"{field} must be a positive integer", field=field, value=value
        )
    return value


def partition(items: Iterable[T], size: int = DEFAULT_BATCH_SIZE) -> List[List[T]]:
    """
    Split items into consecutive groups of ``size`` elements.

    Every group but the last holds exactly ``size`` items; concatenating the
    groups gives back the input. An empty input gives no groups at all.

    Args:
        items: Items to split (any iterable, consumed once)
        size: Group size, a positive integer

    Returns:
        List of groups, in input order

    Raises:
        InvalidConfigurationError: If ``size`` is not a positive integer

    Example:
        >>> partition([1, 2, 3, 4, 5, 6, 7, 8, 9, 10], 3)
        [[1, 2, 3], [4, 5, 6], [7, 8, 9], [10]]
    """
    size = validate_batch_size(size, field="size")
    sequence = list(items)
    return [sequence[i : i + size] for i in range(0, len(sequence), size)]
