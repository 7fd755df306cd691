"""
Helpers for splitting IN-clause parameters into bounded batches.
"""
from typing import Iterator, List, Sequence, TypeVar

T = TypeVar("T")


def chunked(values: Sequence[T], size: int) -> Iterator[List[T]]:
    """
    Yield consecutive slices of ``values`` holding at most ``size`` items.

    Args:
        values: Values to split
        size: Maximum slice length (must be positive)

    Raises:
        ValueError: If size is not positive
    """
    if size <= 0:
        raise ValueError("Batch size must be positive")
    for start in range(0, len(values), size):
        yield list(values[start:start + size])
