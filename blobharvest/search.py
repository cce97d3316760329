"""Bisection over monotone integer predicates."""

from typing import Callable


def sign(value: int) -> int:
    return (value > 0) - (value < 0)


def binary_search(lower: int, upper: int, predicate: Callable[[int], int]) -> int:
    """
    Return the smallest h in [lower, upper) with predicate(h) >= 0, or upper
    when there is none. If several values map to exactly zero, any one of
    them may be returned.

    ``predicate`` must be non-decreasing and return a negative, zero or
    positive number. It is only called on values in [lower, upper) and may do
    I/O. An exact zero ends the search early.
    """
    while lower < upper:
        mid = (lower + upper) // 2
        v = predicate(mid)
        if v < 0:
            lower = mid + 1
        elif v > 0:
            upper = mid
        else:
            return mid
    return lower
