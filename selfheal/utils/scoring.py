from __future__ import annotations

from typing import Iterable

from selfheal.core.metadata import BoundingBox


def relative_difference(expected: float, actual: float) -> float:
    if expected <= 0:
        return float("inf")
    return abs(actual - expected) / expected


def is_size_similar(expected: BoundingBox, actual: BoundingBox, tolerance: float) -> bool:
    """Width and height must each differ by less than ``tolerance`` of the stored size."""

    return (
        relative_difference(expected.width, actual.width) < tolerance
        and relative_difference(expected.height, actual.height) < tolerance
    )


def filter_size_similar(
    expected: BoundingBox,
    candidates: Iterable[BoundingBox],
    tolerance: float,
) -> list[BoundingBox]:
    return [candidate for candidate in candidates if is_size_similar(expected, candidate, tolerance)]
