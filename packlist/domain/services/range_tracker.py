"""Computation of the free box ranges of a batch."""

from typing import Iterable

from packlist.domain.value_objects import BoxRange


def available_ranges(full_range: BoxRange, dispatched: Iterable[BoxRange]) -> list[BoxRange]:
    """
    Subtract dispatched ranges from a batch's full range.

    Sweeps the dispatched ranges in ascending order instead of marking every
    box, so the cost depends on the number of records, not the batch size.
    Dispatched ranges are expected to lie inside ``full_range``; parts that
    do not are ignored.

    Args:
        full_range: The batch's complete box range
        dispatched: Ranges already consumed by packing lists

    Returns:
        Disjoint, maximal free ranges sorted by ``box_from``. Empty when the
        batch is fully dispatched.
    """
    free: list[BoxRange] = []
    cursor = full_range.box_from

    for taken in sorted(dispatched):
        if taken.box_from > cursor:
            free.append(BoxRange(cursor, min(taken.box_from - 1, full_range.box_to)))
        cursor = max(cursor, taken.box_to + 1)
        if cursor > full_range.box_to:
            break

    if cursor <= full_range.box_to:
        free.append(BoxRange(cursor, full_range.box_to))

    return free


def total_boxes(ranges: Iterable[BoxRange]) -> int:
    """Sum of the sizes of ``ranges``."""
    return sum(box_range.size for box_range in ranges)
