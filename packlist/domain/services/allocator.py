"""Greedy allocation of boxes from free ranges."""

from dataclasses import dataclass
from typing import Sequence

from packlist.domain.value_objects import BoxRange


@dataclass(frozen=True)
class Allocation:
    """Ranges picked for a request and the quantity that could not be met."""

    picked: tuple[BoxRange, ...]
    shortfall: int

    @property
    def is_satisfied(self) -> bool:
        return self.shortfall == 0

    @property
    def picked_count(self) -> int:
        return sum(box_range.size for box_range in self.picked)


def allocate(available: Sequence[BoxRange], quantity: int) -> Allocation:
    """
    Pick ``quantity`` boxes, earliest box numbers first.

    Walks ``available`` in order and takes as much as needed from the start
    of each range. Never reorders ranges to reduce fragmentation or find an
    exact fit.

    Args:
        available: Disjoint free ranges sorted by ``box_from``
        quantity: Boxes requested; zero or negative yields an empty pick

    Returns:
        Allocation whose ``shortfall`` is non-zero when the ranges ran out.
        Callers must discard the pick in that case.
    """
    picked: list[BoxRange] = []
    remaining = max(quantity, 0)

    for free in available:
        if remaining <= 0:
            break
        taken = min(remaining, free.size)
        picked.append(BoxRange(free.box_from, free.box_from + taken - 1))
        remaining -= taken

    return Allocation(picked=tuple(picked), shortfall=remaining)
