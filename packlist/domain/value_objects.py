"""Domain value objects for type-safe business concepts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date


_PACKING_LIST_NUMBER_PATTERN: re.Pattern[str] = re.compile(
    r"^(?P<prefix>[^/]+)/PL/(?P<financial_year>\d{2}-\d{2})/(?P<sequence>\d{3,})$"
)


@dataclass(frozen=True, order=True)
class BoxRange:
    """
    Immutable closed interval of physically numbered boxes.

    Both ends are inclusive, so ``BoxRange(5, 5)`` is a single box.
    """

    box_from: int
    box_to: int

    def __post_init__(self) -> None:
        if self.box_from > self.box_to:
            raise ValueError(
                f"Invalid box range: {self.box_from}-{self.box_to}. "
                "box_from must not exceed box_to",
            )

    @property
    def size(self) -> int:
        """Number of boxes in the range."""
        return self.box_to - self.box_from + 1

    def contains(self, other: BoxRange) -> bool:
        return self.box_from <= other.box_from and other.box_to <= self.box_to

    def overlaps(self, other: BoxRange) -> bool:
        return self.box_from <= other.box_to and other.box_from <= self.box_to

    def __str__(self) -> str:
        return f"{self.box_from}-{self.box_to}"


@dataclass(frozen=True)
class FinancialYear:
    """
    Financial year label such as ``24-25``.

    The year turns over on the first day of ``start_month``.
    """

    start_year: int

    @classmethod
    def for_date(cls, on: date, start_month: int = 4) -> FinancialYear:
        if not 1 <= start_month <= 12:
            raise ValueError(f"Invalid financial year start month: {start_month}")
        if on.month >= start_month:
            return cls(on.year)
        return cls(on.year - 1)

    def __str__(self) -> str:
        return f"{self.start_year % 100:02d}-{(self.start_year + 1) % 100:02d}"


@dataclass(frozen=True)
class PackingListNumber:
    """
    Immutable packing list identifier, ``<PREFIX>/PL/<FY>/<seq>``.

    The sequence is zero-padded to three digits and keeps growing past 999.
    """

    prefix: str
    financial_year: str
    sequence: int

    def __post_init__(self) -> None:
        if not self.prefix or "/" in self.prefix:
            raise ValueError(f"Invalid packing list prefix: '{self.prefix}'")
        if self.sequence < 1:
            raise ValueError(f"Packing list sequence must be positive: {self.sequence}")

    @classmethod
    def parse(cls, value: str) -> PackingListNumber:
        match = _PACKING_LIST_NUMBER_PATTERN.match(value)
        if not match:
            raise ValueError(
                f"Invalid packing list number format: '{value}'. "
                "Expected format: PREFIX/PL/YY-YY/NNN",
            )
        return cls(
            prefix=match.group("prefix"),
            financial_year=match.group("financial_year"),
            sequence=int(match.group("sequence")),
        )

    def __str__(self) -> str:
        return f"{self.prefix}/PL/{self.financial_year}/{self.sequence:03d}"


@dataclass(frozen=True)
class BatchSpec:
    """Batch number and full box range as submitted on a product form."""

    batch_no: str
    box_from: int
    box_to: int


@dataclass(frozen=True)
class DispatchRequest:
    """Quantity of boxes requested from one batch for a new packing list."""

    batch_no: str
    qty: int


def batch_key(batch_no: str) -> str:
    """Case-insensitive key under which batch numbers are unique."""
    return batch_no.strip().lower()
