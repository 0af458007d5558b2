"""Unit tests for domain value objects."""

from datetime import date

import pytest

from packlist.domain.value_objects import BoxRange, FinancialYear, PackingListNumber, batch_key


class TestBoxRange:
    """Tests for BoxRange value object."""

    def test_single_box_range(self):
        """A range whose ends are equal holds one box."""
        assert BoxRange(5, 5).size == 1

    def test_size_is_inclusive(self):
        """Both ends count towards the size."""
        assert BoxRange(1, 20).size == 20

    def test_reversed_range_raises(self):
        """box_from greater than box_to should raise ValueError."""
        with pytest.raises(ValueError, match="Invalid box range"):
            BoxRange(10, 9)

    def test_immutability(self):
        """BoxRange should be immutable (frozen dataclass)."""
        box_range = BoxRange(1, 5)
        with pytest.raises((AttributeError, TypeError)):
            box_range.box_to = 6  # type: ignore[misc]

    def test_ordering_by_start(self):
        """Ranges sort by box_from first."""
        assert sorted([BoxRange(10, 12), BoxRange(1, 5)]) == [BoxRange(1, 5), BoxRange(10, 12)]

    def test_contains(self):
        """A range contains sub-ranges, including itself."""
        outer = BoxRange(1, 20)
        assert outer.contains(BoxRange(1, 20))
        assert outer.contains(BoxRange(5, 7))
        assert not outer.contains(BoxRange(15, 21))

    def test_overlaps_shared_edge(self):
        """Ranges sharing a single box overlap."""
        assert BoxRange(1, 5).overlaps(BoxRange(5, 9))
        assert BoxRange(5, 9).overlaps(BoxRange(1, 5))

    def test_adjacent_ranges_do_not_overlap(self):
        """Touching but disjoint ranges do not overlap."""
        assert not BoxRange(1, 5).overlaps(BoxRange(6, 9))

    def test_str(self):
        """str(BoxRange) should read from-to."""
        assert str(BoxRange(13, 20)) == "13-20"


class TestFinancialYear:
    """Tests for FinancialYear value object."""

    def test_after_start_month(self):
        """Dates from April onwards belong to the year starting that April."""
        assert str(FinancialYear.for_date(date(2024, 6, 1))) == "24-25"

    def test_first_day_of_year(self):
        """The first day of the start month opens a new financial year."""
        assert str(FinancialYear.for_date(date(2025, 4, 1))) == "25-26"

    def test_before_start_month(self):
        """Dates before April belong to the previous financial year."""
        assert str(FinancialYear.for_date(date(2025, 3, 31))) == "24-25"

    def test_century_rollover(self):
        """Two-digit years wrap at the century."""
        assert str(FinancialYear.for_date(date(2099, 12, 1))) == "99-00"

    def test_custom_start_month(self):
        """A January start makes the financial year the calendar year."""
        assert str(FinancialYear.for_date(date(2024, 1, 1), start_month=1)) == "24-25"

    def test_invalid_start_month(self):
        """Start month outside 1-12 should raise ValueError."""
        with pytest.raises(ValueError, match="start month"):
            FinancialYear.for_date(date(2024, 1, 1), start_month=13)


class TestPackingListNumber:
    """Tests for PackingListNumber value object."""

    def test_format_pads_sequence(self):
        """Sequence is zero-padded to three digits."""
        number = PackingListNumber(prefix="QMP", financial_year="24-25", sequence=1)
        assert str(number) == "QMP/PL/24-25/001"

    def test_format_beyond_999(self):
        """Sequences past 999 keep all their digits."""
        number = PackingListNumber(prefix="QMP", financial_year="24-25", sequence=1234)
        assert str(number) == "QMP/PL/24-25/1234"

    def test_parse(self):
        """Formatted numbers parse back into their parts."""
        number = PackingListNumber.parse("QMP/PL/24-25/042")
        assert number.prefix == "QMP"
        assert number.financial_year == "24-25"
        assert number.sequence == 42

    def test_parse_invalid(self):
        """Malformed numbers should raise ValueError."""
        with pytest.raises(ValueError, match="Invalid packing list number format"):
            PackingListNumber.parse("QMP-PL-24-25-001")

    def test_prefix_with_slash_raises(self):
        """The prefix cannot contain the separator."""
        with pytest.raises(ValueError, match="Invalid packing list prefix"):
            PackingListNumber(prefix="Q/M", financial_year="24-25", sequence=1)

    def test_non_positive_sequence_raises(self):
        """Sequence numbers start at 1."""
        with pytest.raises(ValueError, match="must be positive"):
            PackingListNumber(prefix="QMP", financial_year="24-25", sequence=0)


def test_batch_key_ignores_case_and_padding():
    """Batch numbers compare case-insensitively."""
    assert batch_key("  B24001a ") == batch_key("b24001A")
