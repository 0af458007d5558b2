"""Unit tests for greedy box allocation."""

from packlist.domain.services.allocator import allocate
from packlist.domain.value_objects import BoxRange


class TestAllocate:
    """Tests for allocate."""

    def test_exact_single_range(self):
        """A request matching one range takes it whole."""
        allocation = allocate([BoxRange(1, 20)], 20)
        assert allocation.picked == (BoxRange(1, 20),)
        assert allocation.shortfall == 0
        assert allocation.is_satisfied

    def test_takes_from_start_of_range(self):
        """Partial picks start at the beginning of the range."""
        allocation = allocate([BoxRange(1, 20)], 12)
        assert allocation.picked == (BoxRange(1, 12),)

    def test_earliest_boxes_first(self):
        """Earlier ranges are used up before later ones."""
        allocation = allocate([BoxRange(1, 5), BoxRange(10, 12)], 7)
        assert allocation.picked == (BoxRange(1, 5), BoxRange(10, 11))
        assert allocation.shortfall == 0

    def test_does_not_prefer_exact_fit(self):
        """A later range that fits exactly is not chosen over earlier boxes."""
        allocation = allocate([BoxRange(1, 2), BoxRange(10, 12)], 3)
        assert allocation.picked == (BoxRange(1, 2), BoxRange(10, 10))

    def test_stops_once_satisfied(self):
        """Ranges after the request is met are left alone."""
        allocation = allocate([BoxRange(1, 5), BoxRange(10, 12), BoxRange(20, 30)], 5)
        assert allocation.picked == (BoxRange(1, 5),)

    def test_shortfall(self):
        """Requests beyond free capacity report the unmet quantity."""
        allocation = allocate([BoxRange(1, 3)], 5)
        assert allocation.shortfall == 2
        assert not allocation.is_satisfied
        assert allocation.picked_count == 3

    def test_shortfall_with_nothing_free(self):
        """With no free ranges the whole request is short."""
        allocation = allocate([], 4)
        assert allocation.picked == ()
        assert allocation.shortfall == 4

    def test_zero_quantity(self):
        """Zero boxes yields an empty pick without error."""
        allocation = allocate([BoxRange(1, 3)], 0)
        assert allocation.picked == ()
        assert allocation.is_satisfied

    def test_negative_quantity(self):
        """Negative quantities are treated as zero."""
        allocation = allocate([BoxRange(1, 3)], -5)
        assert allocation.picked == ()
        assert allocation.shortfall == 0

    def test_picked_count(self):
        """picked_count sums the picked ranges."""
        allocation = allocate([BoxRange(1, 5), BoxRange(10, 12)], 7)
        assert allocation.picked_count == 7
