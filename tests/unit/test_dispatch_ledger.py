"""Unit tests for batch dispatch bookkeeping."""

import pytest

from packlist.domain.exceptions import BatchNotFoundError, ConflictError
from packlist.domain.models import Batch, DispatchRecord
from packlist.domain.services.allocator import allocate
from packlist.domain.services.dispatch_ledger import DispatchLedger
from packlist.domain.value_objects import BoxRange


def make_batch(batch_no: str = "B1", box_from: int = 1, box_to: int = 20) -> Batch:
    """Helper to build a transient batch with no dispatch history."""
    batch = Batch(batch_no=batch_no, box_from=box_from, box_to=box_to)
    batch.dispatch_records = []
    return batch


def assert_conserved(batch: Batch) -> None:
    """Free plus dispatched boxes must always equal the batch size."""
    assert batch.available_count + batch.dispatched_count == batch.total_boxes


class TestBatchDispatchState:
    """Tests for Batch computed properties."""

    def test_fresh_batch(self):
        """A batch without records is entirely available."""
        batch = make_batch()
        assert batch.total_boxes == 20
        assert batch.dispatched_count == 0
        assert batch.available_ranges == [BoxRange(1, 20)]
        assert batch.is_fully_dispatched is False

    def test_with_records(self):
        """Records reduce availability."""
        batch = make_batch()
        batch.dispatch_records = [
            DispatchRecord(box_from=1, box_to=5, packing_list_no="PL-1"),
            DispatchRecord(box_from=8, box_to=9, packing_list_no="PL-2"),
        ]
        assert batch.dispatched_count == 7
        assert batch.available_ranges == [BoxRange(6, 7), BoxRange(10, 20)]
        assert batch.available_count == 13

    def test_fully_dispatched(self):
        """A batch whose every box is dispatched is fully dispatched."""
        batch = make_batch(box_to=3)
        batch.dispatch_records = [DispatchRecord(box_from=1, box_to=3, packing_list_no="PL-1")]
        assert batch.is_fully_dispatched is True
        assert batch.available_ranges == []


class TestCommit:
    """Tests for DispatchLedger.commit."""

    def test_commit_appends_tagged_records(self):
        """Committed ranges become records tagged with the packing list."""
        batch = make_batch()
        ledger = DispatchLedger([batch])

        records = ledger.commit("B1", [BoxRange(1, 12)], "PL-1")

        assert [(r.box_from, r.box_to, r.packing_list_no) for r in records] == [(1, 12, "PL-1")]
        assert batch.dispatched_ranges == [BoxRange(1, 12)]
        assert ledger.available_ranges("B1") == [BoxRange(13, 20)]

    def test_batch_lookup_ignores_case(self):
        """Batches are addressed by case-insensitive batch number."""
        batch = make_batch("B24001a")
        ledger = DispatchLedger([batch])
        ledger.commit("b24001A", [BoxRange(1, 2)], "PL-1")
        assert ledger.dispatched_count("B24001A") == 2

    def test_unknown_batch(self):
        """Committing to a batch outside the ledger raises BatchNotFoundError."""
        ledger = DispatchLedger([make_batch()])
        with pytest.raises(BatchNotFoundError):
            ledger.commit("B9", [BoxRange(1, 2)], "PL-1")

    def test_overlapping_commit_raises(self):
        """A range already dispatched under another packing list is rejected."""
        batch = make_batch()
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(1, 10)], "PL-1")

        with pytest.raises(ConflictError, match="overlaps dispatched range 1-10") as exc_info:
            ledger.commit("B1", [BoxRange(10, 12)], "PL-2")

        assert exc_info.value.batch_no == "B1"
        assert exc_info.value.box_range == BoxRange(10, 12)
        assert exc_info.value.existing == BoxRange(1, 10)

    def test_rejected_commit_leaves_batch_untouched(self):
        """Nothing is appended when any range of the commit conflicts."""
        batch = make_batch()
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(5, 6)], "PL-1")

        with pytest.raises(ConflictError):
            ledger.commit("B1", [BoxRange(1, 2), BoxRange(6, 8)], "PL-2")

        assert batch.dispatched_ranges == [BoxRange(5, 6)]

    def test_self_overlapping_pick_raises(self):
        """Ranges within one commit may not overlap each other."""
        ledger = DispatchLedger([make_batch()])
        with pytest.raises(ConflictError):
            ledger.commit("B1", [BoxRange(1, 5), BoxRange(3, 7)], "PL-1")

    def test_range_outside_batch_raises(self):
        """Ranges must lie inside the batch's box range."""
        ledger = DispatchLedger([make_batch()])
        with pytest.raises(ConflictError, match="outside the batch box range"):
            ledger.commit("B1", [BoxRange(15, 25)], "PL-1")


class TestRelease:
    """Tests for DispatchLedger.release."""

    def test_release_restores_availability(self):
        """Released ranges become available again."""
        batch = make_batch()
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(1, 12)], "PL-1")

        assert ledger.release("PL-1") == 1
        assert ledger.available_ranges("B1") == [BoxRange(1, 20)]

    def test_release_only_matching_tag(self):
        """Records of other packing lists are kept."""
        batch = make_batch()
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(1, 5)], "PL-1")
        ledger.commit("B1", [BoxRange(6, 10)], "PL-2")

        ledger.release("PL-1")

        assert batch.dispatched_ranges == [BoxRange(6, 10)]

    def test_release_across_batches(self):
        """Release removes records from every batch."""
        first, second = make_batch("B1"), make_batch("B2", 1, 5)
        ledger = DispatchLedger([first, second])
        ledger.commit("B1", [BoxRange(1, 3)], "PL-1")
        ledger.commit("B2", [BoxRange(1, 5)], "PL-1")

        assert ledger.release("PL-1") == 2
        assert first.dispatch_records == []
        assert second.dispatch_records == []

    def test_release_is_idempotent(self):
        """Releasing twice leaves the same state as releasing once."""
        batch = make_batch()
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(1, 5)], "PL-1")
        ledger.commit("B1", [BoxRange(6, 8)], "PL-2")

        ledger.release("PL-1")
        after_first = batch.dispatched_ranges
        assert ledger.release("PL-1") == 0
        assert batch.dispatched_ranges == after_first

    def test_release_unknown_is_noop(self):
        """Releasing a number with no records is not an error."""
        batch = make_batch()
        ledger = DispatchLedger([batch])
        assert ledger.release("PL-404") == 0
        assert batch.available_ranges == [BoxRange(1, 20)]


class TestLedgerProperties:
    """Invariants over sequences of commits and releases."""

    def test_round_trip_restores_ranges_exactly(self):
        """Commit of an allocation followed by release restores the free ranges."""
        batch = make_batch(box_to=30)
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(4, 6)], "PL-1")
        ledger.commit("B1", [BoxRange(15, 18)], "PL-2")
        before = ledger.available_ranges("B1")

        allocation = allocate(before, 10)
        ledger.commit("B1", allocation.picked, "PL-3")
        ledger.release("PL-3")

        assert ledger.available_ranges("B1") == before

    def test_coverage_conserved_through_sequence(self):
        """Free plus dispatched boxes stay equal to the batch size."""
        batch = make_batch(box_to=50)
        ledger = DispatchLedger([batch])

        for index, qty in enumerate([7, 3, 12, 1, 9]):
            allocation = allocate(ledger.available_ranges("B1"), qty)
            ledger.commit("B1", allocation.picked, f"PL-{index}")
            assert_conserved(batch)

        for pl_no in ["PL-1", "PL-3", "PL-1"]:
            ledger.release(pl_no)
            assert_conserved(batch)

    def test_freed_gap_is_reused_first(self):
        """After a release, the earliest freed boxes are allocated first."""
        batch = make_batch()
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(1, 5)], "PL-1")
        ledger.commit("B1", [BoxRange(6, 10)], "PL-2")
        ledger.release("PL-1")

        allocation = allocate(ledger.available_ranges("B1"), 7)

        assert allocation.picked == (BoxRange(1, 5), BoxRange(11, 12))

    def test_is_fully_dispatched(self):
        """The ledger reports batches without free boxes."""
        batch = make_batch(box_to=4)
        ledger = DispatchLedger([batch])
        ledger.commit("B1", [BoxRange(1, 4)], "PL-1")
        assert ledger.is_fully_dispatched("B1") is True
