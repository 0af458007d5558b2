"""Bookkeeping of dispatched box ranges per batch."""

from typing import Iterable, Sequence

from packlist.domain.exceptions import BatchNotFoundError, ConflictError
from packlist.domain.models import Batch, DispatchRecord
from packlist.domain.services.range_tracker import available_ranges
from packlist.domain.value_objects import BoxRange, batch_key


class DispatchLedger:
    """
    Dispatch records of a set of batches, addressed by batch number.

    The ledger mutates the batches it is given; persisting them is up to the
    caller.
    """

    def __init__(self, batches: Iterable[Batch]):
        self._batches: dict[str, Batch] = {
            batch_key(batch.batch_no): batch for batch in batches
        }

    def batch(self, batch_no: str) -> Batch:
        try:
            return self._batches[batch_key(batch_no)]
        except KeyError:
            raise BatchNotFoundError(batch_no=batch_no) from None

    def available_ranges(self, batch_no: str) -> list[BoxRange]:
        batch = self.batch(batch_no)
        return available_ranges(batch.full_range, batch.dispatched_ranges)

    def commit(
        self,
        batch_no: str,
        picked: Sequence[BoxRange],
        packing_list_no: str,
    ) -> list[DispatchRecord]:
        """
        Record ``picked`` as dispatched under ``packing_list_no``.

        Every range is checked before anything is appended, so a rejected
        commit leaves the batch untouched.

        Raises:
            BatchNotFoundError: Batch is not part of this ledger
            ConflictError: A range leaves the batch or overlaps a dispatched one
        """
        batch = self.batch(batch_no)
        full_range = batch.full_range
        occupied = batch.dispatched_ranges

        for box_range in picked:
            if not full_range.contains(box_range):
                raise ConflictError(batch.batch_no, box_range)
            for existing in occupied:
                if box_range.overlaps(existing):
                    raise ConflictError(batch.batch_no, box_range, existing)
            occupied.append(box_range)

        records = [
            DispatchRecord(
                box_from=box_range.box_from,
                box_to=box_range.box_to,
                packing_list_no=packing_list_no,
            )
            for box_range in picked
        ]
        batch.dispatch_records.extend(records)
        return records

    def release(self, packing_list_no: str) -> int:
        """
        Drop every record tagged ``packing_list_no`` from every batch.

        Releasing an unknown number is a no-op.

        Returns:
            Number of records removed
        """
        removed = 0
        for batch in self._batches.values():
            kept = [
                record
                for record in batch.dispatch_records
                if record.packing_list_no != packing_list_no
            ]
            if len(kept) != len(batch.dispatch_records):
                removed += len(batch.dispatch_records) - len(kept)
                batch.dispatch_records = kept
        return removed

    def dispatched_count(self, batch_no: str) -> int:
        return self.batch(batch_no).dispatched_count

    def is_fully_dispatched(self, batch_no: str) -> bool:
        return self.batch(batch_no).is_fully_dispatched
