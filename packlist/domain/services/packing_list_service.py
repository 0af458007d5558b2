"""Business logic layer for packing list generation and deletion."""

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Callable, ContextManager, List, Sequence

from sqlmodel import Session

from packlist.config import settings
from packlist.domain.exceptions import (
    ConflictError,
    InsufficientAvailabilityError,
    ValidationError,
)
from packlist.domain.models import Batch, PackingList, Product
from packlist.domain.services.allocator import allocate
from packlist.domain.services.dispatch_ledger import DispatchLedger
from packlist.domain.services.packing_list_document import (
    PackingListDocument,
    build_packing_list_document,
)
from packlist.domain.services.range_tracker import total_boxes
from packlist.domain.value_objects import (
    BoxRange,
    DispatchRequest,
    FinancialYear,
    PackingListNumber,
    batch_key,
)
from packlist.repositories.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass
class PackingListDetail:
    """A packing list with the box ranges it dispatched, per batch."""

    packing_list: PackingList
    product: Product
    segments: List[tuple[str, BoxRange]]

    @property
    def batches(self) -> List[tuple[str, List[BoxRange]]]:
        """Segments grouped by batch, in the order batches were dispatched."""
        grouped: dict[str, List[BoxRange]] = {}
        for batch_no, box_range in self.segments:
            grouped.setdefault(batch_no, []).append(box_range)
        return list(grouped.items())

    @property
    def total_boxes(self) -> int:
        return total_boxes(box_range for _, box_range in self.segments)


class PackingListService:
    """
    Service layer for packing list business logic.

    Generation and deletion run under ``lock``; pass the lock shared by every
    service writing to the same store.
    """

    def __init__(
        self,
        session: Session,
        prefix: str | None = None,
        financial_year_start_month: int | None = None,
        clock: Callable[[], date] = date.today,
        lock: ContextManager | None = None,
    ):
        self.repository = CatalogRepository(session)
        self.lock = lock if lock is not None else threading.RLock()
        self.prefix = prefix or settings.organization_prefix
        self.financial_year_start_month = (
            financial_year_start_month or settings.financial_year_start_month
        )
        self.clock = clock

    def generate_packing_list(
        self,
        product_id: int,
        pl_date: date,
        requests: Sequence[DispatchRequest],
    ) -> PackingListDetail:
        """
        Allocate boxes from a product's batches and record a new packing list.

        Either every request is satisfied and committed under one new number,
        or nothing changes.

        Args:
            product_id: Product being dispatched
            pl_date: Date printed on the packing list
            requests: Quantity per batch, one entry per batch

        Returns:
            The created packing list with its picked ranges

        Raises:
            ProductNotFoundError: Product doesn't exist
            BatchNotFoundError: A batch doesn't belong to the product
            ValidationError: No requests, repeated batch or non-positive qty
            InsufficientAvailabilityError: A batch lacks enough free boxes
            PersistenceError: Saving failed; nothing was recorded
        """
        self._validate_requests(requests)

        with self.lock:
            product = self.repository.get_product(product_id)
            ledger = DispatchLedger(product.batches)

            plan: list[tuple[Batch, tuple[BoxRange, ...]]] = []
            for request in requests:
                batch = ledger.batch(request.batch_no)
                available = ledger.available_ranges(request.batch_no)
                allocation = allocate(available, request.qty)
                if not allocation.is_satisfied:
                    logger.warning(
                        "Packing list rejected: not enough boxes",
                        extra={"product_id": product_id, "batch_no": batch.batch_no},
                    )
                    raise InsufficientAvailabilityError(
                        batch_no=batch.batch_no,
                        available=total_boxes(available),
                        requested=request.qty,
                    )
                plan.append((batch, allocation.picked))

            pl_no = str(self._next_packing_list_number())
            packing_list = PackingList(pl_no=pl_no, product=product, pl_date=pl_date)
            self.repository.add(packing_list)

            segments: list[tuple[str, BoxRange]] = []
            try:
                for batch, picked in plan:
                    ledger.commit(batch.batch_no, picked, pl_no)
                    segments.extend((batch.batch_no, box_range) for box_range in picked)
            except ConflictError:
                logger.error(
                    "Dispatch ledger conflict while committing packing list",
                    exc_info=True,
                    extra={"pl_no": pl_no, "product_id": product_id},
                )
                self.repository.rollback()
                raise

            self.repository.save_all()

        logger.info(
            "Packing list created",
            extra={"pl_no": pl_no, "product_id": product_id},
        )
        return PackingListDetail(packing_list=packing_list, product=product, segments=segments)

    def delete_packing_list(self, pl_no: str) -> int:
        """
        Delete a packing list and make its boxes available again.

        Returns:
            Number of dispatch records released

        Raises:
            PackingListNotFoundError: Packing list doesn't exist
            PersistenceError: Saving failed; nothing was removed
        """
        with self.lock:
            packing_list = self.repository.get_packing_list(pl_no)
            ledger = DispatchLedger(self.repository.load_batches())
            released = ledger.release(pl_no)
            self.repository.delete(packing_list)
            self.repository.save_all()

        logger.info("Packing list deleted", extra={"pl_no": pl_no})
        return released

    def get_packing_list(self, pl_no: str) -> PackingListDetail:
        """Retrieve a packing list with its dispatched ranges."""
        packing_list = self.repository.get_packing_list(pl_no)
        segments = [
            (batch.batch_no, record.box_range)
            for record, batch in self.repository.list_dispatch_records(pl_no)
        ]
        return PackingListDetail(
            packing_list=packing_list,
            product=packing_list.product,
            segments=segments,
        )

    def search_packing_lists(self, query: str = "") -> List[PackingList]:
        """Packing lists whose number contains ``query``; all when empty."""
        query = query.strip()
        if not query:
            return self.repository.load_packing_lists()
        return self.repository.search_packing_lists(query)

    def build_document(self, pl_no: str, organization_name: str | None = None) -> PackingListDocument:
        """Lay out an existing packing list for printing."""
        detail = self.get_packing_list(pl_no)
        return build_packing_list_document(
            packing_list=detail.packing_list,
            product=detail.product,
            segments=detail.segments,
            organization_name=organization_name or settings.organization_name,
        )

    def _next_packing_list_number(self) -> PackingListNumber:
        financial_year = str(
            FinancialYear.for_date(self.clock(), self.financial_year_start_month)
        )
        sequence = self.repository.next_sequence_number(financial_year)
        return PackingListNumber(
            prefix=self.prefix,
            financial_year=financial_year,
            sequence=sequence,
        )

    @staticmethod
    def _validate_requests(requests: Sequence[DispatchRequest]) -> None:
        if not requests:
            raise ValidationError("Please select at least one batch to dispatch")
        seen: set[str] = set()
        for request in requests:
            key = batch_key(request.batch_no)
            if key in seen:
                raise ValidationError(f"Batch {request.batch_no} is requested more than once")
            seen.add(key)
            if request.qty <= 0:
                raise ValidationError(f"Quantity for batch {request.batch_no} must be positive")
