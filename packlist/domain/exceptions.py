"""Domain-specific exception classes."""

from __future__ import annotations

from packlist.domain.value_objects import BoxRange


class PackingListError(Exception):
    """Base exception for packing list and dispatch errors."""

    pass


class ValidationError(PackingListError):
    """Raised when submitted product, batch or dispatch data is malformed."""

    pass


class DuplicateBatchError(PackingListError):
    """Raised when a batch number is already used anywhere in the catalog."""

    def __init__(self, batch_no: str):
        self.batch_no = batch_no
        super().__init__(f'Batch number "{batch_no}" is a duplicate')


class InsufficientAvailabilityError(PackingListError):
    """Raised when a batch cannot supply the requested number of boxes."""

    def __init__(self, batch_no: str, available: int, requested: int):
        self.batch_no = batch_no
        self.available = available
        self.requested = requested
        self.shortfall = requested - available
        super().__init__(
            f"Not enough available boxes in batch {batch_no}: "
            f"available={available}, requested={requested}"
        )


class ConflictError(PackingListError):
    """
    Raised when a commit would break the dispatch record invariant.

    Signals a bug in the caller, never a user error.
    """

    def __init__(self, batch_no: str, box_range: BoxRange, existing: BoxRange | None = None):
        self.batch_no = batch_no
        self.box_range = box_range
        self.existing = existing
        if existing is None:
            detail = "lies outside the batch box range"
        else:
            detail = f"overlaps dispatched range {existing}"
        super().__init__(f"Range {box_range} of batch {batch_no} {detail}")


class NotFoundError(PackingListError):
    """Base class for references to unknown entities."""

    pass


class ProductNotFoundError(NotFoundError):
    """Raised when product cannot be found."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class BatchNotFoundError(NotFoundError):
    """Raised when batch cannot be found."""

    def __init__(self, batch_no: str):
        self.batch_no = batch_no
        super().__init__(f"Batch {batch_no} not found")


class PackingListNotFoundError(NotFoundError):
    """Raised when packing list cannot be found."""

    def __init__(self, pl_no: str):
        self.pl_no = pl_no
        super().__init__(f"Packing list {pl_no} not found")


class PersistenceError(PackingListError):
    """Raised when changes could not be saved; nothing was applied."""

    pass
