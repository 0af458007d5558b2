"""Business logic layer for the product and batch catalog."""

import logging
import re
import threading
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import ContextManager, List, Sequence

from sqlmodel import Session

from packlist.domain.exceptions import DuplicateBatchError, ValidationError
from packlist.domain.models import Batch, Product
from packlist.domain.value_objects import BatchSpec, BoxRange, batch_key
from packlist.repositories.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

_LETTER = re.compile(r"[a-z]", re.IGNORECASE)
_DIGIT = re.compile(r"[0-9]")


@dataclass
class ProductMatch:
    """A product together with the batches a search selected for display."""

    product: Product
    batches: List[Batch]


def is_batch_query(query: str) -> bool:
    """Queries mixing letters and digits look like batch numbers."""
    return bool(_LETTER.search(query)) and bool(_DIGIT.search(query))


class ProductService:
    """
    Service layer for product business logic.

    Catalog changes take ``lock``, which must be the lock shared by every
    service writing to the same store. Without one the instance gets its own.
    """

    def __init__(self, session: Session, lock: ContextManager | None = None):
        self.repository = CatalogRepository(session)
        self.lock = lock if lock is not None else threading.RLock()

    def create_product(
        self,
        name: str,
        mfg_date: date,
        exp_date: date,
        quantity_per_box: str,
        gross_weight: float,
        net_weight: float,
        batches: Sequence[BatchSpec],
        shipping_marks: str = "",
        shipper_size: str = "",
    ) -> Product:
        """
        Create a product with its batches.

        Raises:
            ValidationError: Missing fields or an invalid batch range
            DuplicateBatchError: A batch number is already used, ignoring case
        """
        self._validate(name, quantity_per_box, batches)
        with self.lock:
            self._check_unique_batches(batches, exclude_product_id=None)

            product = Product(
                name=name.strip(),
                mfg_date=mfg_date,
                exp_date=exp_date,
                quantity_per_box=quantity_per_box.strip(),
                gross_weight=gross_weight,
                net_weight=net_weight,
                shipping_marks=shipping_marks,
                shipper_size=shipper_size,
                batches=[
                    Batch(
                        batch_no=spec.batch_no.strip(),
                        batch_key=batch_key(spec.batch_no),
                        box_from=spec.box_from,
                        box_to=spec.box_to,
                    )
                    for spec in batches
                ],
            )
            self.repository.add(product)
            self.repository.save_all()

        logger.info("Product created", extra={"product_id": product.id})
        return product

    def update_product(
        self,
        product_id: int,
        name: str,
        mfg_date: date,
        exp_date: date,
        quantity_per_box: str,
        gross_weight: float,
        net_weight: float,
        batches: Sequence[BatchSpec],
        shipping_marks: str = "",
        shipper_size: str = "",
    ) -> Product:
        """
        Replace a product's attributes and batches.

        Submitted batches are matched to existing ones by batch number,
        ignoring case. Matched batches keep their dispatch records.

        Raises:
            ProductNotFoundError: Product doesn't exist
            ValidationError: Invalid input, a new range no longer covers the
                batch's dispatched boxes, or a dispatched batch was dropped
            DuplicateBatchError: A batch number is used by another product
        """
        self._validate(name, quantity_per_box, batches)
        with self.lock:
            product = self.repository.get_product(product_id)
            self._check_unique_batches(batches, exclude_product_id=product_id)

            existing = {batch_key(batch.batch_no): batch for batch in product.batches}
            submitted = {batch_key(spec.batch_no) for spec in batches}
            for key, batch in existing.items():
                if key not in submitted and batch.dispatch_records:
                    raise ValidationError(
                        f"Batch {batch.batch_no} has dispatched boxes and cannot be removed"
                    )
            for spec in batches:
                batch = existing.get(batch_key(spec.batch_no))
                if batch is not None:
                    self._check_covers_dispatched(batch, spec)

            updated: list[Batch] = []
            for spec in batches:
                batch = existing.get(batch_key(spec.batch_no))
                if batch is None:
                    batch = Batch()
                batch.batch_no = spec.batch_no.strip()
                batch.batch_key = batch_key(spec.batch_no)
                batch.box_from = spec.box_from
                batch.box_to = spec.box_to
                updated.append(batch)

            product.name = name.strip()
            product.mfg_date = mfg_date
            product.exp_date = exp_date
            product.quantity_per_box = quantity_per_box.strip()
            product.gross_weight = gross_weight
            product.net_weight = net_weight
            product.shipping_marks = shipping_marks
            product.shipper_size = shipper_size
            product.batches = updated
            product.updated_at = datetime.now(timezone.utc)

            self.repository.save_all()

        logger.info("Product updated", extra={"product_id": product_id})
        return product

    def delete_product(self, product_id: int) -> None:
        """Delete a product with its batches, dispatch history and packing lists."""
        with self.lock:
            product = self.repository.get_product(product_id)
            self.repository.delete(product)
            self.repository.save_all()

        logger.info("Product deleted", extra={"product_id": product_id})

    def get_product(self, product_id: int) -> Product:
        """Retrieve product by ID."""
        return self.repository.get_product(product_id)

    def search_products(self, query: str = "") -> List[ProductMatch]:
        """
        Find products by name or by batch number.

        A query containing both letters and digits matches batch numbers and
        returns only the matching batches. Any other query matches product
        names and returns only batches that still have boxes to dispatch,
        leaving out products with none. An empty query returns everything.
        """
        query = query.strip().lower()
        products = self.repository.load_products()
        if not query:
            return [ProductMatch(product, list(product.batches)) for product in products]

        matches: list[ProductMatch] = []
        if is_batch_query(query):
            for product in products:
                batches = [b for b in product.batches if query in b.batch_no.lower()]
                if batches:
                    matches.append(ProductMatch(product, batches))
        else:
            for product in products:
                if query not in product.name.lower():
                    continue
                batches = [b for b in product.batches if not b.is_fully_dispatched]
                if batches:
                    matches.append(ProductMatch(product, batches))
        return matches

    def list_dispatchable_products(self) -> List[Product]:
        """Products with at least one batch that is not fully dispatched."""
        return [
            product
            for product in self.repository.load_products()
            if any(not batch.is_fully_dispatched for batch in product.batches)
        ]

    def list_available_batches(self, product_id: int) -> List[Batch]:
        """Batches of a product that still have boxes to dispatch."""
        product = self.repository.get_product(product_id)
        return [batch for batch in product.batches if not batch.is_fully_dispatched]

    # ------------------------------------------------------------------ #
    # Validation                                                           #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _validate(name: str, quantity_per_box: str, batches: Sequence[BatchSpec]) -> None:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not quantity_per_box or not quantity_per_box.strip():
            raise ValidationError("Quantity per box is required")
        if not batches:
            raise ValidationError("Please add at least one batch")
        for spec in batches:
            if not spec.batch_no or not spec.batch_no.strip():
                raise ValidationError("Every batch needs a batch number")
            if spec.box_from < 1 or spec.box_from > spec.box_to:
                raise ValidationError(
                    f"Batch {spec.batch_no} has an invalid box range "
                    f"{spec.box_from}-{spec.box_to} (from must be >= 1 and <= to)"
                )

    def _check_unique_batches(
        self,
        batches: Sequence[BatchSpec],
        exclude_product_id: int | None,
    ) -> None:
        seen: set[str] = set()
        for spec in batches:
            key = batch_key(spec.batch_no)
            if key in seen:
                raise DuplicateBatchError(batch_no=spec.batch_no)
            seen.add(key)

        clashes = self.repository.find_batches_by_keys(seen, exclude_product_id)
        if clashes:
            raise DuplicateBatchError(batch_no=clashes[0].batch_no)

    @staticmethod
    def _check_covers_dispatched(batch: Batch, spec: BatchSpec) -> None:
        new_range = BoxRange(spec.box_from, spec.box_to)
        for dispatched in batch.dispatched_ranges:
            if not new_range.contains(dispatched):
                raise ValidationError(
                    f"Batch {batch.batch_no} range {new_range} does not cover "
                    f"dispatched boxes {dispatched}"
                )
