"""Data access layer for products, batches and packing lists."""

import logging
from typing import Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from packlist.domain.exceptions import (
    PackingListNotFoundError,
    PersistenceError,
    ProductNotFoundError,
)
from packlist.domain.models import (
    Batch,
    DispatchRecord,
    PackingList,
    Product,
    SequenceCounter,
)

logger = logging.getLogger(__name__)


class CatalogRepository:
    """
    Repository for catalog database operations.

    Changes accumulate in the session and become durable together on
    ``save_all``.
    """

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------ #
    # Products and batches                                                 #
    # ------------------------------------------------------------------ #

    def load_products(self) -> List[Product]:
        """All products in creation order."""
        statement = select(Product).order_by(col(Product.id))
        return list(self.session.exec(statement).all())

    def get_product(self, product_id: int) -> Product:
        """
        Retrieve product by ID.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        product = self.session.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(product_id=product_id)
        return product

    def load_batches(self) -> List[Batch]:
        """All batches of all products."""
        statement = select(Batch).order_by(col(Batch.id))
        return list(self.session.exec(statement).all())

    def find_batches_by_keys(
        self,
        keys: Iterable[str],
        exclude_product_id: int | None = None,
    ) -> List[Batch]:
        """
        Batches whose ``batch_key`` is one of ``keys``.

        Args:
            keys: Normalized batch numbers, see ``batch_key``
            exclude_product_id: Skip batches owned by this product

        Returns:
            Matching batches
        """
        keys = list(keys)
        if not keys:
            return []
        statement = select(Batch).where(col(Batch.batch_key).in_(keys))
        if exclude_product_id is not None:
            statement = statement.where(Batch.product_id != exclude_product_id)
        return list(self.session.exec(statement).all())

    def add(self, entity: Product | PackingList) -> None:
        self.session.add(entity)

    def delete(self, entity: Product | PackingList) -> None:
        self.session.delete(entity)

    # ------------------------------------------------------------------ #
    # Packing lists                                                        #
    # ------------------------------------------------------------------ #

    def load_packing_lists(self) -> List[PackingList]:
        """All packing lists in creation order."""
        statement = select(PackingList).order_by(col(PackingList.id))
        return list(self.session.exec(statement).all())

    def search_packing_lists(self, query: str) -> List[PackingList]:
        """
        Packing lists whose number contains ``query``, ignoring case.

        ``%`` and ``_`` in ``query`` match themselves, not any character.
        """
        statement = (
            select(PackingList)
            .where(col(PackingList.pl_no).icontains(query, autoescape=True))
            .order_by(col(PackingList.id))
        )
        return list(self.session.exec(statement).all())

    def get_packing_list(self, pl_no: str) -> PackingList:
        """
        Retrieve packing list by number.

        Raises:
            PackingListNotFoundError: If packing list doesn't exist
        """
        statement = select(PackingList).where(PackingList.pl_no == pl_no)
        packing_list = self.session.exec(statement).first()
        if not packing_list:
            raise PackingListNotFoundError(pl_no=pl_no)
        return packing_list

    def list_dispatch_records(self, pl_no: str) -> List[tuple[DispatchRecord, Batch]]:
        """Records tagged ``pl_no`` with their batch, in dispatch order."""
        statement = (
            select(DispatchRecord, Batch)
            .join(Batch, col(DispatchRecord.batch_id) == col(Batch.id))
            .where(DispatchRecord.packing_list_no == pl_no)
            .order_by(col(DispatchRecord.id))
        )
        return [(record, batch) for record, batch in self.session.exec(statement).all()]

    def next_sequence_number(self, scope_key: str) -> int:
        """
        Increment and return the counter for ``scope_key``.

        The increment is part of the pending unit of work: it becomes durable
        with ``save_all`` and is discarded on rollback.
        """
        counter = self.session.get(SequenceCounter, scope_key, with_for_update=True)
        if counter is None:
            counter = SequenceCounter(scope_key=scope_key, value=0)
            self.session.add(counter)
        counter.value += 1
        return counter.value

    # ------------------------------------------------------------------ #
    # Unit of work                                                         #
    # ------------------------------------------------------------------ #

    def save_all(self) -> None:
        """
        Make every pending change durable.

        Raises:
            PersistenceError: Commit failed; all pending changes were rolled
                back and loaded objects reflect the stored state again
        """
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Commit failed, pending changes rolled back", exc_info=True)
            raise PersistenceError(f"Could not save changes: {e}") from e

    def rollback(self) -> None:
        self.session.rollback()
