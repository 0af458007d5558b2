"""SQLModel database models for the product catalog and its dispatch history."""

from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, Relationship, SQLModel

from packlist.domain.services.range_tracker import available_ranges, total_boxes
from packlist.domain.value_objects import BoxRange


class Product(SQLModel, table=True):
    """
    A manufactured product and the batches produced of it.

    Business Rules:
    - a product owns at least one batch
    - deleting a product deletes its batches, their dispatch records and
      every packing list that references it
    """

    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)

    name: str = Field(index=True, max_length=200)
    mfg_date: date = Field(description="Manufacture date")
    exp_date: date = Field(description="Expiry date")
    quantity_per_box: str = Field(max_length=50, description="Units per box, e.g. '10x10'")
    gross_weight: float = Field(ge=0, description="Gross weight per box in kg")
    net_weight: float = Field(ge=0, description="Net weight per box in kg")
    shipping_marks: str = Field(default="", max_length=500)
    shipper_size: str = Field(default="", max_length=100)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    batches: list["Batch"] = Relationship(
        back_populates="product",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Batch.id"},
    )
    packing_lists: list["PackingList"] = Relationship(
        back_populates="product",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "PackingList.id"},
    )


class Batch(SQLModel, table=True):
    """
    A production lot of a product, owning the fixed box range [box_from, box_to].

    Business Rules:
    - batch_no is unique across the whole catalog, ignoring case, which is
      enforced through batch_key
    - dispatch records never overlap and always lie inside the box range
    """

    __tablename__ = "batches"

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: Optional[int] = Field(default=None, foreign_key="products.id", index=True)

    batch_no: str = Field(index=True, max_length=50)
    batch_key: str = Field(
        default="", index=True, max_length=50, description="batch_no stripped and lower-cased"
    )
    box_from: int = Field(ge=1, description="First box number (inclusive)")
    box_to: int = Field(ge=1, description="Last box number (inclusive)")

    product: Optional[Product] = Relationship(back_populates="batches")
    dispatch_records: list["DispatchRecord"] = Relationship(
        back_populates="batch",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "DispatchRecord.id"},
    )

    @property
    def full_range(self) -> BoxRange:
        return BoxRange(self.box_from, self.box_to)

    @property
    def dispatched_ranges(self) -> list[BoxRange]:
        return [record.box_range for record in self.dispatch_records]

    @property
    def total_boxes(self) -> int:
        return self.full_range.size

    @property
    def dispatched_count(self) -> int:
        return total_boxes(self.dispatched_ranges)

    @property
    def available_ranges(self) -> list[BoxRange]:
        """Maximal free sub-ranges, ascending."""
        return available_ranges(self.full_range, self.dispatched_ranges)

    @property
    def available_count(self) -> int:
        return total_boxes(self.available_ranges)

    @property
    def is_fully_dispatched(self) -> bool:
        return self.dispatched_count >= self.total_boxes


class DispatchRecord(SQLModel, table=True):
    """
    A range of boxes of one batch consumed by a packing list.

    Records are tagged with the packing list number and only ever created by
    packing list generation and removed by packing list deletion.
    """

    __tablename__ = "dispatch_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    batch_id: Optional[int] = Field(default=None, foreign_key="batches.id", index=True)

    packing_list_no: str = Field(index=True, max_length=50)
    box_from: int
    box_to: int

    batch: Optional[Batch] = Relationship(back_populates="dispatch_records")

    @property
    def box_range(self) -> BoxRange:
        return BoxRange(self.box_from, self.box_to)


class PackingList(SQLModel, table=True):
    """A dispatch event for one product, identified by its sequence number."""

    __tablename__ = "packing_lists"

    id: Optional[int] = Field(default=None, primary_key=True)
    pl_no: str = Field(unique=True, index=True, max_length=50)
    product_id: Optional[int] = Field(default=None, foreign_key="products.id", index=True)
    pl_date: date = Field(description="Date printed on the packing list")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    product: Optional[Product] = Relationship(back_populates="packing_lists")


class SequenceCounter(SQLModel, table=True):
    """Last issued packing list sequence number per financial year."""

    __tablename__ = "sequence_counters"

    scope_key: str = Field(primary_key=True, max_length=20)
    value: int = Field(default=0)
