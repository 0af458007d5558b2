"""Pydantic schemas for product and batch API requests and responses."""

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator


class BoxRangeResponse(BaseModel):
    """A closed range of box numbers."""

    box_from: int
    box_to: int

    model_config = {"from_attributes": True}


class BatchRequest(BaseModel):
    """A batch as entered on the product form."""

    batch_no: str = Field(
        min_length=1,
        max_length=50,
        description="Batch number, unique across the catalog ignoring case",
        examples=["B24001"],
    )
    box_from: int = Field(ge=1, description="First box number (inclusive)")
    box_to: int = Field(ge=1, description="Last box number (inclusive)")

    model_config = {"str_strip_whitespace": True}

    @model_validator(mode="after")
    def check_range(self) -> "BatchRequest":
        """Box range must not be reversed."""
        if self.box_from > self.box_to:
            raise ValueError("box_from must be less than or equal to box_to")
        return self


class ProductRequest(BaseModel):
    """Request schema for creating or replacing a product with its batches."""

    name: str = Field(min_length=1, max_length=200)
    mfg_date: date = Field(description="Manufacture date")
    exp_date: date = Field(description="Expiry date")
    quantity_per_box: str = Field(min_length=1, max_length=50, examples=["10x10"])
    gross_weight: float = Field(ge=0, description="Gross weight per box in kg")
    net_weight: float = Field(ge=0, description="Net weight per box in kg")
    shipping_marks: str = Field(default="", max_length=500)
    shipper_size: str = Field(default="", max_length=100)
    batches: list[BatchRequest] = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class BatchResponse(BaseModel):
    """Response schema for a batch and its dispatch state."""

    id: int
    batch_no: str
    box_from: int
    box_to: int
    total_boxes: int
    dispatched_count: int
    available_count: int
    is_fully_dispatched: bool
    available_ranges: list[BoxRangeResponse]

    model_config = {"from_attributes": True}


class ProductResponse(BaseModel):
    """Response schema for product details."""

    id: int
    name: str
    mfg_date: date
    exp_date: date
    quantity_per_box: str
    gross_weight: float
    net_weight: float
    shipping_marks: str
    shipper_size: str
    batches: list[BatchResponse]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    """Response schema for product list."""

    products: list[ProductResponse]
    total: int


class ProductSummary(BaseModel):
    """Product entry of the packing list product picker."""

    id: int
    name: str

    model_config = {"from_attributes": True}


class ProductSummaryListResponse(BaseModel):
    """Response schema for the product picker."""

    products: list[ProductSummary]
    total: int


class AvailableBatchResponse(BaseModel):
    """A batch offered for dispatch with its free ranges."""

    batch_no: str
    available_ranges: list[BoxRangeResponse]
    available_count: int

    model_config = {"from_attributes": True}


class AvailableBatchListResponse(BaseModel):
    """Response schema for the batches of a product that can be dispatched."""

    product_id: int
    batches: list[AvailableBatchResponse]
