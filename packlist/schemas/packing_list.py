"""Pydantic schemas for packing list API requests and responses."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from packlist.schemas.product import BoxRangeResponse


class DispatchItemRequest(BaseModel):
    """Boxes requested from one batch."""

    batch_no: str = Field(min_length=1, max_length=50)
    qty: int = Field(gt=0, description="Number of boxes to dispatch")

    model_config = {"str_strip_whitespace": True}


class PackingListCreateRequest(BaseModel):
    """Request schema for generating a packing list."""

    product_id: int
    pl_date: date = Field(description="Date printed on the packing list")
    batches: list[DispatchItemRequest] = Field(min_length=1)

    @field_validator("batches")
    @classmethod
    def ensure_unique_batches(cls, value: list[DispatchItemRequest]) -> list[DispatchItemRequest]:
        """Each batch may appear only once per request."""
        seen: set[str] = set()
        for item in value:
            key = item.batch_no.lower()
            if key in seen:
                raise ValueError(f"Batch {item.batch_no} is requested more than once")
            seen.add(key)
        return value


class PackingListBatchResponse(BaseModel):
    """Ranges a packing list took from one batch."""

    batch_no: str
    ranges: list[BoxRangeResponse]
    boxes: int


class PackingListResponse(BaseModel):
    """Response schema for packing list details."""

    pl_no: str
    product_id: int
    product_name: str
    pl_date: date
    batches: list[PackingListBatchResponse]
    total_boxes: int
    created_at: datetime


class PackingListSummary(BaseModel):
    """Search result entry."""

    pl_no: str
    product_id: int
    pl_date: date

    model_config = {"from_attributes": True}


class PackingListSearchResponse(BaseModel):
    """Response schema for packing list search."""

    packing_lists: list[PackingListSummary]
    total: int


class DocumentRowResponse(BaseModel):
    """One printed row of the packing list."""

    box_numbers: str
    boxes: int
    batch_no: str
    mfg_date: str
    exp_date: str
    quantity_per_box: str
    gross_weight_per_box: str
    net_weight_per_box: str

    model_config = {"from_attributes": True}


class PackingListDocumentResponse(BaseModel):
    """The packing list as laid out for printing."""

    organization_name: str
    pl_no: str
    date: str
    product_name: str
    total_boxes: int
    total_gross_weight: str
    total_net_weight: str
    shipping_marks: str
    shipper_size: str
    rows: list[DocumentRowResponse]
    filename: str

    model_config = {"from_attributes": True}
