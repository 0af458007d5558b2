"""API endpoints for product and batch operations."""

from typing import Annotated, ContextManager

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from packlist.database import get_ledger_lock, get_session
from packlist.domain.exceptions import (
    DuplicateBatchError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
)
from packlist.domain.models import Batch, Product
from packlist.domain.services.product_service import ProductService
from packlist.domain.value_objects import BatchSpec
from packlist.schemas.product import (
    AvailableBatchListResponse,
    AvailableBatchResponse,
    BatchResponse,
    ProductListResponse,
    ProductRequest,
    ProductResponse,
    ProductSummary,
    ProductSummaryListResponse,
)

router = APIRouter(prefix="/products", tags=["products"])


def _product_fields(product_data: ProductRequest) -> dict[str, object]:
    fields = product_data.model_dump(exclude={"batches"})
    fields["batches"] = [
        BatchSpec(batch_no=b.batch_no, box_from=b.box_from, box_to=b.box_to)
        for b in product_data.batches
    ]
    return fields


def _product_response(product: Product, batches: list[Batch] | None = None) -> ProductResponse:
    response = ProductResponse.model_validate(product)
    if batches is not None:
        response.batches = [BatchResponse.model_validate(b) for b in batches]
    return response


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductRequest,
    session: Annotated[Session, Depends(get_session)],
    lock: Annotated[ContextManager, Depends(get_ledger_lock)],
) -> ProductResponse:
    """Create a product with its batches."""
    service = ProductService(session, lock=lock)

    try:
        product = service.create_product(**_product_fields(product_data))
        return _product_response(product)

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except DuplicateBatchError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )


@router.get("/", response_model=ProductListResponse)
def search_products(
    q: str = Query("", max_length=100, description="Product name or batch number"),
    session: Annotated[Session, Depends(get_session)] = None,
) -> ProductListResponse:
    """Search products by name, or by batch number when the query mixes letters and digits."""
    service = ProductService(session)
    matches = service.search_products(q)

    return ProductListResponse(
        products=[_product_response(m.product, m.batches) for m in matches],
        total=len(matches),
    )


@router.get("/dispatchable", response_model=ProductSummaryListResponse)
def list_dispatchable_products(
    session: Annotated[Session, Depends(get_session)],
) -> ProductSummaryListResponse:
    """List products that still have boxes to dispatch."""
    service = ProductService(session)
    products = service.list_dispatchable_products()

    return ProductSummaryListResponse(
        products=[ProductSummary.model_validate(p) for p in products],
        total=len(products),
    )


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> ProductResponse:
    """Retrieve a product by ID."""
    service = ProductService(session)

    try:
        return _product_response(service.get_product(product_id))

    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.get("/{product_id}/available-batches", response_model=AvailableBatchListResponse)
def list_available_batches(
    product_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> AvailableBatchListResponse:
    """List the batches of a product with their free box ranges."""
    service = ProductService(session)

    try:
        batches = service.list_available_batches(product_id)
        return AvailableBatchListResponse(
            product_id=product_id,
            batches=[AvailableBatchResponse.model_validate(b) for b in batches],
        )

    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductRequest,
    session: Annotated[Session, Depends(get_session)],
    lock: Annotated[ContextManager, Depends(get_ledger_lock)],
) -> ProductResponse:
    """Replace a product's attributes and batches."""
    service = ProductService(session, lock=lock)

    try:
        product = service.update_product(product_id, **_product_fields(product_data))
        return _product_response(product)

    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except DuplicateBatchError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    session: Annotated[Session, Depends(get_session)],
    lock: Annotated[ContextManager, Depends(get_ledger_lock)],
) -> None:
    """Delete a product, its batches and the packing lists referencing it."""
    service = ProductService(session, lock=lock)

    try:
        service.delete_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
