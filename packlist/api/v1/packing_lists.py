"""API endpoints for packing list operations.

Packing list numbers contain slashes (``QMP/PL/24-25/001``), so they are
matched with the ``path`` converter and the more specific routes are declared
first.
"""

import logging
from typing import Annotated, ContextManager

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlmodel import Session

from packlist.database import get_ledger_lock, get_session
from packlist.domain.exceptions import (
    BatchNotFoundError,
    ConflictError,
    InsufficientAvailabilityError,
    PackingListNotFoundError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
)
from packlist.domain.services.packing_list_service import (
    PackingListDetail,
    PackingListService,
)
from packlist.domain.value_objects import DispatchRequest
from packlist.reports.pdf_generator import render_packing_list_pdf
from packlist.schemas.packing_list import (
    PackingListBatchResponse,
    PackingListCreateRequest,
    PackingListDocumentResponse,
    PackingListResponse,
    PackingListSearchResponse,
    PackingListSummary,
)
from packlist.schemas.product import BoxRangeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/packing-lists", tags=["packing-lists"])


def _detail_response(detail: PackingListDetail) -> PackingListResponse:
    return PackingListResponse(
        pl_no=detail.packing_list.pl_no,
        product_id=detail.product.id,
        product_name=detail.product.name,
        pl_date=detail.packing_list.pl_date,
        batches=[
            PackingListBatchResponse(
                batch_no=batch_no,
                ranges=[BoxRangeResponse.model_validate(r) for r in ranges],
                boxes=sum(r.size for r in ranges),
            )
            for batch_no, ranges in detail.batches
        ],
        total_boxes=detail.total_boxes,
        created_at=detail.packing_list.created_at,
    )


@router.post("/", response_model=PackingListResponse, status_code=status.HTTP_201_CREATED)
def generate_packing_list(
    request_data: PackingListCreateRequest,
    session: Annotated[Session, Depends(get_session)],
    lock: Annotated[ContextManager, Depends(get_ledger_lock)],
) -> PackingListResponse:
    """Allocate the requested boxes and create a packing list (all or nothing)."""
    service = PackingListService(session, lock=lock)

    try:
        detail = service.generate_packing_list(
            product_id=request_data.product_id,
            pl_date=request_data.pl_date,
            requests=[
                DispatchRequest(batch_no=item.batch_no, qty=item.qty)
                for item in request_data.batches
            ],
        )
        return _detail_response(detail)

    except (ProductNotFoundError, BatchNotFoundError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except InsufficientAvailabilityError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except (ConflictError, PersistenceError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )


@router.get("/", response_model=PackingListSearchResponse)
def search_packing_lists(
    q: str = Query("", max_length=50, description="Part of a packing list number"),
    session: Annotated[Session, Depends(get_session)] = None,
) -> PackingListSearchResponse:
    """Search packing lists by number."""
    service = PackingListService(session)
    packing_lists = service.search_packing_lists(q)

    return PackingListSearchResponse(
        packing_lists=[PackingListSummary.model_validate(pl) for pl in packing_lists],
        total=len(packing_lists),
    )


@router.get("/{pl_no:path}/document", response_model=PackingListDocumentResponse)
def get_packing_list_document(
    pl_no: str,
    session: Annotated[Session, Depends(get_session)],
) -> PackingListDocumentResponse:
    """Packing list laid out for printing."""
    service = PackingListService(session)

    try:
        return PackingListDocumentResponse.model_validate(service.build_document(pl_no))

    except PackingListNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.get("/{pl_no:path}/pdf", response_class=Response)
def export_packing_list_pdf(
    pl_no: str,
    session: Annotated[Session, Depends(get_session)],
) -> Response:
    """Packing list as a PDF download."""
    service = PackingListService(session)

    try:
        document = service.build_document(pl_no)
    except PackingListNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    logger.info("Exporting packing list PDF", extra={"pl_no": pl_no})
    return Response(
        content=render_packing_list_pdf(document),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.get("/{pl_no:path}", response_model=PackingListResponse)
def get_packing_list(
    pl_no: str,
    session: Annotated[Session, Depends(get_session)],
) -> PackingListResponse:
    """Retrieve a packing list with its dispatched ranges."""
    service = PackingListService(session)

    try:
        return _detail_response(service.get_packing_list(pl_no))

    except PackingListNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.put("/{pl_no:path}", status_code=status.HTTP_501_NOT_IMPLEMENTED)
def edit_packing_list(pl_no: str) -> None:
    """Editing an existing packing list is not supported."""
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Editing existing packing lists is not yet implemented",
    )


@router.delete("/{pl_no:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_packing_list(
    pl_no: str,
    session: Annotated[Session, Depends(get_session)],
    lock: Annotated[ContextManager, Depends(get_ledger_lock)],
) -> None:
    """Delete a packing list and make its boxes available again."""
    service = PackingListService(session, lock=lock)

    try:
        service.delete_packing_list(pl_no)
    except PackingListNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
