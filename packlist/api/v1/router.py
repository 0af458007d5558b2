"""Main router aggregator for API v1."""

from fastapi import APIRouter

from packlist.api.v1.packing_lists import router as packing_lists_router
from packlist.api.v1.products import router as products_router

router = APIRouter(prefix="/api")

router.include_router(products_router)
router.include_router(packing_lists_router)
