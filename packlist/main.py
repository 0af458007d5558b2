"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from packlist.api.v1.router import router as api_v1_router
from packlist.config import settings
from packlist.database import init_db
from packlist.logging_config import configure_logging
from packlist.middleware import CorrelationIdMiddleware


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and create missing tables on startup."""
    configure_logging(log_level=settings.log_level)
    init_db()
    yield


app = FastAPI(
    title="Packing List Dispatch API",
    description="Product batches, box-range dispatch and packing lists",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Attach correlation ID middleware (must be added before routes)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(api_v1_router)


@app.get("/health", tags=["health"])
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
