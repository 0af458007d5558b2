"""Database connection and session management."""

import threading
from typing import ContextManager, Generator

from sqlmodel import Session, SQLModel, create_engine

from packlist.config import settings
from packlist.domain import models  # noqa: F401  (registers tables on the metadata)

_connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args=_connect_args,
    pool_pre_ping=True,
)

# Held for every read-allocate-commit sequence and every release against this
# engine, so request threads cannot interleave between reading free ranges and
# committing them.
ledger_lock = threading.RLock()


def init_db() -> None:
    """Create any missing tables."""
    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    """Dependency to provide database session to endpoints."""
    with Session(engine) as session:
        yield session


def get_ledger_lock() -> ContextManager:
    """Dependency to provide the lock guarding dispatch changes on the engine."""
    return ledger_lock
