"""SQLAlchemy adapter package for peerfacts."""

from __future__ import annotations

from .repositories import SqlAlchemyValidationStatusRepository
from .tables import UTCDateTime, metadata, validation_status_table
from .unit_of_work import (
    SqlAlchemyOverlayUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyOverlayUnitOfWork",
    "SqlAlchemyValidationStatusRepository",
    "StartupError",
    "UTCDateTime",
    "configured_engine",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
    "validation_status_table",
]
