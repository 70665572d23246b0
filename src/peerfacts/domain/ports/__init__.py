"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ExtractionLoader, ExtractionLoadResult
from .persistence import Repository, ValidationStatusRepository
from .unit_of_work import (
    OverlayRepositories,
    OverlayUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ExtractionLoadResult",
    "ExtractionLoader",
    "OverlayRepositories",
    "OverlayUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
    "ValidationStatusRepository",
]
