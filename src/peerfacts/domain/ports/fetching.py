"""Ports for loading candidate extractions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from peerfacts.domain.model import Candidate


@dataclass(slots=True)
class ExtractionLoadResult:
    """Candidates read from one or more extraction files."""

    candidates: list[Candidate] = field(default_factory=list["Candidate"])
    accepted: int = 0
    rejected: int = 0

    def extend(self, other: ExtractionLoadResult) -> None:
        self.candidates.extend(other.candidates)
        self.accepted += other.accepted
        self.rejected += other.rejected


@runtime_checkable
class ExtractionLoader(Protocol):
    """Callable port turning an extraction file into candidates."""

    def __call__(self, path: Path) -> ExtractionLoadResult: ...


__all__ = ["ExtractionLoadResult", "ExtractionLoader"]
