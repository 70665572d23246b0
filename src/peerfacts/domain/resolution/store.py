"""Append-only collection of candidate records."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from peerfacts.domain.model import PriorityRank

if TYPE_CHECKING:
    from collections.abc import Iterable

    from peerfacts.domain.model import Candidate, LogicalKey

log = logging.getLogger(__name__)


class CandidateStore:
    """Process-wide store of raw extractions, grouped by logical fact key.

    Duplicate instance ids are tolerated: re-ingesting the same document adds
    identical candidates that lose every tie against the earlier copies, so
    the resolved output does not change. Append order is preserved because
    the resolver breaks rank ties by it.
    """

    def __init__(self, candidates: Iterable[Candidate] = ()) -> None:
        self._lock = threading.Lock()
        self._candidates: list[Candidate] = list(candidates)
        self._version = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._candidates)

    @property
    def version(self) -> int:
        """Counter bumped on every change; used to invalidate derived views."""

        with self._lock:
            return self._version

    def append(self, candidates: Iterable[Candidate]) -> int:
        batch = list(candidates)
        if not batch:
            return 0
        with self._lock:
            self._candidates.extend(batch)
            self._version += 1
        log.debug("Appended %s candidates", len(batch))
        return len(batch)

    def all(self) -> tuple[Candidate, ...]:
        with self._lock:
            return tuple(self._candidates)

    def snapshot(self) -> tuple[int, tuple[Candidate, ...]]:
        """Return the current version together with a consistent copy."""

        with self._lock:
            return self._version, tuple(self._candidates)

    def by_key(self, key: LogicalKey) -> tuple[Candidate, ...]:
        with self._lock:
            return tuple(c for c in self._candidates if c.logical_key == key)

    def keys(self) -> tuple[LogicalKey, ...]:
        with self._lock:
            return tuple(dict.fromkeys(c.logical_key for c in self._candidates))

    def replace_estimates(
        self,
        keys: Iterable[LogicalKey],
        candidates: Iterable[Candidate],
    ) -> int:
        """Drop earlier estimates for ``keys`` and append ``candidates``.

        Returns the number of superseded estimates. Extractions from source
        documents are never removed.
        """

        targets = set(keys)
        batch = list(candidates)
        with self._lock:
            kept = [
                c
                for c in self._candidates
                if not (c.logical_key in targets and c.priority == PriorityRank.ESTIMATE)
            ]
            removed = len(self._candidates) - len(kept)
            kept.extend(batch)
            self._candidates = kept
            self._version += 1
        return removed

    def clear(self) -> None:
        with self._lock:
            self._candidates = []
            self._version += 1
