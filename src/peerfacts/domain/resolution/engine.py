"""Fact engine facade: candidate store, resolver, overlay and estimates.

The engine owns the single source of truth. Consumers read resolved facts
and validation statuses through it and mutate only through its operations;
observers receive change events after every applied mutation.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from peerfacts.domain.model import MutationOutcome, PriorityRank

from .display import DEFAULT_USD_TO_HKD, FactDisplay, display_for
from .estimates import EstimateInjector, EstimateResult
from .locking import KeyedLock
from .overlay import ValidationOverlay
from .resolver import rank_candidates, resolve
from .store import CandidateStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from peerfacts.domain.model import (
        Bank,
        Candidate,
        Currency,
        Frequency,
        LogicalKey,
        Metric,
        StandardizedSegment,
        ValidationStatus,
    )

    from .resolver import ResolvedFacts

log = logging.getLogger(__name__)


# Events ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OverlayChanged:
    """A validation status was written (``status`` is ``None`` after a reset)."""

    key: LogicalKey | None
    status: ValidationStatus | None


@dataclass(frozen=True, slots=True)
class CandidatesChanged:
    added: int
    removed: int = 0


type EngineEvent = OverlayChanged | CandidatesChanged
type Listener = Callable[[EngineEvent], None]


# Filtering --------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class FactFilter:
    """Selection over resolved facts; empty sets match everything."""

    banks: frozenset[Bank] = field(default_factory=frozenset)
    periods: frozenset[str] = field(default_factory=frozenset)
    segments: frozenset[StandardizedSegment] = field(default_factory=frozenset)
    metrics: frozenset[Metric] = field(default_factory=frozenset)
    frequency: Frequency | None = None
    start_year: int | None = None
    end_year: int | None = None

    @classmethod
    def of(
        cls,
        *,
        banks: Iterable[Bank] = (),
        periods: Iterable[str] = (),
        segments: Iterable[StandardizedSegment] = (),
        metrics: Iterable[Metric] = (),
        frequency: Frequency | None = None,
        start_year: int | None = None,
        end_year: int | None = None,
    ) -> FactFilter:
        return cls(
            banks=frozenset(banks),
            periods=frozenset(periods),
            segments=frozenset(segments),
            metrics=frozenset(metrics),
            frequency=frequency,
            start_year=start_year,
            end_year=end_year,
        )

    def matches(self, fact: Candidate) -> bool:
        if self.banks and fact.bank not in self.banks:
            return False
        if self.periods and fact.period not in self.periods:
            return False
        if self.segments and fact.segment not in self.segments:
            return False
        if self.metrics and fact.metric not in self.metrics:
            return False
        if self.frequency is not None and fact.frequency != self.frequency:
            return False
        if self.start_year is not None and fact.year < self.start_year:
            return False
        return self.end_year is None or fact.year <= self.end_year


# Engine -----------------------------------------------------------------------


class FactEngine:
    """Single owner of candidates and overlay state."""

    def __init__(
        self,
        store: CandidateStore | None = None,
        *,
        usd_to_hkd: float = DEFAULT_USD_TO_HKD,
    ) -> None:
        self._store = store if store is not None else CandidateStore()
        self._locks = KeyedLock()
        self._overlay = ValidationOverlay(self._seed_value, locks=self._locks)
        self._estimates = EstimateInjector(self._store, self._overlay, locks=self._locks)
        self._listeners: list[Listener] = []
        self._memo_lock = threading.Lock()
        self._memo: tuple[int, ResolvedFacts] | None = None
        self.usd_to_hkd = usd_to_hkd

    @property
    def store(self) -> CandidateStore:
        return self._store

    # Observers ----------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: EngineEvent) -> None:
        for listener in tuple(self._listeners):
            listener(event)

    # Candidates ---------------------------------------------------------------

    def ingest_candidates(self, candidates: Iterable[Candidate]) -> int:
        """Append extractions.

        Estimates appended here only compete in the waterfall; ``save_estimate``
        is what makes them the visible value.
        """

        batch = list(candidates)
        estimates = sum(1 for candidate in batch if candidate.priority == PriorityRank.ESTIMATE)
        if estimates:
            log.warning("Ingested %s estimates without activating them", estimates)
        added = self._store.append(batch)
        if added:
            log.info("Ingested %s candidates", added)
            self._emit(CandidatesChanged(added=added))
        return added

    def restore_candidates(self, candidates: Iterable[Candidate]) -> int:
        """Reload persisted extractions, estimates included, leaving the overlay alone."""

        added = self._store.append(candidates)
        log.info("Restored %s candidates", added)
        return added

    def save_estimate(self, candidates: Iterable[Candidate]) -> EstimateResult:
        batch = list(candidates)
        with self._locks.hold(*(candidate.logical_key for candidate in batch)):
            result = self._estimates.inject(batch)
            self._emit(CandidatesChanged(added=result.added, removed=result.superseded))
            for key, status in result.statuses.items():
                self._emit(OverlayChanged(key=key, status=status))
        return result

    def resolved(self) -> ResolvedFacts:
        """Return resolved facts, recomputed only when the store changed."""

        version, candidates = self._store.snapshot()
        with self._memo_lock:
            if self._memo is None or self._memo[0] != version:
                self._memo = (version, resolve(candidates))
            return dict(self._memo[1])

    def get_resolved_facts(self, fact_filter: FactFilter | None = None) -> list[Candidate]:
        facts = self.resolved().values()
        if fact_filter is None:
            return list(facts)
        return [fact for fact in facts if fact_filter.matches(fact)]

    def resolved_fact(self, key: LogicalKey) -> Candidate | None:
        return self.resolved().get(key)

    def candidates_for(self, key: LogicalKey) -> tuple[Candidate, ...]:
        """Every candidate competing for ``key``, winner first."""

        return rank_candidates(self._store.by_key(key))

    def _seed_value(self, key: LogicalKey) -> float | None:
        fact = self.resolved_fact(key)
        return fact.value if fact is not None else None

    # Overlay ------------------------------------------------------------------

    def get_validation_status(self, key: LogicalKey) -> ValidationStatus | None:
        return self._overlay.get(key)

    def validation_statuses(self) -> dict[LogicalKey, ValidationStatus]:
        return self._overlay.statuses()

    def set_value(self, key: LogicalKey, new_value: object) -> MutationOutcome:
        return self._mutate(key, lambda: self._overlay.set_value(key, new_value))

    def set_comment(self, key: LogicalKey, text: str | None) -> MutationOutcome:
        return self._mutate(key, lambda: self._overlay.set_comment(key, text))

    def toggle_validated(self, key: LogicalKey) -> MutationOutcome:
        return self._mutate(key, lambda: self._overlay.toggle_validated(key))

    def toggle_na(self, key: LogicalKey) -> MutationOutcome:
        return self._mutate(key, lambda: self._overlay.toggle_na(key))

    def toggle_flag(self, key: LogicalKey) -> MutationOutcome:
        return self._mutate(key, lambda: self._overlay.toggle_flag(key))

    def _mutate(
        self,
        key: LogicalKey,
        operation: Callable[[], MutationOutcome],
    ) -> MutationOutcome:
        # listeners run under the key lock so persisted order matches overlay order
        with self._locks.hold(key):
            outcome = operation()
            if outcome is MutationOutcome.APPLIED:
                self._emit(OverlayChanged(key=key, status=self._overlay.get(key)))
        return outcome

    def effective_value(self, key: LogicalKey) -> float | None:
        """Overlay value when present, else the resolved raw value."""

        return self._overlay.effective_value(key)

    def display(self, key: LogicalKey, currency: Currency | None = None) -> FactDisplay | None:
        fact = self.resolved_fact(key)
        if fact is None:
            return None
        return display_for(
            fact,
            self._overlay.get(key),
            currency=currency,
            usd_to_hkd=self.usd_to_hkd,
        )

    def load_overlay(self, statuses: Mapping[LogicalKey, ValidationStatus]) -> None:
        """Restore persisted overlay state without emitting change events."""

        self._overlay.load(statuses)

    def reset_overlay(self) -> None:
        self._overlay.reset()
        self._emit(OverlayChanged(key=None, status=None))

    def reset(self) -> None:
        """Drop all candidates and overlay state."""

        removed = len(self._store)
        self._store.clear()
        self._overlay.reset()
        log.info("Engine reset (%s candidates dropped)", removed)
        self._emit(CandidatesChanged(added=0, removed=removed))
        self._emit(OverlayChanged(key=None, status=None))
