"""Manually modeled proxy figures (priority-4 estimates).

An estimate normally loses the waterfall to any document extraction of the
same fact. Injecting it therefore does two things: it appends the synthetic
candidates (superseding the model's own earlier output) and it force-writes
an override into the validation overlay, which is what makes the estimate
the visible value.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from peerfacts.domain.model import (
    Candidate,
    Currency,
    Frequency,
    NormalizationStep,
    PriorityRank,
    StandardizedSegment,
    StepStatus,
)

from .resolver import resolve

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from peerfacts.domain.model import Bank, LogicalKey, Metric, ValidationStatus

    from .locking import KeyedLock
    from .overlay import ValidationOverlay
    from .store import CandidateStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class EstimateResult:
    """Outcome of one estimate injection."""

    keys: tuple[LogicalKey, ...]
    candidates: tuple[Candidate, ...]
    superseded: int
    statuses: dict[LogicalKey, ValidationStatus]

    @property
    def added(self) -> int:
        return len(self.candidates)


class EstimateInjector:
    """Write estimates into the candidate store and force them active."""

    def __init__(
        self,
        store: CandidateStore,
        overlay: ValidationOverlay,
        *,
        locks: KeyedLock,
    ) -> None:
        self._store = store
        self._overlay = overlay
        self._locks = locks

    def inject(self, candidates: Sequence[Candidate]) -> EstimateResult:
        for candidate in candidates:
            if candidate.priority != PriorityRank.ESTIMATE:
                raise ValueError(
                    f"Estimate candidates must carry priority {int(PriorityRank.ESTIMATE)}, "
                    f"got {candidate.priority} for {candidate.logical_key}"
                )

        # the last estimate of a key in the batch is the only one kept
        latest = {candidate.logical_key: candidate for candidate in candidates}
        keys = tuple(latest)
        accepted = tuple(latest.values())
        statuses: dict[LogicalKey, ValidationStatus] = {}
        with self._locks.hold(*keys):
            superseded = self._store.replace_estimates(keys, accepted)
            for key, estimate in latest.items():
                baseline = self._document_winner(key)
                statuses[key] = self._overlay.force_estimate(
                    key,
                    estimate.value,
                    original_value=baseline.value if baseline is not None else 0.0,
                )

        if len(accepted) != len(candidates):
            log.warning("Dropped %s repeated estimates", len(candidates) - len(accepted))
        log.info(
            "Injected %s estimates for %s facts (superseded %s)",
            len(accepted),
            len(keys),
            superseded,
        )
        return EstimateResult(
            keys=keys,
            candidates=accepted,
            superseded=superseded,
            statuses=statuses,
        )

    def _document_winner(self, key: LogicalKey) -> Candidate | None:
        documents = (c for c in self._store.by_key(key) if not c.is_estimate)
        return resolve(documents).get(key)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True, slots=True, kw_only=True)
class AllocationModel:
    """Allocate a group-level total to a sub-entity by a line-item ratio.

    ``ratio = sum(components) / total * 100`` unless ``ratio_override`` is set;
    the estimate is ``group_total * ratio / 100`` rounded half up.
    """

    label: str
    basis: str
    bank: Bank
    metric: Metric
    components: tuple[float, ...]
    total: float
    group_total: float
    ratio_override: float | None = None
    segment: StandardizedSegment = StandardizedSegment.GROUP
    currency: Currency = Currency.HKD
    frequency: Frequency = Frequency.SEMI_ANNUAL
    page: int | None = None

    @property
    def computed_ratio(self) -> float:
        if self.total <= 0:
            return 0.0
        return sum(self.components) / self.total * 100

    @property
    def ratio(self) -> float:
        return self.ratio_override if self.ratio_override is not None else self.computed_ratio

    @property
    def estimated_value(self) -> int:
        return round_half_up(self.group_total * (self.ratio / 100))

    def source_document(self, period: str) -> str:
        return f"Internal Estimate: {self.label} (Period: {period})"

    def build(self, periods: Iterable[str]) -> tuple[Candidate, ...]:
        """Return one priority-4 candidate per target period."""

        targets = tuple(dict.fromkeys(periods))
        if not targets:
            raise ValueError("Select at least one period to apply the estimate to")

        value = self.estimated_value
        step = NormalizationStep(
            name=f"Allocation Logic ({self.basis})",
            description=(
                f"Ratio: {self.ratio:.2f}%. Formula: sum of {len(self.components)} "
                f"{self.basis.lower()} line items / total ({self.total:,.0f}). "
                f"Applied to group total ({self.group_total:,.0f})."
            ),
            status=StepStatus.WARNING,
        )
        return tuple(
            Candidate.create(
                bank=self.bank,
                period=period,
                metric=self.metric,
                value=value,
                source_document=self.source_document(period),
                priority=PriorityRank.ESTIMATE,
                segment=self.segment,
                currency=self.currency,
                frequency=self.frequency,
                page=self.page,
                extraction_context=f"Calculated via allocation model ({self.label})",
                raw_snippet=f"Est: {value}",
                trace=(step,),
            )
            for period in targets
        )
