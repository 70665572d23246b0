"""Candidate records: one immutable extraction of one logical fact.

Candidates are never mutated and never edited in place. Supersession happens
by resolution (a better-ranked candidate wins), not by deletion.
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import (
    Bank,
    Currency,
    Frequency,
    PriorityRank,
    StandardizedSegment,
    StepStatus,
    Unit,
)
from .identity import InstanceId, LogicalKey, instance_id, logical_fact_key
from .metrics import Metric, metric_info


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizationStep:
    """One entry of the audit trail explaining how a value was produced."""

    name: str
    description: str
    status: StepStatus = StepStatus.OK
    raw_input: str | None = None
    transformed_output: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Candidate:
    """One extraction instance of a logical fact from one source document."""

    instance_id: InstanceId
    logical_key: LogicalKey
    metric: Metric
    value: float
    unit: Unit
    currency: Currency
    period: str
    year: int
    frequency: Frequency
    bank: Bank
    source_document: str
    priority: int
    page: int | None = None
    extraction_context: str | None = None
    segment: StandardizedSegment = StandardizedSegment.GROUP
    original_segment: str | None = None
    raw_snippet: str | None = None
    trace: tuple[NormalizationStep, ...] = ()

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        bank: Bank,
        period: str,
        metric: Metric,
        value: float,
        source_document: str,
        priority: int,
        segment: StandardizedSegment = StandardizedSegment.GROUP,
        currency: Currency = Currency.HKD,
        unit: Unit | None = None,
        year: int | None = None,
        frequency: Frequency = Frequency.SEMI_ANNUAL,
        page: int | None = None,
        extraction_context: str | None = None,
        original_segment: str | None = None,
        raw_snippet: str | None = None,
        trace: tuple[NormalizationStep, ...] = (),
    ) -> Candidate:
        """Build a candidate, deriving both identifiers from its content."""

        key = logical_fact_key(bank, period, metric, segment)
        return cls(
            instance_id=instance_id(key, source_document),
            logical_key=key,
            metric=metric,
            value=float(value),
            unit=unit or metric_info(metric).unit,
            currency=currency,
            period=period,
            year=year if year is not None else year_from_period(period),
            frequency=frequency,
            bank=bank,
            source_document=source_document,
            priority=int(priority),
            page=page,
            extraction_context=extraction_context,
            segment=segment,
            original_segment=original_segment,
            raw_snippet=raw_snippet,
            trace=tuple(trace),
        )

    @property
    def is_estimate(self) -> bool:
        return self.priority == PriorityRank.ESTIMATE


def year_from_period(period: str) -> int:
    """Return the numeric year of a period label such as ``"2025 1H"``."""

    head = period.strip()[:4]
    if not head.isdigit():
        raise ValueError(f"Period label does not start with a year: {period!r}")
    return int(head)
