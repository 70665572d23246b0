"""Public domain model surface."""

from __future__ import annotations

from peerfacts.domain.model.candidate import Candidate, NormalizationStep, year_from_period
from peerfacts.domain.model.enums import (
    Bank,
    Currency,
    DisplayState,
    Frequency,
    MutationOutcome,
    PriorityRank,
    StandardizedSegment,
    StepStatus,
    Unit,
)
from peerfacts.domain.model.identity import (
    InstanceId,
    LogicalKey,
    instance_id,
    logical_fact_key,
)
from peerfacts.domain.model.metrics import (
    IMPLICIT_NA_EPSILON,
    METRIC_INFO,
    Metric,
    MetricInfo,
    is_implicitly_na,
    metric_info,
)
from peerfacts.domain.model.validation import ValidationStatus, utcnow
from peerfacts.domain.model.waterfall import (
    PriorityConfiguration,
    WaterfallConfig,
    WaterfallRule,
)

__all__ = [  # noqa: RUF022
    # identity
    "InstanceId",
    "LogicalKey",
    "instance_id",
    "logical_fact_key",
    # candidates
    "Candidate",
    "NormalizationStep",
    "year_from_period",
    # metrics
    "IMPLICIT_NA_EPSILON",
    "METRIC_INFO",
    "Metric",
    "MetricInfo",
    "is_implicitly_na",
    "metric_info",
    # overlay
    "ValidationStatus",
    "utcnow",
    # waterfall
    "PriorityConfiguration",
    "WaterfallConfig",
    "WaterfallRule",
    # enums
    "Bank",
    "Currency",
    "DisplayState",
    "Frequency",
    "MutationOutcome",
    "PriorityRank",
    "StandardizedSegment",
    "StepStatus",
    "Unit",
]
