"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Bank(StrEnum):
    HSBC = "HSBC (Hong Kong)"
    BEA_HK = "Bank of East Asia (HK)"
    SC_HK = "Standard Chartered HK"
    BOC_HK = "BOC Hong Kong"
    HANG_SENG = "Hang Seng Bank"


class Currency(StrEnum):
    HKD = "HKD"
    USD = "USD"
    GBP = "GBP"


class Frequency(StrEnum):
    QUARTERLY = "Quarterly"
    SEMI_ANNUAL = "Semi-Annual"
    ANNUAL = "Annual"


class StandardizedSegment(StrEnum):
    GROUP = "Group (Total)"
    RETAIL = "Retail & Wealth"
    CORPORATE = "Corporate & Commercial"
    MARKETS = "Global Markets / Treasury"


class Unit(StrEnum):
    """Reporting unit of a figure: currency amount (millions) or percentage."""

    MILLIONS = "m"
    PERCENT = "%"


class StepStatus(StrEnum):
    OK = "ok"
    WARNING = "warning"


class PriorityRank(IntEnum):
    """Waterfall rank carried by every candidate; lower is more authoritative."""

    STATUTORY = 1
    DATA_PACK = 2
    PRESENTATION = 3
    ESTIMATE = 4


class DisplayState(StrEnum):
    """What a consumer is allowed to see for one logical fact."""

    HIDDEN = "hidden"
    PENDING = "pending"
    NOT_APPLICABLE = "not_applicable"
    VALUE = "value"


class MutationOutcome(StrEnum):
    """Observable result of an overlay mutation."""

    APPLIED = "applied"
    LOCKED = "locked"
