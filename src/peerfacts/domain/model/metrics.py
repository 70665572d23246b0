"""Metric vocabulary and per-metric metadata.

``METRIC_INFO`` is the single place that knows which metrics are sub-components
of a total (breakdowns) and which are ratios; both kinds read as implicitly
not-applicable when their stored magnitude is below ``IMPLICIT_NA_EPSILON``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .enums import Unit

IMPLICIT_NA_EPSILON: Final[float] = 1e-4


class Metric(StrEnum):
    NET_INTEREST_INCOME = "Net Interest Income"
    FEE_INCOME = "Fee Income"
    TRADING_OTHER_INCOME = "Trading & Other Income"
    NON_INTEREST_INCOME = "Non-Interest Income"
    TOTAL_INCOME = "Total Income"
    OPERATING_EXPENSES = "Operating Expenses"
    OPERATING_PROFIT = "Operating Profit"
    PROVISIONS = "Provisions"
    SPECIFIC_PROVISIONS = "Specific Provisions (Stage 3)"
    GENERAL_PROVISIONS = "General Provisions (Stage 1 & 2)"
    PRETAX_EARNINGS = "Pretax Earnings"
    TOTAL_LOANS = "Total Loans"
    CASA_DEPOSITS = "CASA Deposits"
    TIME_DEPOSITS = "Time & Structured Deposits"
    TOTAL_DEPOSITS = "Total Deposits"
    LOAN_TO_DEPOSIT_RATIO = "Loan-to-Deposit Ratio"
    NET_INTEREST_MARGIN = "Net Interest Margin"
    COST_TO_INCOME_RATIO = "Cost-to-Income Ratio"
    NON_NII_RATIO = "Non-NII Ratio"
    CASA_RATIO = "CASA Ratio"
    NPL_RATIO = "NPL Ratio"


@dataclass(frozen=True, slots=True)
class MetricInfo:
    unit: Unit = Unit.MILLIONS
    is_breakdown: bool = False
    is_ratio: bool = False

    @property
    def may_be_implicitly_na(self) -> bool:
        return self.is_breakdown or self.is_ratio


_AMOUNT = MetricInfo()
_BREAKDOWN = MetricInfo(is_breakdown=True)
_RATIO = MetricInfo(unit=Unit.PERCENT, is_ratio=True)

METRIC_INFO: Final[dict[Metric, MetricInfo]] = {
    Metric.NET_INTEREST_INCOME: _AMOUNT,
    Metric.FEE_INCOME: _BREAKDOWN,
    Metric.TRADING_OTHER_INCOME: _BREAKDOWN,
    Metric.NON_INTEREST_INCOME: _AMOUNT,
    Metric.TOTAL_INCOME: _AMOUNT,
    Metric.OPERATING_EXPENSES: _AMOUNT,
    Metric.OPERATING_PROFIT: _AMOUNT,
    Metric.PROVISIONS: _AMOUNT,
    Metric.SPECIFIC_PROVISIONS: _BREAKDOWN,
    Metric.GENERAL_PROVISIONS: _BREAKDOWN,
    Metric.PRETAX_EARNINGS: _AMOUNT,
    Metric.TOTAL_LOANS: _AMOUNT,
    Metric.CASA_DEPOSITS: _BREAKDOWN,
    Metric.TIME_DEPOSITS: _BREAKDOWN,
    Metric.TOTAL_DEPOSITS: _AMOUNT,
    Metric.LOAN_TO_DEPOSIT_RATIO: _RATIO,
    Metric.NET_INTEREST_MARGIN: _RATIO,
    Metric.COST_TO_INCOME_RATIO: _RATIO,
    Metric.NON_NII_RATIO: _RATIO,
    Metric.CASA_RATIO: _RATIO,
    Metric.NPL_RATIO: _RATIO,
}


def metric_info(metric: Metric) -> MetricInfo:
    return METRIC_INFO[metric]


def is_implicitly_na(metric: Metric, stored_value: float) -> bool:
    """Return whether a near-zero breakdown/ratio figure should read as N/A.

    ``stored_value`` must be the pre-conversion value so the check does not
    depend on the display currency.
    """

    return metric_info(metric).may_be_implicitly_na and abs(stored_value) < IMPLICIT_NA_EPSILON
