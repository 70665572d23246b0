"""Consumer-facing visibility of resolved facts.

Precedence, applied in order:
1) flagged facts are hidden, whatever else is set
2) validated or overridden facts show their effective value (or N/A)
3) everything else is pending; unreviewed raw values are never shown

Implicit N/A is evaluated on the stored value before any currency
conversion, so the outcome is the same in every display currency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from peerfacts.domain.model import Currency, DisplayState, Unit, is_implicitly_na

if TYPE_CHECKING:
    from peerfacts.domain.model import Candidate, Metric, ValidationStatus

DEFAULT_USD_TO_HKD: Final[float] = 7.82

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FactDisplay:
    state: DisplayState
    value: float | None = None
    unit: Unit = Unit.MILLIONS
    currency: Currency | None = None

    def render(self) -> str:
        match self.state:
            case DisplayState.HIDDEN:
                return "-"
            case DisplayState.PENDING:
                return "Pending"
            case DisplayState.NOT_APPLICABLE:
                return "N/A"
            case DisplayState.VALUE:
                value = self.value or 0.0
                if self.unit == Unit.PERCENT:
                    return f"{value:.2f}%"
                return f"{value:,.0f}"


def display_state(
    status: ValidationStatus | None,
    *,
    metric: Metric | None = None,
) -> DisplayState:
    """Apply the display precedence rule to one status."""

    if status is None:
        return DisplayState.PENDING
    if status.is_flagged:
        return DisplayState.HIDDEN
    if status.is_visible:
        if status.is_na:
            return DisplayState.NOT_APPLICABLE
        if metric is not None and is_implicitly_na(metric, status.current_value):
            return DisplayState.NOT_APPLICABLE
        return DisplayState.VALUE
    return DisplayState.PENDING


def display_for(
    fact: Candidate,
    status: ValidationStatus | None,
    *,
    currency: Currency | None = None,
    usd_to_hkd: float = DEFAULT_USD_TO_HKD,
) -> FactDisplay:
    """Return what a consumer may see for ``fact`` in ``currency``."""

    state = display_state(status, metric=fact.metric)
    if state is not DisplayState.VALUE or status is None:
        return FactDisplay(state=state, unit=fact.unit)
    target = currency or fact.currency
    value = convert_amount(
        status.current_value,
        unit=fact.unit,
        source=fact.currency,
        target=target,
        usd_to_hkd=usd_to_hkd,
    )
    return FactDisplay(state=state, value=value, unit=fact.unit, currency=target)


def convert_amount(
    value: float,
    *,
    unit: Unit,
    source: Currency,
    target: Currency,
    usd_to_hkd: float = DEFAULT_USD_TO_HKD,
) -> float:
    """Convert a currency amount; percentages are returned unchanged."""

    if unit == Unit.PERCENT or source == target:
        return value
    if source == Currency.HKD and target == Currency.USD:
        return value / usd_to_hkd
    if source == Currency.USD and target == Currency.HKD:
        return value * usd_to_hkd
    log.debug("No conversion rate for %s -> %s; keeping value", source, target)
    return value


def to_stored_amount(
    display_value: float,
    *,
    unit: Unit,
    stored_currency: Currency,
    display_currency: Currency,
    usd_to_hkd: float = DEFAULT_USD_TO_HKD,
) -> float:
    """Convert a value typed in the display currency back to storage currency."""

    return convert_amount(
        display_value,
        unit=unit,
        source=display_currency,
        target=stored_currency,
        usd_to_hkd=usd_to_hkd,
    )
