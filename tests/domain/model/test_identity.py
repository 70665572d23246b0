from __future__ import annotations

import pytest

from peerfacts.domain.model import (
    Bank,
    Metric,
    StandardizedSegment,
    instance_id,
    logical_fact_key,
)
from tests.helpers.candidates import make_candidate


def test_logical_key_is_deterministic() -> None:
    first = logical_fact_key(Bank.HSBC, "2025 1H", Metric.TOTAL_LOANS, StandardizedSegment.GROUP)
    second = logical_fact_key(Bank.HSBC, "2025 1H", Metric.TOTAL_LOANS, StandardizedSegment.GROUP)

    assert first == second
    assert first.startswith("LID-")
    assert len(first) == len("LID-") + 16


@pytest.mark.parametrize(
    ("bank", "period", "metric", "segment"),
    [
        (Bank.BOC_HK, "2025 1H", Metric.TOTAL_LOANS, StandardizedSegment.GROUP),
        (Bank.HSBC, "2024 2H", Metric.TOTAL_LOANS, StandardizedSegment.GROUP),
        (Bank.HSBC, "2025 1H", Metric.TOTAL_DEPOSITS, StandardizedSegment.GROUP),
        (Bank.HSBC, "2025 1H", Metric.TOTAL_LOANS, StandardizedSegment.RETAIL),
    ],
)
def test_logical_key_differs_per_component(
    bank: Bank, period: str, metric: Metric, segment: StandardizedSegment
) -> None:
    base = logical_fact_key(Bank.HSBC, "2025 1H", Metric.TOTAL_LOANS, StandardizedSegment.GROUP)

    assert logical_fact_key(bank, period, metric, segment) != base


def test_logical_key_ignores_surrounding_whitespace() -> None:
    assert logical_fact_key(" HSBC", "2025 1H ", "NII", "Group") == logical_fact_key(
        "HSBC", "2025 1H", "NII", "Group"
    )


def test_instance_id_depends_on_source_document() -> None:
    key = logical_fact_key(Bank.HSBC, "2025 1H", Metric.TOTAL_LOANS, StandardizedSegment.GROUP)

    report = instance_id(key, "2025 Interim Report")
    deck = instance_id(key, "2025 Interim Presentation")

    assert report.startswith("DP-")
    assert report != deck
    assert instance_id(key, "2025 Interim Report") == report


def test_candidate_create_derives_both_identifiers() -> None:
    candidate = make_candidate()
    again = make_candidate(value=999.0, priority=3)

    assert candidate.logical_key == again.logical_key
    assert candidate.instance_id == again.instance_id
    assert candidate.year == 2025
    assert candidate.logical_key == logical_fact_key(
        Bank.HSBC, "2025 1H", Metric.NET_INTEREST_INCOME, StandardizedSegment.GROUP
    )
