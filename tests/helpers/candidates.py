"""Builders for candidate records and extraction payloads used across tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from peerfacts.domain.model import (
    Bank,
    Candidate,
    Currency,
    Metric,
    PriorityRank,
    StandardizedSegment,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def make_candidate(
    *,
    value: float = 100.0,
    priority: int = PriorityRank.STATUTORY,
    source_document: str = "2025 Interim Report",
    bank: Bank = Bank.HSBC,
    period: str = "2025 1H",
    metric: Metric = Metric.NET_INTEREST_INCOME,
    segment: StandardizedSegment = StandardizedSegment.GROUP,
    currency: Currency = Currency.HKD,
    page: int | None = None,
) -> Candidate:
    return Candidate.create(
        bank=bank,
        period=period,
        metric=metric,
        value=value,
        source_document=source_document,
        priority=priority,
        segment=segment,
        currency=currency,
        page=page,
    )


def make_payload(**overrides: Any) -> dict[str, Any]:
    """Return an upstream extraction record; camelCase keys as emitted upstream."""

    payload: dict[str, Any] = {
        "id": "ignored",
        "logicalId": "ignored",
        "metric": "Net Interest Income",
        "value": 15200,
        "unit": "m",
        "currency": "HKD",
        "period": "2025 1H",
        "year": 2025,
        "frequency": "Semi-Annual",
        "bank": "HSBC (Hong Kong)",
        "sourceDoc": "2025 Interim Report",
        "docTypePriority": 1,
        "pageNumber": 12,
        "extractionContext": "Consolidated income statement",
        "originalSegment": "Group",
        "standardizedSegment": "Group (Total)",
        "rawExtractSnippet": "Net interest income 15,200",
        "normalizationTrace": [
            {
                "stepName": "Scale",
                "description": "Figures reported in HK$m",
                "status": "success",
                "rawInput": "15,200",
                "transformedOutput": "15200",
            }
        ],
    }
    payload.update(overrides)
    return payload


def write_payloads(path: Path, payloads: Iterable[dict[str, Any] | str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        for payload in payloads:
            line = payload if isinstance(payload, str) else json.dumps(payload)
            handle.write(line + "\n")
    return path
