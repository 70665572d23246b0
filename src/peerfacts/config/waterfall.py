"""Default document priority waterfalls per bank."""

from __future__ import annotations

from peerfacts.domain.model import (
    Bank,
    PriorityConfiguration,
    PriorityRank,
    WaterfallConfig,
    WaterfallRule,
)

STATUTORY_REPORT = "Interim/Annual Report"
DATA_PACK = "Data Pack"
PRESENTATION = "Presentation/Other"
INTERNAL_ESTIMATE = "Internal Estimate"


def _standard(bank: Bank) -> WaterfallConfig:
    return WaterfallConfig(
        bank=bank,
        rules=(
            WaterfallRule(
                priority=PriorityRank.STATUTORY,
                doc_type=STATUTORY_REPORT,
                description="Audited statutory filings",
            ),
            WaterfallRule(
                priority=PriorityRank.DATA_PACK,
                doc_type=DATA_PACK,
                description="Supplementary financial data packs",
            ),
            WaterfallRule(
                priority=PriorityRank.PRESENTATION,
                doc_type=PRESENTATION,
                description="Investor presentations and other material",
            ),
            WaterfallRule(
                priority=PriorityRank.ESTIMATE,
                doc_type=INTERNAL_ESTIMATE,
                description="Manually modeled proxies",
            ),
        ),
    )


def _data_pack_first(bank: Bank) -> WaterfallConfig:
    return WaterfallConfig(
        bank=bank,
        rules=(
            WaterfallRule(
                priority=PriorityRank.STATUTORY,
                doc_type=DATA_PACK,
                description="Data pack carries the segment detail",
            ),
            WaterfallRule(
                priority=PriorityRank.DATA_PACK,
                doc_type=STATUTORY_REPORT,
                description="Statutory filings",
            ),
            WaterfallRule(
                priority=PriorityRank.PRESENTATION,
                doc_type=PRESENTATION,
                description="Investor presentations and other material",
            ),
            WaterfallRule(
                priority=PriorityRank.ESTIMATE,
                doc_type=INTERNAL_ESTIMATE,
                description="Manually modeled proxies",
            ),
        ),
    )


def default_waterfalls() -> tuple[WaterfallConfig, ...]:
    return tuple(
        _data_pack_first(bank) if bank is Bank.BOC_HK else _standard(bank) for bank in Bank
    )


def get_priority_configuration() -> PriorityConfiguration:
    return PriorityConfiguration.from_configs(default_waterfalls())
