from __future__ import annotations

import pytest

from peerfacts.config import default_waterfalls, get_priority_configuration
from peerfacts.domain.model import Bank, PriorityRank, WaterfallConfig, WaterfallRule


def test_default_waterfall_ranks_statutory_reports_first() -> None:
    priorities = get_priority_configuration()

    assert priorities.rank_for(Bank.HSBC, "Interim/Annual Report") == PriorityRank.STATUTORY
    assert priorities.rank_for(Bank.HSBC, "Data Pack") == PriorityRank.DATA_PACK
    assert priorities.rank_for(Bank.HSBC, "Internal Estimate") == PriorityRank.ESTIMATE


def test_boc_prefers_data_pack() -> None:
    priorities = get_priority_configuration()

    assert priorities.rank_for(Bank.BOC_HK, "Data Pack") == 1
    assert priorities.rank_for(Bank.BOC_HK, "Interim/Annual Report") == 2


@pytest.mark.parametrize("doc_type", ["annual report", "INTERIM", "Interim/Annual Report"])
def test_rank_lookup_matches_label_alternatives(doc_type: str) -> None:
    assert get_priority_configuration().rank_for(Bank.SC_HK, doc_type) == 1


def test_unknown_document_type_has_no_rank() -> None:
    assert get_priority_configuration().rank_for(Bank.HSBC, "Press cutting") is None


def test_every_bank_has_a_waterfall() -> None:
    assert {config.bank for config in default_waterfalls()} == set(Bank)


def test_duplicate_priorities_are_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        WaterfallConfig(
            bank=Bank.HSBC,
            rules=(
                WaterfallRule(priority=1, doc_type="Data Pack"),
                WaterfallRule(priority=1, doc_type="Interim/Annual Report"),
            ),
        )


def test_ordered_rules_follow_priority() -> None:
    config = WaterfallConfig(
        bank=Bank.HSBC,
        rules=(
            WaterfallRule(priority=2, doc_type="Data Pack"),
            WaterfallRule(priority=1, doc_type="Interim/Annual Report"),
        ),
    )

    assert [rule.priority for rule in config.ordered()] == [1, 2]
