from __future__ import annotations

from peerfacts.domain.model import Metric, PriorityRank
from peerfacts.domain.resolution import CandidateStore
from tests.helpers.candidates import make_candidate


def test_append_preserves_order_and_bumps_version() -> None:
    store = CandidateStore()
    first = make_candidate(value=1.0)
    second = make_candidate(value=2.0, source_document="2025 Data Pack", priority=2)

    assert store.append([first, second]) == 2

    assert store.all() == (first, second)
    assert store.version == 1
    assert len(store) == 2


def test_append_of_nothing_keeps_version() -> None:
    store = CandidateStore()

    assert store.append([]) == 0
    assert store.version == 0


def test_duplicates_are_tolerated() -> None:
    candidate = make_candidate()
    store = CandidateStore([candidate])

    store.append([candidate])

    assert store.by_key(candidate.logical_key) == (candidate, candidate)


def test_keys_are_unique_in_first_seen_order() -> None:
    loans = make_candidate(metric=Metric.TOTAL_LOANS)
    nii = make_candidate(metric=Metric.NET_INTEREST_INCOME)
    store = CandidateStore([loans, nii, loans])

    assert store.keys() == (loans.logical_key, nii.logical_key)


def test_replace_estimates_only_drops_estimates_of_given_keys() -> None:
    report = make_candidate(value=100.0)
    old_estimate = make_candidate(
        value=90.0, priority=PriorityRank.ESTIMATE, source_document="Internal Estimate: A"
    )
    other_estimate = make_candidate(
        value=5.0,
        metric=Metric.TOTAL_LOANS,
        priority=PriorityRank.ESTIMATE,
        source_document="Internal Estimate: A",
    )
    new_estimate = make_candidate(
        value=95.0, priority=PriorityRank.ESTIMATE, source_document="Internal Estimate: B"
    )
    store = CandidateStore([report, old_estimate, other_estimate])

    removed = store.replace_estimates([report.logical_key], [new_estimate])

    assert removed == 1
    assert store.all() == (report, other_estimate, new_estimate)


def test_clear_empties_store() -> None:
    store = CandidateStore([make_candidate()])
    version = store.version

    store.clear()

    assert len(store) == 0
    assert store.version == version + 1
