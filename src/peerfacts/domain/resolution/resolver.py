"""Waterfall resolution: one winning candidate per logical fact.

Policy:
- the numerically lowest priority rank wins
- on equal ranks the earliest-appended candidate wins
- keys without candidates do not appear in the output

The resolver sorts on the rank each candidate was tagged with at creation;
it never re-derives ranks from the priority configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from peerfacts.domain.model import Candidate, LogicalKey


type ResolvedFacts = dict[LogicalKey, Candidate]


class ResolveCandidates(Protocol):
    """Map a candidate sequence to its resolved facts."""

    def __call__(self, candidates: Iterable[Candidate]) -> ResolvedFacts: ...


def resolve(candidates: Iterable[Candidate]) -> ResolvedFacts:
    """Return the winning candidate for every logical fact key.

    Output order follows the first appearance of each key.
    """

    resolved: ResolvedFacts = {}
    for candidate in candidates:
        current = resolved.get(candidate.logical_key)
        # strict comparison keeps the earlier candidate on ties
        if current is None or candidate.priority < current.priority:
            resolved[candidate.logical_key] = candidate
    return resolved


def rank_candidates(candidates: Iterable[Candidate]) -> tuple[Candidate, ...]:
    """Return candidates in waterfall order (winner first)."""

    return tuple(sorted(candidates, key=lambda candidate: candidate.priority))


if TYPE_CHECKING:
    _resolve_check: ResolveCandidates = resolve
