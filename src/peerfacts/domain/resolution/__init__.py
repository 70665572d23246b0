"""Resolution core: candidate store, waterfall, overlay and estimates."""

from __future__ import annotations

from peerfacts.domain.resolution.display import (
    DEFAULT_USD_TO_HKD,
    FactDisplay,
    convert_amount,
    display_for,
    display_state,
    to_stored_amount,
)
from peerfacts.domain.resolution.engine import (
    CandidatesChanged,
    EngineEvent,
    FactEngine,
    FactFilter,
    OverlayChanged,
)
from peerfacts.domain.resolution.estimates import (
    AllocationModel,
    EstimateInjector,
    EstimateResult,
    round_half_up,
)
from peerfacts.domain.resolution.locking import KeyedLock
from peerfacts.domain.resolution.overlay import ValidationOverlay, coerce_number
from peerfacts.domain.resolution.resolver import (
    ResolveCandidates,
    ResolvedFacts,
    rank_candidates,
    resolve,
)
from peerfacts.domain.resolution.store import CandidateStore

__all__ = [  # noqa: RUF022
    # store + resolver
    "CandidateStore",
    "ResolveCandidates",
    "ResolvedFacts",
    "rank_candidates",
    "resolve",
    # overlay
    "KeyedLock",
    "ValidationOverlay",
    "coerce_number",
    # display
    "DEFAULT_USD_TO_HKD",
    "FactDisplay",
    "convert_amount",
    "display_for",
    "display_state",
    "to_stored_amount",
    # estimates
    "AllocationModel",
    "EstimateInjector",
    "EstimateResult",
    "round_half_up",
    # engine
    "CandidatesChanged",
    "EngineEvent",
    "FactEngine",
    "FactFilter",
    "OverlayChanged",
]
