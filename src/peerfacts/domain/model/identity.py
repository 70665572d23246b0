"""Content-addressed identifiers for logical facts and extraction instances.

Both identifiers are pure functions of their inputs: no randomness, no counters,
so they stay stable across process restarts and re-ingestion of the same document.
"""

from __future__ import annotations

import hashlib
from typing import Final

LOGICAL_KEY_PREFIX: Final[str] = "LID-"
INSTANCE_ID_PREFIX: Final[str] = "DP-"
_DIGEST_LENGTH: Final[int] = 16
_SEPARATOR: Final[str] = "|"

type LogicalKey = str
type InstanceId = str


def _digest(*parts: str) -> str:
    payload = _SEPARATOR.join(part.strip() for part in parts)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]


def logical_fact_key(bank: str, period: str, metric: str, segment: str) -> LogicalKey:
    """Return the key of the business figure identified by the 4-tuple."""

    return LOGICAL_KEY_PREFIX + _digest(bank, period, metric, segment)


def instance_id(logical_key: LogicalKey, source_document: str) -> InstanceId:
    """Return the id of one extraction of ``logical_key`` from ``source_document``."""

    return INSTANCE_ID_PREFIX + _digest(logical_key, source_document)
