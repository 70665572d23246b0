"""Validation overlay: reviewer state layered over resolved facts.

The overlay never touches candidate records. Each logical fact key owns at
most one ``ValidationStatus``, created lazily on the first reviewer action and
seeded from the resolved candidate's raw value (0 when no fact resolves).

Lock rule: while ``is_validated`` is set, ``set_value``, ``toggle_na`` and
``toggle_flag`` are no-ops reported as ``MutationOutcome.LOCKED``.
``toggle_validated`` (unlock) and ``set_comment`` stay available.

N/A rule: un-setting N/A clears ``is_override`` even if the value had been
edited before, so N/A on and off again restores the previous flags exactly.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING

from peerfacts.domain.model import MutationOutcome, ValidationStatus, utcnow

from .locking import KeyedLock

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from peerfacts.domain.model import LogicalKey


type SeedLookup = Callable[[LogicalKey], float | None]
type Clock = Callable[[], datetime]

log = logging.getLogger(__name__)


def _no_seed(_key: LogicalKey) -> float | None:
    return None


def coerce_number(value: object) -> float | None:
    """Parse reviewer input into a finite float, ``None`` when malformed."""

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        try:
            number = float(text)
        except ValueError:
            return None
    elif isinstance(value, int | float | Decimal):
        number = float(value)
    else:
        return None
    return number if math.isfinite(number) else None


class ValidationOverlay:
    """Keyed side-table of ``ValidationStatus`` records.

    Writers hold the per-key lock for the whole mutation. Every read or write
    of the table itself goes through one overlay-wide guard, so snapshots never
    see a half-updated record.
    """

    def __init__(
        self,
        seed: SeedLookup | None = None,
        *,
        clock: Clock = utcnow,
        locks: KeyedLock | None = None,
    ) -> None:
        self._seed = seed or _no_seed
        self._clock = clock
        self._locks = locks or KeyedLock()
        self._guard = threading.Lock()
        self._statuses: dict[LogicalKey, ValidationStatus] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._statuses)

    def __contains__(self, key: object) -> bool:
        with self._guard:
            return key in self._statuses

    def get(self, key: LogicalKey) -> ValidationStatus | None:
        """Return a copy of the status for ``key`` (``None`` when unseeded)."""

        with self._guard:
            status = self._statuses.get(key)
            return replace(status) if status is not None else None

    def statuses(self) -> dict[LogicalKey, ValidationStatus]:
        with self._guard:
            return {key: replace(status) for key, status in self._statuses.items()}

    def load(self, statuses: Mapping[LogicalKey, ValidationStatus]) -> None:
        """Replace overlay state with previously persisted records."""

        loaded = {key: replace(status) for key, status in statuses.items()}
        with self._guard:
            self._statuses = loaded
        log.info("Loaded %s validation statuses", len(loaded))

    def reset(self) -> None:
        with self._guard:
            self._statuses = {}

    def effective_value(self, key: LogicalKey) -> float | None:
        with self._guard:
            status = self._statuses.get(key)
        if status is not None:
            return status.current_value
        return self._seed(key)

    # Mutations ----------------------------------------------------------------

    def set_value(self, key: LogicalKey, new_value: object) -> MutationOutcome:
        """Override the value of ``key``; malformed input is stored as 0."""

        with self._locks.hold(key):
            if self._is_locked(key):
                return self._reject("set_value", key)
            number = coerce_number(new_value)
            if number is None:
                log.warning("Coercing malformed value %r for %s to 0", new_value, key)
                number = 0.0
            status = self._ensure(key)
            now = self._clock()
            with self._guard:
                status.current_value = number
                status.is_override = True
                status.is_na = False
                status.touch(now)
        return MutationOutcome.APPLIED

    def set_comment(self, key: LogicalKey, text: str | None) -> MutationOutcome:
        with self._locks.hold(key):
            status = self._ensure(key)
            now = self._clock()
            with self._guard:
                status.comments = text or None
                status.touch(now)
        return MutationOutcome.APPLIED

    def toggle_validated(self, key: LogicalKey) -> MutationOutcome:
        with self._locks.hold(key):
            status = self._ensure(key)
            now = self._clock()
            with self._guard:
                status.is_validated = not status.is_validated
                status.touch(now)
        return MutationOutcome.APPLIED

    def toggle_na(self, key: LogicalKey) -> MutationOutcome:
        with self._locks.hold(key):
            if self._is_locked(key):
                return self._reject("toggle_na", key)
            status = self._ensure(key)
            now = self._clock()
            with self._guard:
                status.is_na = not status.is_na
                status.is_override = status.is_na
                status.touch(now)
        return MutationOutcome.APPLIED

    def toggle_flag(self, key: LogicalKey) -> MutationOutcome:
        with self._locks.hold(key):
            if self._is_locked(key):
                return self._reject("toggle_flag", key)
            status = self._ensure(key)
            now = self._clock()
            with self._guard:
                status.is_flagged = not status.is_flagged
                if status.is_flagged:
                    status.is_override = True
                status.touch(now)
        return MutationOutcome.APPLIED

    def force_estimate(
        self,
        key: LogicalKey,
        value: float,
        *,
        original_value: float,
    ) -> ValidationStatus:
        """Activate a modeled value regardless of lock state.

        Any earlier review flags are discarded; a reviewer comment is kept.
        """

        with self._locks.hold(key):
            with self._guard:
                existing = self._statuses.get(key)
            status = ValidationStatus(
                is_override=True,
                is_validated=False,
                is_na=False,
                is_flagged=False,
                comments=existing.comments if existing is not None else None,
                original_value=original_value,
                current_value=value,
                last_modified=self._clock(),
            )
            with self._guard:
                self._statuses[key] = status
            return replace(status)

    # Internals ------------------------------------------------------------------

    def _is_locked(self, key: LogicalKey) -> bool:
        with self._guard:
            status = self._statuses.get(key)
        return status is not None and status.is_validated

    def _reject(self, operation: str, key: LogicalKey) -> MutationOutcome:
        log.info("Ignoring %s on locked fact %s", operation, key)
        return MutationOutcome.LOCKED

    def _ensure(self, key: LogicalKey) -> ValidationStatus:
        with self._guard:
            status = self._statuses.get(key)
        if status is None:
            seed = self._seed(key)
            status = ValidationStatus.seeded(0.0 if seed is None else seed, now=self._clock())
            with self._guard:
                self._statuses[key] = status
        return status
