"""Reviewer-authored overlay state for one logical fact."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(kw_only=True)
class ValidationStatus:
    """Overlay record keyed by logical fact key.

    Flags combine freely; ``is_flagged`` takes precedence over everything
    else when the fact is displayed. Absence of a status means "use the
    resolved candidate's raw value, unreviewed, unlocked".
    """

    is_override: bool = False
    is_validated: bool = False
    is_na: bool = False
    is_flagged: bool = False
    comments: str | None = None
    original_value: float = 0.0
    current_value: float = 0.0
    last_modified: datetime = field(default_factory=utcnow)

    @classmethod
    def seeded(cls, value: float, *, now: datetime | None = None) -> ValidationStatus:
        """Return an untouched status whose values mirror the resolved candidate."""

        return cls(
            original_value=value,
            current_value=value,
            last_modified=now or utcnow(),
        )

    def touch(self, now: datetime | None = None) -> None:
        self.last_modified = now or utcnow()

    @property
    def is_visible(self) -> bool:
        """Whether a human has reviewed or modified the value."""

        return self.is_validated or self.is_override
