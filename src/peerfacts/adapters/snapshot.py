"""JSON snapshot of the validation overlay.

The file is a flat ``{logical_key: record}`` object whose records use the
camelCase layout consumed by the review front end.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from peerfacts.domain.model import ValidationStatus, utcnow

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from peerfacts.domain.model import LogicalKey

log = logging.getLogger(__name__)


class ValidationStatusRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    is_override: bool = Field(default=False, alias="isOverride")
    is_validated: bool = Field(default=False, alias="isValidated")
    is_na: bool = Field(default=False, alias="isNA")
    is_flagged: bool = Field(default=False, alias="isFlagged")
    comments: str | None = None
    original_value: float = Field(default=0.0, alias="originalValue", allow_inf_nan=False)
    current_value: float = Field(default=0.0, alias="currentValue", allow_inf_nan=False)
    last_modified: datetime = Field(default_factory=utcnow, alias="lastModified")

    @field_validator("comments", mode="before")
    @classmethod
    def _blank_comment(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("last_modified")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)

    @classmethod
    def from_status(cls, status: ValidationStatus) -> ValidationStatusRecord:
        return cls(
            is_override=status.is_override,
            is_validated=status.is_validated,
            is_na=status.is_na,
            is_flagged=status.is_flagged,
            comments=status.comments,
            original_value=status.original_value,
            current_value=status.current_value,
            last_modified=status.last_modified,
        )

    def to_status(self) -> ValidationStatus:
        return ValidationStatus(
            is_override=self.is_override,
            is_validated=self.is_validated,
            is_na=self.is_na,
            is_flagged=self.is_flagged,
            comments=self.comments,
            original_value=self.original_value,
            current_value=self.current_value,
            last_modified=self.last_modified,
        )


_SNAPSHOT_ADAPTER = TypeAdapter(dict[str, ValidationStatusRecord])


def dump_overlay(statuses: Mapping[LogicalKey, ValidationStatus]) -> str:
    records = {key: ValidationStatusRecord.from_status(status) for key, status in statuses.items()}
    return _SNAPSHOT_ADAPTER.dump_json(records, by_alias=True, indent=2).decode("utf-8")


def parse_overlay(document: str | bytes) -> dict[LogicalKey, ValidationStatus]:
    """Validate a snapshot document; raises ``pydantic.ValidationError``."""

    records = _SNAPSHOT_ADAPTER.validate_json(document)
    return {key: record.to_status() for key, record in records.items()}


def export_overlay(path: Path, statuses: Mapping[LogicalKey, ValidationStatus]) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_overlay(statuses), encoding="utf-8")
    log.info("Exported %s validation statuses to %s", len(statuses), path)
    return len(statuses)


def import_overlay(path: Path) -> dict[LogicalKey, ValidationStatus]:
    statuses = parse_overlay(path.read_bytes())
    log.info("Read %s validation statuses from %s", len(statuses), path)
    return statuses


__all__ = [
    "ValidationStatusRecord",
    "dump_overlay",
    "export_overlay",
    "import_overlay",
    "parse_overlay",
]
