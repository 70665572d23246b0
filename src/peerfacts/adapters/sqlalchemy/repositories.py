"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select

from peerfacts.adapters.sqlalchemy.tables import validation_status_table
from peerfacts.domain.model import ValidationStatus

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from peerfacts.domain.model import LogicalKey

log = logging.getLogger(__name__)

_STATUS_COLUMNS = (
    "is_override",
    "is_validated",
    "is_na",
    "is_flagged",
    "comments",
    "original_value",
    "current_value",
    "last_modified",
)


class SqlAlchemyValidationStatusRepository:
    """Persist validation statuses as rows of ``validation_status``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: LogicalKey) -> ValidationStatus | None:
        stmt = select(validation_status_table).where(
            validation_status_table.c.logical_key == key
        )
        row = self.session.execute(stmt).first()
        return self._to_status(row) if row is not None else None

    def list_all(self) -> dict[LogicalKey, ValidationStatus]:
        stmt = select(validation_status_table).order_by(validation_status_table.c.logical_key)
        return {row.logical_key: self._to_status(row) for row in self.session.execute(stmt)}

    def save(self, key: LogicalKey, entity: ValidationStatus) -> None:
        values = self._to_values(entity)
        exists = self.session.execute(
            select(validation_status_table.c.logical_key).where(
                validation_status_table.c.logical_key == key
            )
        ).first()
        if exists is None:
            stmt = validation_status_table.insert().values(logical_key=key, **values)
        else:
            stmt = (
                validation_status_table.update()
                .where(validation_status_table.c.logical_key == key)
                .values(**values)
            )
        self.session.execute(stmt)
        log.debug("Saved validation status for %s", key)

    def clear(self) -> int:
        result = self.session.execute(delete(validation_status_table))
        removed = result.rowcount or 0
        log.info("Cleared %s persisted validation statuses", removed)
        return removed

    @staticmethod
    def _to_values(status: ValidationStatus) -> dict[str, Any]:
        return {name: getattr(status, name) for name in _STATUS_COLUMNS}

    @staticmethod
    def _to_status(row: Row[Any]) -> ValidationStatus:
        mapping = row._mapping  # noqa: SLF001
        return ValidationStatus(
            is_override=bool(mapping["is_override"]),
            is_validated=bool(mapping["is_validated"]),
            is_na=bool(mapping["is_na"]),
            is_flagged=bool(mapping["is_flagged"]),
            comments=mapping["comments"],
            original_value=float(mapping["original_value"]),
            current_value=float(mapping["current_value"]),
            last_modified=mapping["last_modified"],
        )


if TYPE_CHECKING:
    from peerfacts.domain.ports import ValidationStatusRepository

    def _repository_check(session: Session) -> ValidationStatusRepository:
        return SqlAlchemyValidationStatusRepository(session)
