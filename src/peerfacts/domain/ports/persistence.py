"""Ports for persisting overlay state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from peerfacts.domain.model import LogicalKey, ValidationStatus


@runtime_checkable
class Repository[TKey, TEntity](Protocol):
    """Minimal keyed repository contract."""

    def get(self, key: TKey) -> TEntity | None: ...

    def save(self, key: TKey, entity: TEntity) -> None: ...


@runtime_checkable
class ValidationStatusRepository(Repository["LogicalKey", "ValidationStatus"], Protocol):
    """Persistence contract for validation statuses keyed by logical fact key."""

    def list_all(self) -> dict[LogicalKey, ValidationStatus]: ...

    def clear(self) -> int: ...
