"""Per-bank priority configuration (the waterfall rules).

Ranks are attached to candidates when they are built from extraction payloads.
The resolver never consults this configuration: changing it after ingestion
has no retroactive effect on candidates that are already ranked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .enums import Bank


@dataclass(frozen=True, slots=True)
class WaterfallRule:
    priority: int
    doc_type: str
    description: str = ""

    def matches(self, doc_type: str) -> bool:
        wanted = doc_type.strip().casefold()
        if not wanted:
            return False
        labels = {self.doc_type.casefold()}
        labels.update(part.strip().casefold() for part in self.doc_type.split("/"))
        return wanted in labels


@dataclass(frozen=True, slots=True)
class WaterfallConfig:
    """Ordered priority rules of one bank."""

    bank: Bank
    rules: tuple[WaterfallRule, ...]

    def __post_init__(self) -> None:
        priorities = [rule.priority for rule in self.rules]
        if len(set(priorities)) != len(priorities):
            raise ValueError(f"Duplicate priority ranks in waterfall for {self.bank}")

    def ordered(self) -> tuple[WaterfallRule, ...]:
        return tuple(sorted(self.rules, key=lambda rule: rule.priority))

    def rank_for(self, doc_type: str) -> int | None:
        for rule in self.ordered():
            if rule.matches(doc_type):
                return rule.priority
        return None


@dataclass(frozen=True, slots=True)
class PriorityConfiguration:
    """Waterfall rules for every configured bank."""

    waterfalls: dict[Bank, WaterfallConfig] = field(default_factory=dict["Bank", "WaterfallConfig"])

    @classmethod
    def from_configs(cls, configs: Iterable[WaterfallConfig]) -> PriorityConfiguration:
        return cls(waterfalls={config.bank: config for config in configs})

    def for_bank(self, bank: Bank) -> WaterfallConfig | None:
        return self.waterfalls.get(bank)

    def rank_for(self, bank: Bank, doc_type: str) -> int | None:
        """Return the rank a document type carries for ``bank`` (``None`` if unknown)."""

        config = self.waterfalls.get(bank)
        if config is None:
            return None
        return config.rank_for(doc_type)
