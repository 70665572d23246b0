from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from peerfacts.adapters.sqlalchemy.unit_of_work import SqlAlchemyOverlayUnitOfWork
from peerfacts.app import (
    build_engine,
    export_overlay_snapshot,
    import_overlay_snapshot,
    ingest_files,
    save_allocation_estimate,
)
from peerfacts.config import StorageConfig
from peerfacts.domain.model import Bank, Metric, MutationOutcome
from peerfacts.domain.resolution import AllocationModel
from tests.helpers.candidates import make_payload, write_payloads

if TYPE_CHECKING:
    from pathlib import Path

type UowFactory = Callable[[], SqlAlchemyOverlayUnitOfWork]


def _extraction_file(tmp_path: Path) -> Path:
    return write_payloads(
        tmp_path / "incoming" / "hsbc_2025_1h.jsonl",
        [
            make_payload(),
            make_payload(sourceDoc="2025 Interim Results Deck", docTypePriority=3, value=15000),
            make_payload(metric="Total Loans", value=1_000_000),
            "{broken",
        ],
    )


def test_ingest_copies_file_and_resolves(
    tmp_path: Path, storage: StorageConfig, sqlite_unit_of_work: UowFactory
) -> None:
    engine = build_engine(storage=storage, unit_of_work_factory=sqlite_unit_of_work)

    result = ingest_files(engine, [_extraction_file(tmp_path)], storage=storage)

    assert result.accepted == 3
    assert result.rejected == 1
    assert (storage.extractions_path() / "hsbc_2025_1h.jsonl").exists()
    values = sorted(fact.value for fact in engine.get_resolved_facts())
    assert values == [15200.0, 1_000_000.0]


def test_ingest_refuses_reserved_estimates_file(
    tmp_path: Path, storage: StorageConfig, sqlite_unit_of_work: UowFactory
) -> None:
    engine = build_engine(storage=storage, unit_of_work_factory=sqlite_unit_of_work)
    path = write_payloads(tmp_path / "estimates.jsonl", [make_payload()])

    with pytest.raises(ValueError, match="reserved"):
        ingest_files(engine, [path], storage=storage)


def test_state_survives_restart(
    tmp_path: Path, storage: StorageConfig, sqlite_unit_of_work: UowFactory
) -> None:
    engine = build_engine(storage=storage, unit_of_work_factory=sqlite_unit_of_work)
    ingest_files(engine, [_extraction_file(tmp_path)], storage=storage)
    nii = next(f for f in engine.get_resolved_facts() if f.metric is Metric.NET_INTEREST_INCOME)
    engine.set_comment(nii.logical_key, "ties to note 5")
    engine.toggle_validated(nii.logical_key)
    model = AllocationModel(
        label="HK Asset Proxy",
        basis="Assets",
        bank=Bank.HSBC,
        metric=Metric.OPERATING_EXPENSES,
        components=(40.0, 10.0),
        total=100.0,
        group_total=9000.0,
    )
    estimate = save_allocation_estimate(engine, model, ["2025 1H"], storage=storage)

    restarted = build_engine(storage=storage, unit_of_work_factory=sqlite_unit_of_work)

    assert set(restarted.get_resolved_facts()) == set(engine.get_resolved_facts())
    assert restarted.validation_statuses() == engine.validation_statuses()
    assert restarted.set_value(nii.logical_key, 1) is MutationOutcome.LOCKED
    assert restarted.effective_value(estimate.keys[0]) == 4500.0


def test_reset_overlay_clears_database(
    tmp_path: Path, storage: StorageConfig, sqlite_unit_of_work: UowFactory
) -> None:
    engine = build_engine(storage=storage, unit_of_work_factory=sqlite_unit_of_work)
    ingest_files(engine, [_extraction_file(tmp_path)], storage=storage)
    key = engine.get_resolved_facts()[0].logical_key
    engine.toggle_flag(key)

    engine.reset_overlay()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.validation_statuses.list_all() == {}


def test_snapshot_export_and_import(
    tmp_path: Path, storage: StorageConfig, sqlite_unit_of_work: UowFactory
) -> None:
    engine = build_engine(storage=storage, unit_of_work_factory=sqlite_unit_of_work)
    ingest_files(engine, [_extraction_file(tmp_path)], storage=storage)
    key = engine.get_resolved_facts()[0].logical_key
    engine.toggle_na(key)
    snapshot = tmp_path / "overlay.json"
    assert export_overlay_snapshot(engine, snapshot) == 1
    engine.reset_overlay()

    imported = import_overlay_snapshot(
        engine, snapshot, unit_of_work_factory=sqlite_unit_of_work
    )

    assert imported == 1
    status = engine.get_validation_status(key)
    assert status is not None
    assert status.is_na
    with sqlite_unit_of_work() as uow:
        assert list(uow.repositories.validation_statuses.list_all()) == [key]
