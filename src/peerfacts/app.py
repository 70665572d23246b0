"""Application orchestration entry points."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from peerfacts.adapters.extraction import load_directory, load_jsonl, save_estimates
from peerfacts.adapters.snapshot import export_overlay, import_overlay
from peerfacts.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyOverlayUnitOfWork,
    is_started,
    startup,
)
from peerfacts.config import (
    get_fx_config,
    get_priority_configuration,
    get_storage_config,
)
from peerfacts.config.storage import ESTIMATES_FILENAME
from peerfacts.domain.ports import ExtractionLoadResult, OverlayUnitOfWork
from peerfacts.domain.resolution import FactEngine, OverlayChanged

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from peerfacts.config import StorageConfig
    from peerfacts.domain.model import PriorityConfiguration
    from peerfacts.domain.resolution import AllocationModel, EngineEvent, EstimateResult

type UnitOfWorkFactory = Callable[[], OverlayUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class OverlayPersister:
    """Engine listener writing every overlay change through a unit of work."""

    unit_of_work_factory: UnitOfWorkFactory

    def __call__(self, event: EngineEvent) -> None:
        if not isinstance(event, OverlayChanged):
            return
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.validation_statuses
            if event.key is None:
                repository.clear()
            elif event.status is not None:
                repository.save(event.key, event.status)
            uow.commit()


def build_engine(
    *,
    storage: StorageConfig | None = None,
    priorities: PriorityConfiguration | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> FactEngine:
    """Rebuild the engine from extraction files and the persisted overlay."""

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyOverlayUnitOfWork
    storage_config = storage or get_storage_config()
    engine = FactEngine(usd_to_hkd=get_fx_config().usd_to_hkd)

    loaded = load_directory(
        storage_config.extractions_path(),
        priorities or get_priority_configuration(),
    )
    engine.restore_candidates(loaded.candidates)

    with unit_of_work_factory() as uow:
        engine.load_overlay(uow.repositories.validation_statuses.list_all())

    engine.subscribe(OverlayPersister(unit_of_work_factory))
    log.info(
        "Engine ready: %s candidates (%s rejected lines), %s validation statuses",
        loaded.accepted,
        loaded.rejected,
        len(engine.validation_statuses()),
    )
    return engine


def ingest_files(
    engine: FactEngine,
    paths: Sequence[Path],
    *,
    storage: StorageConfig | None = None,
    priorities: PriorityConfiguration | None = None,
) -> ExtractionLoadResult:
    """Validate extraction files, copy them into the store and ingest them."""

    storage_config = storage or get_storage_config()
    target_dir = storage_config.extractions_path()
    effective_priorities = priorities or get_priority_configuration()
    total = ExtractionLoadResult()
    for path in paths:
        if path.name == ESTIMATES_FILENAME:
            raise ValueError(f"{ESTIMATES_FILENAME} is reserved for saved estimates")
        result = load_jsonl(path, effective_priorities)
        documents = [c for c in result.candidates if not c.is_estimate]
        if len(documents) != len(result.candidates):
            raise ValueError(f"{path} contains estimates; save them with the estimate command")
        if result.accepted:
            destination = target_dir / path.name
            if destination.resolve() != path.resolve():
                shutil.copy2(path, destination)
            engine.ingest_candidates(documents)
        total.extend(result)
    log.info("Ingested %s files: %s accepted, %s rejected", len(paths), total.accepted, total.rejected)
    return total


def save_allocation_estimate(
    engine: FactEngine,
    model: AllocationModel,
    periods: Iterable[str],
    *,
    storage: StorageConfig | None = None,
) -> EstimateResult:
    """Inject an allocation-model estimate and keep it with the extraction files."""

    candidates = model.build(periods)
    result = engine.save_estimate(candidates)
    storage_config = storage or get_storage_config()
    save_estimates(storage_config.estimates_path(), result.candidates)
    return result


def export_overlay_snapshot(engine: FactEngine, path: Path) -> int:
    return export_overlay(path, engine.validation_statuses())


def import_overlay_snapshot(
    engine: FactEngine,
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Replace the overlay with a snapshot file, in memory and in the database."""

    statuses = import_overlay(path)
    factory = unit_of_work_factory or SqlAlchemyOverlayUnitOfWork
    with factory() as uow:
        repository = uow.repositories.validation_statuses
        repository.clear()
        for key, status in statuses.items():
            repository.save(key, status)
        uow.commit()
    engine.load_overlay(statuses)
    return len(statuses)
