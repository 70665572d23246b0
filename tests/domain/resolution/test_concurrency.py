from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from peerfacts.domain.model import PriorityRank
from peerfacts.domain.resolution import (
    EngineEvent,
    FactEngine,
    KeyedLock,
    OverlayChanged,
)
from tests.helpers.candidates import make_candidate

if TYPE_CHECKING:
    from collections.abc import Callable

WAIT = 5.0


def _hold_in_thread(locks: KeyedLock, key: str, acquired: threading.Event) -> threading.Thread:
    def run() -> None:
        with locks.hold(key):
            acquired.set()

    thread = threading.Thread(target=run)
    thread.start()
    return thread


def test_keyed_lock_blocks_same_key_only() -> None:
    locks = KeyedLock()
    same_key = threading.Event()
    other_key = threading.Event()

    with locks.hold("LID-a"):
        with locks.hold("LID-a"):
            blocked = _hold_in_thread(locks, "LID-a", same_key)
            free = _hold_in_thread(locks, "LID-b", other_key)

            assert other_key.wait(timeout=WAIT)
            assert not same_key.wait(timeout=0.2)

    assert same_key.wait(timeout=WAIT)
    blocked.join(timeout=WAIT)
    free.join(timeout=WAIT)


def _blocking_listener(
    *,
    block_on: float,
    started: threading.Event,
    release: threading.Event,
    persisted: list[float],
) -> Callable[[EngineEvent], None]:
    def listener(event: EngineEvent) -> None:
        if not isinstance(event, OverlayChanged) or event.status is None:
            return
        if event.status.current_value == block_on:
            started.set()
            release.wait(timeout=WAIT)
        persisted.append(event.status.current_value)

    return listener


def test_listeners_see_writes_to_one_key_in_overlay_order() -> None:
    engine = FactEngine()
    report = make_candidate(value=100.0)
    engine.ingest_candidates([report])
    key = report.logical_key
    started = threading.Event()
    release = threading.Event()
    persisted: list[float] = []
    engine.subscribe(
        _blocking_listener(block_on=1.0, started=started, release=release, persisted=persisted)
    )

    first = threading.Thread(target=engine.set_value, args=(key, 1.0))
    second = threading.Thread(target=engine.set_value, args=(key, 2.0))
    first.start()
    assert started.wait(timeout=WAIT)
    second.start()
    second.join(timeout=0.2)
    second_waited = second.is_alive()
    release.set()
    first.join(timeout=WAIT)
    second.join(timeout=WAIT)

    assert second_waited
    assert persisted == [1.0, 2.0]
    assert engine.effective_value(key) == 2.0


def test_reviewer_edit_waits_for_estimate_injection() -> None:
    engine = FactEngine()
    report = make_candidate(value=100.0)
    engine.ingest_candidates([report])
    key = report.logical_key
    estimate = make_candidate(
        value=80.0, priority=PriorityRank.ESTIMATE, source_document="Internal Estimate: Proxy"
    )
    started = threading.Event()
    release = threading.Event()
    persisted: list[float] = []
    engine.subscribe(
        _blocking_listener(block_on=80.0, started=started, release=release, persisted=persisted)
    )

    injection = threading.Thread(target=engine.save_estimate, args=([estimate],))
    edit = threading.Thread(target=engine.set_value, args=(key, 55.0))
    injection.start()
    assert started.wait(timeout=WAIT)
    edit.start()
    edit.join(timeout=0.2)
    edit_waited = edit.is_alive()
    release.set()
    injection.join(timeout=WAIT)
    edit.join(timeout=WAIT)

    assert edit_waited
    assert persisted == [80.0, 55.0]
    status = engine.get_validation_status(key)
    assert status is not None
    assert status.current_value == 55.0
    assert status.original_value == 100.0
    assert status.is_override


def test_status_snapshots_during_concurrent_writes() -> None:
    engine = FactEngine()
    errors: list[Exception] = []

    def write_comments() -> None:
        try:
            for index in range(2000):
                engine.set_comment(f"LID-{index:04d}", "checked")
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    writer = threading.Thread(target=write_comments)
    writer.start()
    while writer.is_alive():
        assert len(engine.validation_statuses()) <= 2000
    writer.join()

    assert errors == []
    assert len(engine.validation_statuses()) == 2000
