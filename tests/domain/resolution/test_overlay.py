from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from peerfacts.domain.model import MutationOutcome
from peerfacts.domain.resolution import ValidationOverlay, coerce_number

KEY = "LID-0000000000000001"
FIXED = datetime(2025, 8, 1, 9, 30, tzinfo=UTC)


def _overlay(seed: float | None = 120.0) -> ValidationOverlay:
    return ValidationOverlay(lambda _key: seed, clock=lambda: FIXED)


def test_first_action_seeds_status_from_resolved_value() -> None:
    overlay = _overlay(seed=120.0)

    overlay.set_comment(KEY, "check footnote 4")

    status = overlay.get(KEY)
    assert status is not None
    assert status.original_value == 120.0
    assert status.current_value == 120.0
    assert status.comments == "check footnote 4"
    assert status.last_modified == FIXED
    assert not status.is_override


def test_seed_defaults_to_zero_without_resolved_fact() -> None:
    overlay = _overlay(seed=None)

    overlay.toggle_validated(KEY)

    status = overlay.get(KEY)
    assert status is not None
    assert status.current_value == 0.0


def test_set_value_marks_override() -> None:
    overlay = _overlay()

    assert overlay.set_value(KEY, 150) is MutationOutcome.APPLIED

    status = overlay.get(KEY)
    assert status is not None
    assert status.current_value == 150.0
    assert status.original_value == 120.0
    assert status.is_override


def test_na_then_value_clears_na_and_keeps_override() -> None:
    overlay = _overlay()

    overlay.toggle_na(KEY)
    overlay.set_value(KEY, "99")

    status = overlay.get(KEY)
    assert status is not None
    assert not status.is_na
    assert status.is_override
    assert status.current_value == 99.0


def test_toggling_na_twice_restores_flags() -> None:
    overlay = _overlay()

    overlay.toggle_na(KEY)
    on = overlay.get(KEY)
    overlay.toggle_na(KEY)
    off = overlay.get(KEY)

    assert on is not None and on.is_na and on.is_override
    assert off is not None and not off.is_na and not off.is_override


def test_flag_sets_override_and_unflag_keeps_it() -> None:
    overlay = _overlay()

    overlay.toggle_flag(KEY)
    flagged = overlay.get(KEY)
    overlay.toggle_flag(KEY)
    unflagged = overlay.get(KEY)

    assert flagged is not None and flagged.is_flagged and flagged.is_override
    assert unflagged is not None and not unflagged.is_flagged and unflagged.is_override


def test_locked_fact_rejects_edits_until_unlocked() -> None:
    overlay = _overlay()
    overlay.toggle_validated(KEY)

    assert overlay.set_value(KEY, 500) is MutationOutcome.LOCKED
    status = overlay.get(KEY)
    assert status is not None
    assert status.current_value == 120.0

    overlay.toggle_validated(KEY)
    assert overlay.set_value(KEY, 500) is MutationOutcome.APPLIED
    status = overlay.get(KEY)
    assert status is not None
    assert status.current_value == 500.0


@pytest.mark.parametrize("operation", ["toggle_na", "toggle_flag"])
def test_locked_fact_rejects_toggles(operation: str) -> None:
    overlay = _overlay()
    overlay.toggle_validated(KEY)
    before = overlay.get(KEY)

    outcome = getattr(overlay, operation)(KEY)

    assert outcome is MutationOutcome.LOCKED
    assert overlay.get(KEY) == before


def test_comments_remain_editable_while_locked() -> None:
    overlay = _overlay()
    overlay.toggle_validated(KEY)

    assert overlay.set_comment(KEY, "signed off") is MutationOutcome.APPLIED
    status = overlay.get(KEY)
    assert status is not None
    assert status.comments == "signed off"


def test_malformed_value_is_stored_as_zero(caplog: pytest.LogCaptureFixture) -> None:
    overlay = _overlay()

    with caplog.at_level("WARNING"):
        overlay.set_value(KEY, "n/a??")

    status = overlay.get(KEY)
    assert status is not None
    assert status.current_value == 0.0
    assert status.is_override
    assert "malformed" in caplog.text


def test_get_returns_a_copy() -> None:
    overlay = _overlay()
    overlay.set_value(KEY, 1)

    copy = overlay.get(KEY)
    assert copy is not None
    copy.current_value = 42.0

    status = overlay.get(KEY)
    assert status is not None
    assert status.current_value == 1.0


def test_effective_value_falls_back_to_seed() -> None:
    overlay = _overlay(seed=120.0)

    assert overlay.effective_value(KEY) == 120.0
    overlay.set_value(KEY, 80)
    assert overlay.effective_value(KEY) == 80.0


def test_force_estimate_bypasses_lock_and_keeps_comment() -> None:
    overlay = _overlay()
    overlay.set_comment(KEY, "proxy needed")
    overlay.toggle_flag(KEY)
    overlay.toggle_validated(KEY)

    status = overlay.force_estimate(KEY, 75.0, original_value=120.0)

    assert status.current_value == 75.0
    assert status.original_value == 120.0
    assert status.is_override
    assert not status.is_validated
    assert not status.is_flagged
    assert not status.is_na
    assert status.comments == "proxy needed"


def test_reset_and_load() -> None:
    overlay = _overlay()
    overlay.set_value(KEY, 1)
    saved = overlay.statuses()

    overlay.reset()
    assert len(overlay) == 0

    overlay.load(saved)
    assert KEY in overlay


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (12, 12.0),
        (1.5, 1.5),
        (Decimal("2.25"), 2.25),
        (" 1,234.5 ", 1234.5),
        ("-3", -3.0),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        ("inf", None),
    ],
)
def test_coerce_number(raw: object, expected: float | None) -> None:
    assert coerce_number(raw) == expected
