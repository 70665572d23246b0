# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from peerfacts.app import (
    build_engine,
    export_overlay_snapshot,
    import_overlay_snapshot,
    ingest_files,
    save_allocation_estimate,
)
from peerfacts.config import configure_logging, default_waterfalls
from peerfacts.domain.model import (
    Bank,
    Currency,
    Metric,
    MutationOutcome,
    StandardizedSegment,
)
from peerfacts.domain.resolution import (
    AllocationModel,
    FactFilter,
    coerce_number,
    to_stored_amount,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from enum import StrEnum
    from types import FrameType

    from peerfacts.domain.resolution import FactEngine

log = logging.getLogger(__name__)


def _enum_arg[TEnum: StrEnum](enum_type: type[TEnum]) -> Callable[[str], TEnum]:
    def parse(value: str) -> TEnum:
        wanted = value.strip().casefold()
        for member in enum_type:
            if wanted in (member.value.casefold(), member.name.casefold()):
                return member
        choices = ", ".join(member.name for member in enum_type)
        raise argparse.ArgumentTypeError(f"invalid {enum_type.__name__} {value!r} ({choices})")

    parse.__name__ = enum_type.__name__
    return parse


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:  # noqa: PLR0915
    parser = argparse.ArgumentParser(description="Review peer bank financial facts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Ingest extraction files (.jsonl)")
    ingest.add_argument("files", nargs="+", type=Path, help="Extraction files to ingest")

    facts = subparsers.add_parser("facts", help="List resolved facts with their display state")
    facts.add_argument("--bank", action="append", type=_enum_arg(Bank), default=[])
    facts.add_argument("--period", action="append", default=[])
    facts.add_argument("--segment", action="append", type=_enum_arg(StandardizedSegment), default=[])
    facts.add_argument("--metric", action="append", type=_enum_arg(Metric), default=[])
    facts.add_argument("--currency", type=_enum_arg(Currency), help="Display currency")
    facts.add_argument(
        "--all",
        action="store_true",
        help="Show raw resolved values next to what consumers see",
    )

    audit = subparsers.add_parser("audit", help="Show competing candidates for a fact")
    audit.add_argument("key", help="Logical fact key (LID-...)")

    set_value = subparsers.add_parser("set-value", help="Override the value of a fact")
    set_value.add_argument("key")
    set_value.add_argument("value")
    set_value.add_argument(
        "--currency",
        type=_enum_arg(Currency),
        help="Currency the value is typed in (converted back to the stored currency)",
    )

    comment = subparsers.add_parser("comment", help="Attach a reviewer comment")
    comment.add_argument("key")
    comment.add_argument("text")

    for name, help_text in (
        ("lock", "Toggle the validated (locked) flag"),
        ("na", "Toggle not-applicable"),
        ("flag", "Toggle the error flag"),
    ):
        toggle = subparsers.add_parser(name, help=help_text)
        toggle.add_argument("key")

    estimate = subparsers.add_parser("estimate", help="Save an allocation-model estimate")
    estimate.add_argument("--bank", type=_enum_arg(Bank), required=True)
    estimate.add_argument("--metric", type=_enum_arg(Metric), required=True)
    estimate.add_argument("--label", default="HK Asset Proxy", help="Model label")
    estimate.add_argument("--basis", default="Assets", help="Line-item basis of the ratio")
    estimate.add_argument(
        "--period",
        dest="periods",
        action="append",
        default=[],
        help="Target period (repeatable)",
    )
    estimate.add_argument(
        "--component",
        dest="components",
        action="append",
        type=float,
        default=[],
        help="Sub-entity line item (repeatable)",
    )
    estimate.add_argument("--total", type=float, required=True, help="Sub-entity total")
    estimate.add_argument("--group-total", type=float, required=True, help="Group-level total")
    estimate.add_argument("--ratio", type=float, help="Override the computed ratio (percent)")
    estimate.add_argument(
        "--segment",
        type=_enum_arg(StandardizedSegment),
        default=StandardizedSegment.GROUP,
    )
    estimate.add_argument("--currency", type=_enum_arg(Currency), default=Currency.HKD)

    subparsers.add_parser("waterfall", help="Print the document priority configuration")

    export = subparsers.add_parser("export-overlay", help="Write the overlay as JSON")
    export.add_argument("path", type=Path)

    import_ = subparsers.add_parser("import-overlay", help="Replace the overlay from JSON")
    import_.add_argument("path", type=Path)

    subparsers.add_parser("reset", help="Clear all validation statuses")

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "estimate":
        if not args.periods:
            raise ValueError("Select at least one --period to apply the estimate to")
        if args.ratio is None and not args.components:
            raise ValueError("Provide --component values or an explicit --ratio")
    if args.command == "set-value" and coerce_number(args.value) is None:
        log.warning("Value %r is not a number; it will be stored as 0", args.value)


def _print_facts(engine: FactEngine, args: argparse.Namespace) -> None:
    fact_filter = FactFilter.of(
        banks=args.bank,
        periods=args.period,
        segments=args.segment,
        metrics=args.metric,
    )
    facts = sorted(
        engine.get_resolved_facts(fact_filter),
        key=lambda fact: (fact.bank, fact.period, fact.segment, fact.metric),
    )
    for fact in facts:
        shown = engine.display(fact.logical_key, args.currency)
        rendered = shown.render() if shown is not None else "-"
        columns = [
            fact.logical_key,
            fact.bank.value,
            fact.period,
            fact.segment.value,
            fact.metric.value,
            rendered,
        ]
        if args.all:
            columns.extend([f"raw={fact.value:g}", f"p{fact.priority}", fact.source_document])
        print("\t".join(columns))
    log.info("%s facts", len(facts))


def _print_audit(engine: FactEngine, key: str) -> None:
    candidates = engine.candidates_for(key)
    if not candidates:
        raise ValueError(f"No candidates for {key}")
    head = candidates[0]
    print(f"{key}: {head.bank.value} {head.period} {head.segment.value} {head.metric.value}")
    for index, candidate in enumerate(candidates):
        marker = "*" if index == 0 else " "
        page = f" p.{candidate.page}" if candidate.page is not None else ""
        print(
            f"{marker} [{candidate.priority}] {candidate.value:g} {candidate.currency.value} "
            f"{candidate.source_document}{page}"
        )
        for step in candidate.trace:
            print(f"      - {step.name} ({step.status.value}): {step.description}")
    status = engine.get_validation_status(key)
    if status is None:
        print("status: unreviewed")
        return
    print(
        f"status: validated={status.is_validated} override={status.is_override} "
        f"na={status.is_na} flagged={status.is_flagged} "
        f"value={status.current_value:g} (was {status.original_value:g})"
    )
    if status.comments:
        print(f"comment: {status.comments}")


def _print_waterfall() -> None:
    for config in default_waterfalls():
        print(config.bank.value)
        for rule in config.ordered():
            print(f"  {rule.priority}. {rule.doc_type}: {rule.description}")


def _set_value(engine: FactEngine, args: argparse.Namespace) -> MutationOutcome:
    value: object = args.value
    fact = engine.resolved_fact(args.key)
    number = coerce_number(args.value)
    if fact is not None and number is not None and args.currency is not None:
        value = to_stored_amount(
            number,
            unit=fact.unit,
            stored_currency=fact.currency,
            display_currency=args.currency,
            usd_to_hkd=engine.usd_to_hkd,
        )
    return engine.set_value(args.key, value)


def _report(command: str, key: str, outcome: MutationOutcome) -> None:
    if outcome is MutationOutcome.LOCKED:
        log.warning("%s ignored: %s is validated (unlock it first)", command, key)
    else:
        log.info("%s applied to %s", command, key)


def _run(args: argparse.Namespace) -> None:  # noqa: C901, PLR0912
    if args.command == "waterfall":
        _print_waterfall()
        return

    engine = build_engine()
    if args.command == "ingest":
        result = ingest_files(engine, args.files)
        log.info("Accepted %s candidates, rejected %s lines", result.accepted, result.rejected)
    elif args.command == "facts":
        _print_facts(engine, args)
    elif args.command == "audit":
        _print_audit(engine, args.key)
    elif args.command == "set-value":
        _report(args.command, args.key, _set_value(engine, args))
    elif args.command == "comment":
        _report(args.command, args.key, engine.set_comment(args.key, args.text))
    elif args.command == "lock":
        _report(args.command, args.key, engine.toggle_validated(args.key))
    elif args.command == "na":
        _report(args.command, args.key, engine.toggle_na(args.key))
    elif args.command == "flag":
        _report(args.command, args.key, engine.toggle_flag(args.key))
    elif args.command == "estimate":
        model = AllocationModel(
            label=args.label,
            basis=args.basis,
            bank=args.bank,
            metric=args.metric,
            components=tuple(args.components),
            total=args.total,
            group_total=args.group_total,
            ratio_override=args.ratio,
            segment=args.segment,
            currency=args.currency,
        )
        result = save_allocation_estimate(engine, model, args.periods)
        log.info(
            "Saved estimate %s (ratio %.2f%%) for %s facts",
            model.estimated_value,
            model.ratio,
            len(result.keys),
        )
        for key in result.keys:
            print(key)
    elif args.command == "export-overlay":
        count = export_overlay_snapshot(engine, args.path)
        log.info("Exported %s validation statuses", count)
    elif args.command == "import-overlay":
        count = import_overlay_snapshot(engine, args.path)
        log.info("Imported %s validation statuses", count)
    elif args.command == "reset":
        engine.reset_overlay()
        log.info("Validation overlay cleared")
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args)
    except Exception:
        log.exception("Fatal error running %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
