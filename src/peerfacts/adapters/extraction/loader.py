"""Read and write extraction files (one JSON object per line)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from peerfacts.domain.ports import ExtractionLoadResult

from .translator import candidate_to_record, parse_candidate

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from peerfacts.domain.model import Candidate, PriorityConfiguration

log = logging.getLogger(__name__)

EXTRACTION_GLOB = "*.jsonl"


def load_jsonl(
    path: Path,
    priorities: PriorityConfiguration | None = None,
) -> ExtractionLoadResult:
    """Parse ``path``; malformed lines are logged and counted, never raised."""

    result = ExtractionLoadResult()
    with path.open(encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                record = json.loads(stripped)
                candidate = parse_candidate(record, priorities)
            except (json.JSONDecodeError, ValidationError, ValueError, TypeError) as exc:
                log.warning("Skipping %s:%s: %s", path.name, line_number, exc)
                result.rejected += 1
                continue
            result.candidates.append(candidate)
            result.accepted += 1

    log.info(
        "Loaded %s candidates from %s (%s rejected)",
        result.accepted,
        path.name,
        result.rejected,
    )
    return result


def load_directory(
    directory: Path,
    priorities: PriorityConfiguration | None = None,
) -> ExtractionLoadResult:
    """Load every extraction file of ``directory`` in name order."""

    result = ExtractionLoadResult()
    if not directory.is_dir():
        log.info("Extraction directory %s does not exist", directory)
        return result
    for path in sorted(directory.glob(EXTRACTION_GLOB)):
        result.extend(load_jsonl(path, priorities))
    return result


def write_jsonl(path: Path, candidates: Iterable[Candidate]) -> int:
    """Overwrite ``path`` with ``candidates`` in the extraction layout."""

    count = 0
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        for candidate in candidates:
            handle.write(json.dumps(candidate_to_record(candidate), ensure_ascii=False))
            handle.write("\n")
            count += 1
    return count


def save_estimates(path: Path, candidates: Iterable[Candidate]) -> int:
    """Merge estimates into ``path``, replacing earlier ones for the same facts."""

    latest = {candidate.logical_key: candidate for candidate in candidates}
    existing = load_jsonl(path).candidates if path.exists() else []
    kept = [candidate for candidate in existing if candidate.logical_key not in latest]
    written = write_jsonl(path, [*kept, *latest.values()])
    log.info("Wrote %s estimates to %s", written, path)
    return written


if TYPE_CHECKING:
    from peerfacts.domain.ports import ExtractionLoader

    _loader_check: ExtractionLoader = load_jsonl
