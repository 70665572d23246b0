"""Translate extraction payloads into candidate records and back."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from peerfacts.domain.model import (
    Candidate,
    NormalizationStep,
    PriorityRank,
    StepStatus,
    year_from_period,
)

from .schema import ExtractionPayload, NormalizationStepPayload

if TYPE_CHECKING:
    from peerfacts.domain.model import PriorityConfiguration

    from .schema import ExtractionPayloadInput

log = getLogger(__name__)

DEFAULT_PRIORITY = int(PriorityRank.PRESENTATION)


def _ensure_payload(record: ExtractionPayloadInput) -> ExtractionPayload:
    if isinstance(record, ExtractionPayload):
        return record
    return ExtractionPayload.model_validate(record)


def resolve_priority(
    payload: ExtractionPayload,
    priorities: PriorityConfiguration | None = None,
) -> int:
    """Rank from the payload, else from the bank's waterfall by document type."""

    if payload.doc_type_priority is not None:
        return payload.doc_type_priority
    if payload.doc_type is not None and priorities is not None:
        rank = priorities.rank_for(payload.bank, payload.doc_type)
        if rank is not None:
            return rank
        log.debug("Unknown document type %r for %s", payload.doc_type, payload.bank)
    return DEFAULT_PRIORITY


def _to_step(step: NormalizationStepPayload) -> NormalizationStep:
    return NormalizationStep(
        name=step.step_name,
        description=step.description,
        status=StepStatus.WARNING if step.is_warning else StepStatus.OK,
        raw_input=step.raw_input,
        transformed_output=step.transformed_output,
    )


def parse_candidate(
    record: ExtractionPayloadInput,
    priorities: PriorityConfiguration | None = None,
) -> Candidate:
    """Build a candidate; identities are always re-derived from content."""

    payload = _ensure_payload(record)
    return Candidate.create(
        bank=payload.bank,
        period=payload.period,
        metric=payload.metric,
        value=payload.value,
        source_document=payload.source_doc,
        priority=resolve_priority(payload, priorities),
        segment=payload.standardized_segment,
        currency=payload.currency,
        unit=payload.unit,
        year=payload.year if payload.year is not None else year_from_period(payload.period),
        frequency=payload.frequency,
        page=payload.page_number,
        extraction_context=payload.extraction_context,
        original_segment=payload.original_segment,
        raw_snippet=payload.raw_extract_snippet,
        trace=tuple(_to_step(step) for step in payload.normalization_trace),
    )


def candidate_to_record(candidate: Candidate) -> dict[str, Any]:
    """Serialize a candidate in the upstream extraction layout."""

    payload = ExtractionPayload(
        metric=candidate.metric,
        value=candidate.value,
        unit=candidate.unit,
        currency=candidate.currency,
        period=candidate.period,
        year=candidate.year,
        frequency=candidate.frequency,
        bank=candidate.bank,
        source_doc=candidate.source_document,
        doc_type_priority=candidate.priority,
        page_number=candidate.page,
        extraction_context=candidate.extraction_context,
        original_segment=candidate.original_segment,
        standardized_segment=candidate.segment,
        raw_extract_snippet=candidate.raw_snippet,
        normalization_trace=[
            NormalizationStepPayload(
                step_name=step.name,
                description=step.description,
                status="warning" if step.status == StepStatus.WARNING else "success",
                raw_input=step.raw_input,
                transformed_output=step.transformed_output,
            )
            for step in candidate.trace
        ],
    )
    record = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    record["id"] = candidate.instance_id
    record["logicalId"] = candidate.logical_key
    return record
