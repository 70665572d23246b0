"""Adapter for upstream document extraction records."""

from __future__ import annotations

from .loader import EXTRACTION_GLOB, load_directory, load_jsonl, save_estimates, write_jsonl
from .schema import ExtractionPayload, NormalizationStepPayload
from .translator import candidate_to_record, parse_candidate, resolve_priority

__all__ = [
    "EXTRACTION_GLOB",
    "ExtractionPayload",
    "NormalizationStepPayload",
    "candidate_to_record",
    "load_directory",
    "load_jsonl",
    "parse_candidate",
    "resolve_priority",
    "save_estimates",
    "write_jsonl",
]
