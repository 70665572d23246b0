"""Pydantic models describing upstream extraction records."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from peerfacts.domain.model import (
    Bank,
    Currency,
    Frequency,
    Metric,
    StandardizedSegment,
    Unit,
)

type ExtractionPayloadInput = ExtractionPayload | Mapping[str, Any]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _enum_by_value_or_name(enum_type: type[StrEnum], value: object) -> object:
    if not isinstance(value, str):
        return value
    text = value.strip()
    for member in enum_type:
        if text.casefold() in (member.value.casefold(), member.name.casefold()):
            return member
    return text


class ExtractionBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NormalizationStepPayload(ExtractionBaseModel):
    step_name: str = Field(alias="stepName")
    description: str = ""
    status: Literal["success", "ok", "warning"] = "success"
    raw_input: str | None = Field(default=None, alias="rawInput")
    transformed_output: str | None = Field(default=None, alias="transformedOutput")

    _normalize_optional = field_validator("raw_input", "transformed_output", mode="before")(
        _blank_to_none
    )

    @field_validator("raw_input", "transformed_output", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        if isinstance(value, int | float):
            return str(value)
        return value

    @property
    def is_warning(self) -> bool:
        return self.status == "warning"


class ExtractionPayload(ExtractionBaseModel):
    """One extracted number as emitted by the document extraction pipeline."""

    metric: Metric
    value: float = Field(allow_inf_nan=False)
    unit: Unit | None = None
    currency: Currency = Currency.HKD
    period: str
    year: int | None = None
    frequency: Frequency = Frequency.SEMI_ANNUAL
    bank: Bank
    source_doc: str = Field(alias="sourceDoc")
    doc_type_priority: int | None = Field(default=None, alias="docTypePriority", ge=1)
    doc_type: str | None = Field(default=None, alias="docType")
    page_number: int | None = Field(default=None, alias="pageNumber")
    extraction_context: str | None = Field(default=None, alias="extractionContext")
    original_segment: str | None = Field(default=None, alias="originalSegment")
    standardized_segment: StandardizedSegment = Field(
        default=StandardizedSegment.GROUP, alias="standardizedSegment"
    )
    raw_extract_snippet: str | None = Field(default=None, alias="rawExtractSnippet")
    normalization_trace: list[NormalizationStepPayload] = Field(
        default_factory=list["NormalizationStepPayload"], alias="normalizationTrace"
    )

    _normalize_optional = field_validator(
        "doc_type",
        "extraction_context",
        "original_segment",
        "raw_extract_snippet",
        "unit",
        "year",
        "doc_type_priority",
        "page_number",
        mode="before",
    )(_blank_to_none)

    @field_validator("period", "source_doc", mode="before")
    @classmethod
    def _require_text(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValueError("must not be blank")
            return stripped
        return value

    @field_validator("value", mode="before")
    @classmethod
    def _parse_value(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().replace(",", "")
        return value

    @field_validator("bank", mode="before")
    @classmethod
    def _parse_bank(cls, value: object) -> object:
        return _enum_by_value_or_name(Bank, value)

    @field_validator("metric", mode="before")
    @classmethod
    def _parse_metric(cls, value: object) -> object:
        return _enum_by_value_or_name(Metric, value)

    @field_validator("currency", mode="before")
    @classmethod
    def _parse_currency(cls, value: object) -> object:
        return _enum_by_value_or_name(Currency, value)

    @field_validator("frequency", mode="before")
    @classmethod
    def _parse_frequency(cls, value: object) -> object:
        return _enum_by_value_or_name(Frequency, value)

    @field_validator("standardized_segment", mode="before")
    @classmethod
    def _parse_segment(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return StandardizedSegment.GROUP
        return _enum_by_value_or_name(StandardizedSegment, value)
