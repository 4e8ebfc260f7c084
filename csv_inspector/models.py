from __future__ import annotations

from typing import Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import (
    DEFAULT_DELIMITERS,
    DEFAULT_MIN_LINES,
    DEFAULT_NEWLINES,
    DEFAULT_SAMPLE_SIZE,
)


class DetectionConfig(BaseModel):
    """
    Options for a single detection call.

    Any field the caller supplies replaces the default outright; the delimiter
    and newline lists are never merged with the defaults. Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    delimiters: Tuple[str, ...] = Field(default=DEFAULT_DELIMITERS, min_length=1)
    newlines: Tuple[str, ...] = Field(default=DEFAULT_NEWLINES, min_length=1)
    sample_size: int = Field(default=DEFAULT_SAMPLE_SIZE, alias="sampleSize", gt=0)
    min_lines: int = Field(default=DEFAULT_MIN_LINES, alias="minLines", ge=0)

    @field_validator("delimiters")
    @classmethod
    def single_characters(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for delimiter in value:
            if len(delimiter) != 1:
                raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
        return value

    @field_validator("newlines")
    @classmethod
    def non_empty_tokens(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not token for token in value):
            raise ValueError("newline tokens must not be empty")
        return value


class CsvFormat(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    delimiter: Optional[str] = None
    newline: str = "\n"
    has_headers: bool = Field(default=False, alias="hasHeaders")
    encoding: Literal["ASCII", "UTF-8", "UTF-8 with BOM"]


class InspectionReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    format: Optional[CsvFormat] = Field(default=None, examples=[None])
    failure: Optional[str] = Field(
        default=None,
        examples=["empty_input", "insufficient_lines", "no_column_structure"],
    )


class HealthResponse(BaseModel):
    ok: bool = True
