"""Pydantic models for the Google Sheets values API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ValueRange(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    range: str | None = None
    major_dimension: str = Field(default="ROWS", alias="majorDimension")
    values: list[list[str | int | float | bool | None]] = Field(default_factory=list)
