"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    field_validator,
    model_serializer,
)

from models.categories import Category, Units, get_category_table
from models.records import CategorySummary, Reading, TimedValue

# Date.prototype.toString() output, e.g.
# "Tue Jun 13 2023 00:49:50 GMT-0400 (Eastern Daylight Time)"
_JS_DATE_SUFFIX = re.compile(r"\s*\([^)]*\)\s*$")
_JS_DATE_FORMAT = "%a %b %d %Y %H:%M:%S GMT%z"


def parse_timestamp(value: str) -> datetime:
    """Parse ISO 8601 or JavaScript ``Date.toString()`` text into UTC."""
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        try:
            parsed = datetime.strptime(_JS_DATE_SUFFIX.sub("", candidate), _JS_DATE_FORMAT)
        except ValueError as exc:
            raise ValueError("Invalid timestamp format") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


class QualityIn(BaseModel):
    """Pollutant concentrations; every category is optional."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    O3: Optional[float] = None
    CO: Optional[float] = None
    SO2: Optional[float] = None
    NO2: Optional[float] = None

    @field_validator("O3", "CO", "SO2", "NO2", mode="before")
    @classmethod
    def reject_booleans(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value

    @field_validator("O3", "CO", "SO2", "NO2")
    @classmethod
    def check_range(cls, value: Optional[float], info: ValidationInfo) -> Optional[float]:
        if value is None:
            return value
        definition = get_category_table()[Category(info.field_name)]
        if not definition.contains(value):
            raise ValueError(
                f"must be between {definition.minimum:g} and {definition.maximum:g}"
            )
        return value

    @model_serializer(mode="wrap")
    def drop_absent(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        return {code: value for code, value in handler(self).items() if value is not None}


class ReadingIn(BaseModel):
    """Reading payload accepted by ``POST /api/readings``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    sensor_id: str = Field(..., alias="sensorId", min_length=1)
    timestamp: datetime
    quality: QualityIn

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_text_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_timestamp(value)
        return value

    def to_reading(self) -> Reading:
        quality = {
            Category(code): value
            for code, value in self.quality.model_dump().items()
            if value is not None
        }
        return Reading(sensor_id=self.sensor_id, timestamp=self.timestamp, quality=quality)


class ReadingCreated(BaseModel):
    """Response payload after storing a reading."""

    message: str = "Success"
    data: ReadingIn


class TimedValueOut(BaseModel):
    timestamp: datetime
    value: float

    @classmethod
    def from_domain(cls, timed: Optional[TimedValue]) -> Optional["TimedValueOut"]:
        if timed is None:
            return None
        return cls(timestamp=timed.timestamp, value=timed.value)


class CategorySummaryOut(BaseModel):
    """Statistics for one category; absent fields are omitted from responses."""

    units: Units
    minimum: Optional[TimedValueOut] = None
    maximum: Optional[TimedValueOut] = None
    average: Optional[float] = None

    @classmethod
    def from_domain(cls, summary: CategorySummary) -> "CategorySummaryOut":
        return cls(
            units=summary.units,
            minimum=TimedValueOut.from_domain(summary.minimum),
            maximum=TimedValueOut.from_domain(summary.maximum),
            average=summary.average,
        )


class SummaryResponse(BaseModel):
    summary: Dict[Category, CategorySummaryOut] = Field(default_factory=dict)
