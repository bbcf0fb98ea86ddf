"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from models.categories import Category, Units

Number = int | float


@dataclass(frozen=True, slots=True)
class Reading:
    """A single stored sensor reading, one optional value per category."""

    sensor_id: str
    timestamp: datetime
    quality: Mapping[Category, Any]


@dataclass(frozen=True, slots=True)
class TimedValue:
    timestamp: datetime
    value: Number


@dataclass(slots=True)
class CategoryStat:
    """Running accumulator for one category while folding readings."""

    minimum: Optional[TimedValue] = None
    maximum: Optional[TimedValue] = None
    total: Optional[Number] = None
    count: int = 0
    average: Optional[Number] = None


@dataclass(frozen=True, slots=True)
class CategorySummary:
    """Finalized statistics for one category."""

    units: Units
    minimum: Optional[TimedValue] = None
    maximum: Optional[TimedValue] = None
    average: Optional[Number] = None
    count: int = 0
