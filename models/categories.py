"""Pollutant categories and their configured units and valid ranges."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from settings import get_settings

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Closed set of pollutant codes reported by the sensors."""

    O3 = "O3"
    CO = "CO"
    SO2 = "SO2"
    NO2 = "NO2"


class Units(str, Enum):
    ppm = "ppm"
    ppb = "ppb"


@dataclass(frozen=True)
class CategoryDefinition:
    """Unit label and inclusive valid range for one category."""

    category: Category
    units: Units
    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


CategoryTable = Mapping[Category, CategoryDefinition]


DEFAULT_CATEGORIES: CategoryTable = MappingProxyType(
    {
        Category.O3: CategoryDefinition(Category.O3, Units.ppm, 0, 0.604),
        Category.CO: CategoryDefinition(Category.CO, Units.ppm, 0, 50.4),
        Category.SO2: CategoryDefinition(Category.SO2, Units.ppb, 0, 1004),
        Category.NO2: CategoryDefinition(Category.NO2, Units.ppb, 0, 2049),
    }
)


def load_category_table(path: Optional[Path] = None) -> CategoryTable:
    """Return the default table with overrides from a JSON file applied.

    The file maps category codes to objects with any of ``units``, ``minimum``
    and ``maximum``. Unknown codes and unreadable files are ignored so a bad
    override never takes the service down.
    """
    if path is None or not path.exists():
        return DEFAULT_CATEGORIES

    try:
        raw = json.loads(path.read_text() or "{}")
    except (OSError, json.JSONDecodeError):
        logger.warning("Ignoring unreadable category table", extra={"path": str(path)})
        return DEFAULT_CATEGORIES

    table: Dict[Category, CategoryDefinition] = dict(DEFAULT_CATEGORIES)
    for code, overrides in raw.items():
        try:
            category = Category(code)
        except ValueError:
            logger.warning("Ignoring unknown category override", extra={"category": code})
            continue
        if not isinstance(overrides, dict):
            continue
        current = table[category]
        try:
            table[category] = replace(
                current,
                units=Units(overrides.get("units", current.units)),
                minimum=float(overrides.get("minimum", current.minimum)),
                maximum=float(overrides.get("maximum", current.maximum)),
            )
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed category override", extra={"category": code})
    return MappingProxyType(table)


@lru_cache
def get_category_table() -> CategoryTable:
    """Category table for the running service, honouring ``CATEGORY_TABLE_PATH``."""
    path = get_settings().category_table_path
    return load_category_table(Path(path) if path else None)
