"""Aggregation logic for sensor readings."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from models.categories import DEFAULT_CATEGORIES, Category, CategoryTable
from models.records import CategoryStat, CategorySummary, Reading, TimedValue
from services.coercion import coerce
from services.safe_math import add, divide

logger = logging.getLogger(__name__)

Summary = Dict[Category, CategorySummary]


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation.

    Every call folds the given readings from scratch; no state is carried
    between calls.
    """

    def summarize(
        self,
        readings: Iterable[Reading],
        categories: CategoryTable = DEFAULT_CATEGORIES,
        sensor_id: Optional[str] = None,
    ) -> Summary:
        if sensor_id is not None:
            readings = (reading for reading in readings if reading.sensor_id == sensor_id)

        stats = {category: CategoryStat() for category in categories}
        for reading in readings:
            self._fold(stats, reading)

        summary: Summary = {}
        for category, definition in categories.items():
            stat = stats[category]
            if stat.total is not None:
                stat.average = divide(stat.total, stat.count)
            summary[category] = CategorySummary(
                units=definition.units,
                minimum=stat.minimum,
                maximum=stat.maximum,
                average=stat.average,
                count=stat.count,
            )
        return summary

    @staticmethod
    def _fold(stats: Dict[Category, CategoryStat], reading: Reading) -> None:
        for category, stat in stats.items():
            raw = reading.quality.get(category)
            if raw is None:
                continue
            value = coerce(raw)
            if value is None:
                logger.debug(
                    "Ignoring non-numeric value",
                    extra={"sensor_id": reading.sensor_id, "category": category.value},
                )
                continue

            stat.count += 1
            if stat.minimum is None or value < stat.minimum.value:
                stat.minimum = TimedValue(timestamp=reading.timestamp, value=value)
            if stat.maximum is None or value > stat.maximum.value:
                stat.maximum = TimedValue(timestamp=reading.timestamp, value=value)
            stat.total = value if stat.total is None else add(stat.total, value)
