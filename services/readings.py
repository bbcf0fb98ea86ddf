"""Ingestion and summary orchestration for sensor readings."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Optional

from app.schemas import ReadingIn
from datastore.reading_store import ReadingStore, build_default_store
from models.categories import CategoryTable, get_category_table
from services.aggregator import Aggregator, Summary

logger = logging.getLogger(__name__)


class ReadingService:
    """Coordinates the reading store and the aggregator."""

    def __init__(
        self,
        store: ReadingStore,
        aggregator: Aggregator,
        categories: CategoryTable,
    ) -> None:
        self.store = store
        self.aggregator = aggregator
        self.categories = categories

    def record(self, reading: ReadingIn) -> ReadingIn:
        """Append a validated reading to the store."""
        try:
            self.store.append(reading)
        except OSError:
            logger.exception(
                "Failed to persist reading",
                extra={"sensor_id": reading.sensor_id, "store": self.store.name},
            )
            raise
        logger.info(
            "Recorded reading",
            extra={"sensor_id": reading.sensor_id, "reading_count": len(self.store)},
        )
        return reading

    def summarize(self, sensor_id: Optional[str] = None) -> Summary:
        """Fold a snapshot of every stored reading into per-category statistics."""
        start_time = time.perf_counter()
        snapshot = self.store.snapshot()
        summary = self.aggregator.summarize(
            (item.to_reading() for item in snapshot),
            categories=self.categories,
            sensor_id=sensor_id,
        )
        logger.info(
            "Computed summary",
            extra={
                "filter_sensor_id": sensor_id,
                "reading_count": len(snapshot),
                "elapsed_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        return summary


@lru_cache
def build_default_service() -> ReadingService:
    """Factory that wires the service with the configured store and categories."""
    return ReadingService(
        store=build_default_store(),
        aggregator=Aggregator(),
        categories=get_category_table(),
    )
