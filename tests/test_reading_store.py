"""Unit tests for the append-only reading store."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from app.schemas import ReadingIn
from datastore.reading_store import ReadingStore


def _sample_reading(sensor_id: str = "59", o3: float | None = 0.2) -> ReadingIn:
    return ReadingIn(
        sensorId=sensor_id,
        timestamp=datetime(2023, 6, 13, 15, 58, 29, tzinfo=timezone.utc),
        quality={"O3": o3, "CO": 0.3},
    )


def test_append_and_snapshot() -> None:
    store = ReadingStore(name="readings")
    store.append(_sample_reading("1"))
    store.append(_sample_reading("2"))

    snapshot = store.snapshot()

    assert [item.sensor_id for item in snapshot] == ["1", "2"]
    assert len(store) == 2


def test_snapshot_is_not_affected_by_later_appends() -> None:
    store = ReadingStore(name="readings")
    store.append(_sample_reading("1"))

    snapshot = store.snapshot()
    store.append(_sample_reading("2"))

    assert len(snapshot) == 1
    assert len(store.snapshot()) == 2


def test_append_stores_a_copy() -> None:
    store = ReadingStore(name="readings")
    reading = _sample_reading()

    store.append(reading)
    reading.quality.O3 = 0.5

    assert store.snapshot()[0].quality.O3 == 0.2


def test_append_persists_to_disk_and_reloads(tmp_path: Path) -> None:
    path = tmp_path / "readings.json"
    store = ReadingStore(name="readings", persistence_path=path)
    reading = _sample_reading()

    store.append(reading)

    payload = json.loads(path.read_text())
    assert payload[0]["sensorId"] == "59"
    assert payload[0]["quality"]["O3"] == 0.2

    reloaded = ReadingStore(name="readings", persistence_path=path).snapshot()
    assert [item.model_dump() for item in reloaded] == [reading.model_dump()]


def test_corrupt_file_is_treated_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "readings.json"
    path.write_text("{not json")

    store = ReadingStore(name="readings", persistence_path=path)

    assert store.snapshot() == ()


def test_invalid_stored_entries_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "readings.json"
    valid = _sample_reading().model_dump(mode="json", by_alias=True)
    path.write_text(json.dumps([valid, {"sensorId": "x"}]))

    store = ReadingStore(name="readings", persistence_path=path)

    assert len(store) == 1


def test_failed_write_does_not_keep_the_reading(tmp_path: Path) -> None:
    path = tmp_path / "readings.json"
    path.mkdir()
    store = ReadingStore(name="readings", persistence_path=path)

    with pytest.raises(OSError):
        store.append(_sample_reading())

    assert store.snapshot() == ()
