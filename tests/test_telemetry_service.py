"""Service-level tests wiring validation, storage and the read views."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from datastore.reading_store import ReadingStore
from models.errors import ReadingValidationError
from services.aggregator import Aggregator
from services.alerts import AlertEvaluator, AlertKind
from services.projector import LatestValueProjector
from services.telemetry import TelemetryService
from services.validator import ReadingValidator
from services.windower import TimeSeriesWindower

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class RecordingStore(ReadingStore):
    def __init__(self) -> None:
        super().__init__()
        self.append_calls = 0

    def append(self, reading):
        self.append_calls += 1
        return super().append(reading)


def _service(store: ReadingStore, max_points: int = 30) -> TelemetryService:
    return TelemetryService(
        store=store,
        validator=ReadingValidator(),
        projector=LatestValueProjector(),
        evaluator=AlertEvaluator(),
        windower=TimeSeriesWindower(),
        aggregator=Aggregator(),
        max_points=max_points,
        clock=lambda: NOW,
    )


def _candidate(device_id: str, minutes_ago: int, nitrogen: float = 100, ph: float = 6.5) -> dict:
    return {
        "deviceId": device_id,
        "timestamp": (NOW - timedelta(minutes=minutes_ago)).isoformat(),
        "nitrogen": nitrogen,
        "phosphorus": 40,
        "ph": ph,
    }


@pytest.mark.parametrize("field", ["deviceId", "timestamp", "nitrogen", "phosphorus", "ph"])
def test_rejected_reading_never_reaches_store(field: str) -> None:
    store = RecordingStore()
    candidate = _candidate("GH001", 1)
    del candidate[field]

    with pytest.raises(ReadingValidationError):
        _service(store).submit(candidate)

    assert store.append_calls == 0


def test_read_views_follow_submissions() -> None:
    service = _service(ReadingStore(), max_points=2)
    service.submit(_candidate("GH002", 30, nitrogen=90))
    service.submit(_candidate("GH001", 20, nitrogen=150))
    service.submit(_candidate("GH001", 10, nitrogen=260, ph=5.8))

    latest = service.latest_readings()
    assert [(row.device_id, row.nitrogen) for row in latest] == [("GH001", 260), ("GH002", 90)]

    assert [alert.kind for alert in service.alerts()] == [
        AlertKind.high_nitrogen,
        AlertKind.ph_out_of_range,
    ]

    frame = service.series()
    assert frame.devices == ["GH001", "GH002"]
    assert [row.values for row in frame.rows] == [
        {"GH001": 150.0, "GH002": None},
        {"GH001": 260.0, "GH002": None},
    ]

    overview = service.overview()
    assert overview.total_devices == 2
    assert overview.alert_count == 2


def test_recent_readings_excludes_older_than_window() -> None:
    service = _service(ReadingStore())
    service.submit(_candidate("GH001", 60 * 25))
    kept = service.submit(_candidate("GH001", 60))

    assert service.recent_readings() == [kept]
    assert len(service.latest_readings()) == 1
