"""Unit tests for the overview aggregation logic."""

from __future__ import annotations

from datetime import datetime, timezone

from models.records import StoredReading
from services.aggregator import Aggregator


def _reading(device_id: str, nitrogen: float, phosphorus: float, ph: float) -> StoredReading:
    """Helper to build deterministic stored readings."""

    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return StoredReading(
        id=1,
        device_id=device_id,
        timestamp=now,
        nitrogen=nitrogen,
        phosphorus=phosphorus,
        ph=ph,
        received_at=now,
    )


def test_summarize_empty_iterable_returns_default_summary() -> None:
    summary = Aggregator().summarize([])

    assert summary.total_devices == 0
    assert summary.average_nitrogen is None
    assert summary.average_phosphorus is None
    assert summary.average_ph is None
    assert summary.alert_count == 0


def test_summarize_computes_averages() -> None:
    readings = [
        _reading("GH001", 100.0, 40.0, 6.0),
        _reading("GH002", 300.0, 60.0, 7.0),
    ]

    summary = Aggregator().summarize(readings, alert_count=1)

    assert summary.total_devices == 2
    assert summary.average_nitrogen == 200.0
    assert summary.average_phosphorus == 50.0
    assert summary.average_ph == 6.5
    assert summary.alert_count == 1
