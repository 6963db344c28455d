"""Unit tests for the time-series windower."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from models.records import StoredReading
from services.windower import TimeSeriesWindower

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _stored(reading_id: int, device_id: str, minutes: int, nitrogen: float = 100.0) -> StoredReading:
    return StoredReading(
        id=reading_id,
        device_id=device_id,
        timestamp=BASE + timedelta(minutes=minutes),
        nitrogen=nitrogen,
        phosphorus=40.0 + minutes,
        ph=6.5,
        received_at=BASE,
    )


def test_empty_input_gives_empty_frame() -> None:
    frame = TimeSeriesWindower().build_frame([])

    assert frame.devices == []
    assert frame.rows == []


def test_keeps_most_recent_points_in_ascending_order() -> None:
    # newest first, as the store returns them
    readings = [_stored(n + 1, "GH001", minutes=n, nitrogen=float(n)) for n in reversed(range(50))]

    frame = TimeSeriesWindower().build_frame(readings, max_points=30)

    assert len(frame.rows) == 30
    assert [row.timestamp for row in frame.rows] == [
        BASE + timedelta(minutes=n) for n in range(20, 50)
    ]
    assert frame.rows[0].values == {"GH001": 20.0}


def test_missing_cells_are_none_not_zero_or_carried_forward() -> None:
    readings = [
        _stored(1, "GH001", minutes=0, nitrogen=150.0),
        _stored(2, "GH002", minutes=0, nitrogen=90.0),
        _stored(3, "GH001", minutes=5, nitrogen=160.0),
    ]

    frame = TimeSeriesWindower().build_frame(readings)

    assert frame.devices == ["GH001", "GH002"]
    assert frame.rows[0].values == {"GH001": 150.0, "GH002": 90.0}
    assert frame.rows[1].values == {"GH001": 160.0, "GH002": None}


def test_device_filter_limits_columns_and_rows() -> None:
    readings = [
        _stored(1, "GH001", minutes=0),
        _stored(2, "GH002", minutes=1),
        _stored(3, "GH001", minutes=2),
    ]

    frame = TimeSeriesWindower().build_frame(readings, device_filter="GH002")

    assert frame.devices == ["GH002"]
    assert [row.timestamp for row in frame.rows] == [BASE + timedelta(minutes=1)]


def test_unknown_device_filter_gives_empty_frame() -> None:
    frame = TimeSeriesWindower().build_frame([_stored(1, "GH001", 0)], device_filter="nope")

    assert frame.rows == []
    assert frame.devices == []


def test_columns_include_devices_outside_the_kept_window() -> None:
    readings = [
        _stored(1, "GH002", minutes=0),
        _stored(2, "GH001", minutes=1),
        _stored(3, "GH001", minutes=2),
    ]

    frame = TimeSeriesWindower().build_frame(readings, max_points=2)

    assert frame.devices == ["GH001", "GH002"]
    assert all(row.values["GH002"] is None for row in frame.rows)


def test_same_timestamp_duplicate_prefers_later_insert() -> None:
    readings = [
        _stored(5, "GH001", minutes=0, nitrogen=50.0),
        _stored(2, "GH001", minutes=0, nitrogen=10.0),
    ]

    frame = TimeSeriesWindower().build_frame(readings)

    assert frame.rows[0].values == {"GH001": 50.0}


def test_sorting_uses_time_not_label() -> None:
    # "Dec" sorts before "Jan" as text but comes later in time
    early = StoredReading(1, "GH001", datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc), 1.0, 1.0, 7.0, BASE)
    late = StoredReading(2, "GH001", datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc), 2.0, 1.0, 7.0, BASE)

    frame = TimeSeriesWindower().build_frame([late, early])

    assert [row.label for row in frame.rows] == ["Dec 31, 11:00 PM", "Jan 01, 01:00 AM"]


def test_other_metrics_can_be_charted() -> None:
    frame = TimeSeriesWindower().build_frame([_stored(1, "GH001", minutes=3)], metric="phosphorus")

    assert frame.metric == "phosphorus"
    assert frame.rows[0].values == {"GH001": 43.0}


@pytest.mark.parametrize(("kwargs"), [{"max_points": 0}, {"metric": "potassium"}])
def test_invalid_arguments_raise(kwargs) -> None:
    with pytest.raises(ValueError):
        TimeSeriesWindower().build_frame([], **kwargs)
