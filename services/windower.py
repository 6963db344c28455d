"""Windowed multi-device time series for charting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from models.records import StoredReading

DEFAULT_MAX_POINTS = 30
DEFAULT_LABEL_FORMAT = "%b %d, %I:%M %p"
METRICS = ("nitrogen", "phosphorus", "ph")


@dataclass
class FrameRow:
    """One distinct timestamp; ``None`` in ``values`` means no reading."""

    timestamp: datetime
    label: str
    values: Dict[str, Optional[float]] = field(default_factory=dict)


@dataclass
class TimeSeriesFrame:
    metric: str
    devices: List[str] = field(default_factory=list)
    rows: List[FrameRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


class TimeSeriesWindower:
    """Sparse exact-timestamp join of readings into a device-columned grid.

    Timestamps are never bucketed and missing cells are never filled in:
    devices sampled at different cadences show gaps.
    """

    def __init__(self, label_format: str = DEFAULT_LABEL_FORMAT) -> None:
        self.label_format = label_format

    def build_frame(
        self,
        readings: Iterable[StoredReading],
        device_filter: Optional[str] = None,
        max_points: int = DEFAULT_MAX_POINTS,
        metric: str = "nitrogen",
    ) -> TimeSeriesFrame:
        if max_points < 1:
            raise ValueError("max_points must be at least 1.")
        if metric not in METRICS:
            raise ValueError(f"Unknown metric {metric!r}; expected one of {', '.join(METRICS)}.")

        cells: Dict[Tuple[str, datetime], StoredReading] = {}
        for reading in readings:
            if device_filter is not None and reading.device_id != device_filter:
                continue
            key = (reading.device_id, reading.timestamp)
            current = cells.get(key)
            if current is None or reading.id >= current.id:
                cells[key] = reading

        devices = sorted({device_id for device_id, _ in cells})
        timestamps = sorted({timestamp for _, timestamp in cells})[-max_points:]

        rows: List[FrameRow] = []
        for timestamp in timestamps:
            values: Dict[str, Optional[float]] = {}
            for device_id in devices:
                reading = cells.get((device_id, timestamp))
                values[device_id] = getattr(reading, metric) if reading is not None else None
            rows.append(
                FrameRow(
                    timestamp=timestamp,
                    label=timestamp.strftime(self.label_format),
                    values=values,
                )
            )

        return TimeSeriesFrame(metric=metric, devices=devices, rows=rows)
