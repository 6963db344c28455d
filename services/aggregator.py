"""Overview statistics over the latest reading of each device."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from models.records import StoredReading


@dataclass
class OverviewSummary:
    """Dashboard headline numbers."""

    total_devices: int = 0
    average_nitrogen: float | None = None
    average_phosphorus: float | None = None
    average_ph: float | None = None
    alert_count: int = 0


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def summarize(
        self, latest: Iterable[StoredReading], alert_count: int = 0
    ) -> OverviewSummary:
        summary = OverviewSummary(alert_count=alert_count)
        nitrogen_total = 0.0
        phosphorus_total = 0.0
        ph_total = 0.0

        for reading in latest:
            summary.total_devices += 1
            nitrogen_total += reading.nitrogen
            phosphorus_total += reading.phosphorus
            ph_total += reading.ph

        if summary.total_devices:
            summary.average_nitrogen = nitrogen_total / summary.total_devices
            summary.average_phosphorus = phosphorus_total / summary.total_devices
            summary.average_ph = ph_total / summary.total_devices

        return summary
