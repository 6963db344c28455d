"""Latest-reading-per-device projection."""

from __future__ import annotations

from typing import Dict, Iterable, List

from models.records import StoredReading


class LatestValueProjector:
    """Reduce a reading set to the newest reading of each device.

    One pass, one slot per device. A candidate takes the slot when its
    ``(timestamp, id)`` is at least the slot's, so on an exact timestamp tie
    the later insert wins. Output is ordered by device id ascending.
    """

    def project(self, readings: Iterable[StoredReading]) -> List[StoredReading]:
        latest: Dict[str, StoredReading] = {}
        for reading in readings:
            current = latest.get(reading.device_id)
            if current is None or (reading.timestamp, reading.id) >= (
                current.timestamp,
                current.id,
            ):
                latest[reading.device_id] = reading
        return [latest[device_id] for device_id in sorted(latest)]
