"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A validated nutrient/pH measurement from one device."""

    device_id: str
    timestamp: datetime
    nitrogen: float
    phosphorus: float
    ph: float


@dataclass(frozen=True, slots=True)
class StoredReading:
    """A reading as held by the store.

    ``id`` is assigned on insert and only used for ordering and tie-breaks.
    ``received_at`` is the insertion time, independent of the sensor clock.
    """

    id: int
    device_id: str
    timestamp: datetime
    nitrogen: float
    phosphorus: float
    ph: float
    received_at: datetime

    @classmethod
    def from_reading(
        cls, reading: SensorReading, reading_id: int, received_at: datetime
    ) -> "StoredReading":
        return cls(
            id=reading_id,
            device_id=reading.device_id,
            timestamp=reading.timestamp,
            nitrogen=reading.nitrogen,
            phosphorus=reading.phosphorus,
            ph=reading.ph,
            received_at=received_at,
        )
