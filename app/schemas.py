"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import StoredReading


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ReadingRecord(_CamelModel):
    """A stored reading as exposed by the API and persisted on disk."""

    id: int = Field(..., ge=1)
    device_id: str = Field(..., alias="deviceId", min_length=1, max_length=50)
    timestamp: datetime
    nitrogen: float = Field(..., ge=0, le=1000, description="Nitrogen in ppm.")
    phosphorus: float = Field(..., ge=0, le=500, description="Phosphorus in ppm.")
    ph: float = Field(..., ge=0, le=14)
    received_at: datetime = Field(..., alias="receivedAt")

    @classmethod
    def from_stored(cls, reading: StoredReading) -> "ReadingRecord":
        return cls(
            id=reading.id,
            device_id=reading.device_id,
            timestamp=reading.timestamp,
            nitrogen=reading.nitrogen,
            phosphorus=reading.phosphorus,
            ph=reading.ph,
            received_at=reading.received_at,
        )

    def to_stored(self) -> StoredReading:
        return StoredReading(
            id=self.id,
            device_id=self.device_id,
            timestamp=_as_utc(self.timestamp),
            nitrogen=self.nitrogen,
            phosphorus=self.phosphorus,
            ph=self.ph,
            received_at=_as_utc(self.received_at),
        )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ReadingCreatedResponse(ReadingRecord):
    """Response payload after a reading is accepted."""

    message: str = "Reading saved successfully"


class ViolationDetail(BaseModel):
    code: str
    field: str
    message: str


class ValidationFailedResponse(BaseModel):
    """Body returned with HTTP 400 when a reading is rejected."""

    error: str = "Validation failed"
    details: List[ViolationDetail] = Field(default_factory=list)


class ReadingListResponse(_CamelModel):
    readings: List[ReadingRecord]
    count: int = Field(..., ge=0)
    time_range: str = Field(..., alias="timeRange")


class LatestReadingsResponse(_CamelModel):
    latest_readings: List[ReadingRecord] = Field(..., alias="latestReadings")
    count: int = Field(..., ge=0)


class AlertPayload(_CamelModel):
    device_id: str = Field(..., alias="deviceId")
    kind: str
    severity: str
    message: str
    value: float


class AlertListResponse(BaseModel):
    alerts: List[AlertPayload]
    count: int = Field(..., ge=0)


class SeriesRow(BaseModel):
    timestamp: datetime
    label: str
    values: Dict[str, Optional[float]]


class SeriesResponse(BaseModel):
    """Time-series frame; a ``None`` value marks a gap, never a zero."""

    metric: str
    devices: List[str]
    rows: List[SeriesRow]
    count: int = Field(..., ge=0)


class OverviewResponse(_CamelModel):
    total_devices: int = Field(..., alias="totalDevices", ge=0)
    average_nitrogen: Optional[float] = Field(default=None, alias="averageNitrogen")
    average_phosphorus: Optional[float] = Field(default=None, alias="averagePhosphorus")
    average_ph: Optional[float] = Field(default=None, alias="averagePh")
    alert_count: int = Field(..., alias="alertCount", ge=0)


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    service: str
