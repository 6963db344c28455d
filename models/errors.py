"""Exceptions raised by the telemetry core.

Routes translate these into HTTP responses; nothing here is fatal to the
process.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class RejectionReason(str, Enum):
    """Codes reported for a rejected candidate reading."""

    missing_field = "missing-field"
    invalid_device_id = "invalid-device-id"
    invalid_timestamp = "invalid-timestamp"
    nitrogen_out_of_range = "nitrogen-out-of-range"
    phosphorus_out_of_range = "phosphorus-out-of-range"
    ph_out_of_range = "ph-out-of-range"


@dataclass(frozen=True)
class Violation:
    code: RejectionReason
    field: str
    message: str


class TelemetryError(Exception):
    """Base exception for the telemetry service."""


class ReadingValidationError(TelemetryError):
    """Raised when a candidate reading breaks one or more rules."""

    def __init__(self, violations: Iterable[Violation]) -> None:
        self.violations: List[Violation] = list(violations)
        super().__init__("; ".join(v.message for v in self.violations))

    @property
    def codes(self) -> List[RejectionReason]:
        return [violation.code for violation in self.violations]


class StorageUnavailableError(TelemetryError):
    """Raised when the backing store cannot accept or serve a request."""

    code = "storage-unavailable"
