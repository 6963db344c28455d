"""Threshold alerts over sensor readings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from models.records import StoredReading


class AlertKind(str, Enum):
    high_nitrogen = "high-nitrogen"
    ph_out_of_range = "ph-out-of-range"


class AlertSeverity(str, Enum):
    warning = "warning"


@dataclass(frozen=True)
class AlertEvent:
    device_id: str
    kind: AlertKind
    message: str
    value: float
    severity: AlertSeverity = AlertSeverity.warning


def _format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class AlertEvaluator:
    """Stateless rule evaluation.

    Readings are processed in input order; for each one the nitrogen rule is
    checked before the pH rule. Both bounds are exclusive.
    """

    def __init__(
        self,
        nitrogen_threshold: float = 200.0,
        ph_min: float = 6.0,
        ph_max: float = 7.0,
    ) -> None:
        self.nitrogen_threshold = nitrogen_threshold
        self.ph_min = ph_min
        self.ph_max = ph_max

    def evaluate(self, readings: Iterable[StoredReading]) -> List[AlertEvent]:
        alerts: List[AlertEvent] = []
        for reading in readings:
            if reading.nitrogen > self.nitrogen_threshold:
                alerts.append(
                    AlertEvent(
                        device_id=reading.device_id,
                        kind=AlertKind.high_nitrogen,
                        value=reading.nitrogen,
                        message=(
                            f"High nitrogen level detected on {reading.device_id}: "
                            f"{_format_value(reading.nitrogen)} ppm"
                        ),
                    )
                )
            if reading.ph < self.ph_min or reading.ph > self.ph_max:
                alerts.append(
                    AlertEvent(
                        device_id=reading.device_id,
                        kind=AlertKind.ph_out_of_range,
                        value=reading.ph,
                        message=(
                            f"pH out of range on {reading.device_id}: "
                            f"{_format_value(reading.ph)} "
                            f"(should be {self.ph_min:.1f}–{self.ph_max:.1f})"
                        ),
                    )
                )
        return alerts
