"""Validation of candidate sensor readings."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from models.errors import ReadingValidationError, RejectionReason, Violation
from models.records import SensorReading

MAX_DEVICE_ID_LENGTH = 50

_MISSING = object()

# (field, accepted keys)
_REQUIRED_FIELDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("deviceId", ("deviceId", "device_id")),
    ("timestamp", ("timestamp",)),
    ("nitrogen", ("nitrogen",)),
    ("phosphorus", ("phosphorus",)),
    ("ph", ("ph",)),
)

# field -> (low, high, code, label, unit)
_RANGES: Dict[str, Tuple[float, float, RejectionReason, str, str]] = {
    "nitrogen": (0.0, 1000.0, RejectionReason.nitrogen_out_of_range, "Nitrogen", " ppm"),
    "phosphorus": (0.0, 500.0, RejectionReason.phosphorus_out_of_range, "Phosphorus", " ppm"),
    "ph": (0.0, 14.0, RejectionReason.ph_out_of_range, "pH", ""),
}


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            raise ValueError("Timestamp is empty.")

        if candidate.endswith(("Z", "z")):
            candidate = candidate[:-1] + "+00:00"

        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError as exc:
            raise ValueError("Invalid timestamp format") from exc
    else:
        raise ValueError("Timestamp must be an ISO-8601 string.")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


class ReadingValidator:
    """Pure validation component: turns a raw mapping into a ``SensorReading``.

    Every rule is checked and all violations are reported together so the
    caller can show each problem at once.
    """

    def validate(self, candidate: Mapping[str, Any]) -> SensorReading:
        if not isinstance(candidate, Mapping):
            raise ReadingValidationError(
                [
                    Violation(
                        code=RejectionReason.missing_field,
                        field=field,
                        message=f"{field} is required",
                    )
                    for field, _keys in _REQUIRED_FIELDS
                ]
            )

        violations: List[Violation] = []
        raw: Dict[str, Any] = {}
        for field, keys in _REQUIRED_FIELDS:
            value = self._lookup(candidate, keys)
            if value is _MISSING:
                violations.append(
                    Violation(
                        code=RejectionReason.missing_field,
                        field=field,
                        message=f"{field} is required",
                    )
                )
                continue
            raw[field] = value

        device_id: Optional[str] = None
        if "deviceId" in raw:
            device_id = self._check_device_id(raw["deviceId"], violations)

        timestamp: Optional[datetime] = None
        if "timestamp" in raw:
            try:
                timestamp = parse_timestamp(raw["timestamp"])
            except ValueError:
                violations.append(
                    Violation(
                        code=RejectionReason.invalid_timestamp,
                        field="timestamp",
                        message="timestamp must be a valid ISO-8601 date",
                    )
                )

        numbers: Dict[str, float] = {}
        for field, (low, high, code, label, unit) in _RANGES.items():
            if field not in raw:
                continue
            number = _coerce_number(raw[field])
            if number is None:
                violations.append(
                    Violation(code=code, field=field, message=f"{label} must be a number")
                )
            elif not low <= number <= high:
                violations.append(
                    Violation(
                        code=code,
                        field=field,
                        message=f"{label} must be between {low:g}-{high:g}{unit}",
                    )
                )
            else:
                numbers[field] = number

        if violations or device_id is None or timestamp is None:
            raise ReadingValidationError(violations)

        return SensorReading(
            device_id=device_id,
            timestamp=timestamp,
            nitrogen=numbers["nitrogen"],
            phosphorus=numbers["phosphorus"],
            ph=numbers["ph"],
        )

    @staticmethod
    def _lookup(candidate: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
        for key in keys:
            value = candidate.get(key)
            if value is not None:
                return value
        return _MISSING

    @staticmethod
    def _check_device_id(value: Any, violations: List[Violation]) -> Optional[str]:
        if isinstance(value, str):
            device_id = value.strip()
            if device_id and len(device_id) <= MAX_DEVICE_ID_LENGTH:
                return device_id
        violations.append(
            Violation(
                code=RejectionReason.invalid_device_id,
                field="deviceId",
                message=(
                    "deviceId must be a non-empty string of at most "
                    f"{MAX_DEVICE_ID_LENGTH} characters"
                ),
            )
        )
        return None
