"""Coordination of the reading store and the derived views."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Optional

from datastore.reading_store import ReadingStore, build_default_store
from models.errors import ReadingValidationError
from models.records import StoredReading
from services.aggregator import Aggregator, OverviewSummary
from services.alerts import AlertEvaluator, AlertEvent
from services.projector import LatestValueProjector
from services.validator import ReadingValidator
from services.windower import TimeSeriesFrame, TimeSeriesWindower
from settings import get_settings

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TelemetryService:
    """Owns a store handle and wires validation, storage and the read views.

    Every read is side-effect free and safe to call repeatedly.
    """

    def __init__(
        self,
        store: ReadingStore,
        validator: ReadingValidator,
        projector: LatestValueProjector,
        evaluator: AlertEvaluator,
        windower: TimeSeriesWindower,
        aggregator: Aggregator,
        window_hours: int = 24,
        max_points: int = 30,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.validator = validator
        self.projector = projector
        self.evaluator = evaluator
        self.windower = windower
        self.aggregator = aggregator
        self.window_hours = window_hours
        self.max_points = max_points
        self._clock = clock

    @property
    def window_label(self) -> str:
        unit = "hour" if self.window_hours == 1 else "hours"
        return f"{self.window_hours} {unit}"

    def submit(self, candidate: Mapping[str, Any]) -> StoredReading:
        """Validate and store a candidate reading.

        Raises ``ReadingValidationError`` (nothing stored) or
        ``StorageUnavailableError``.
        """
        try:
            reading = self.validator.validate(candidate)
        except ReadingValidationError as exc:
            logger.warning(
                "Rejected reading",
                extra={
                    "violation_count": len(exc.violations),
                    "reason": ",".join(code.value for code in exc.codes),
                },
            )
            raise
        stored = self.store.append(reading)
        logger.info(
            "Stored reading",
            extra={"device_id": stored.device_id, "reading_id": stored.id},
        )
        return stored

    def recent_readings(self) -> List[StoredReading]:
        """Readings of the trailing window, newest first."""
        until = self._clock()
        since = until - timedelta(hours=self.window_hours)
        return self.store.query_range(since, until)

    def latest_readings(self) -> List[StoredReading]:
        return self.projector.project(self.store.query_all())

    def alerts(self) -> List[AlertEvent]:
        alerts = self.evaluator.evaluate(self.latest_readings())
        if alerts:
            logger.debug("Evaluated alerts", extra={"alert_count": len(alerts)})
        return alerts

    def series(
        self,
        device_id: Optional[str] = None,
        max_points: Optional[int] = None,
        metric: str = "nitrogen",
    ) -> TimeSeriesFrame:
        return self.windower.build_frame(
            self.recent_readings(),
            device_filter=device_id,
            max_points=max_points or self.max_points,
            metric=metric,
        )

    def overview(self) -> OverviewSummary:
        latest = self.latest_readings()
        alerts = self.evaluator.evaluate(latest)
        return self.aggregator.summarize(latest, alert_count=len(alerts))


@lru_cache
def build_default_service() -> TelemetryService:
    """Factory that wires the service with the configured store."""
    settings = get_settings()
    return TelemetryService(
        store=build_default_store(),
        validator=ReadingValidator(),
        projector=LatestValueProjector(),
        evaluator=AlertEvaluator(
            nitrogen_threshold=settings.nitrogen_alert_ppm,
            ph_min=settings.ph_min,
            ph_max=settings.ph_max,
        ),
        windower=TimeSeriesWindower(),
        aggregator=Aggregator(),
        window_hours=settings.window_hours,
        max_points=settings.series_max_points,
    )
