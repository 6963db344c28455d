"""HTTP route definitions for the service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.schemas import (
    AlertListResponse,
    AlertPayload,
    HealthResponse,
    LatestReadingsResponse,
    OverviewResponse,
    ReadingCreatedResponse,
    ReadingListResponse,
    ReadingRecord,
    SeriesResponse,
    SeriesRow,
    ValidationFailedResponse,
    ViolationDetail,
)
from models.errors import ReadingValidationError, StorageUnavailableError
from services.telemetry import TelemetryService, build_default_service

SERVICE_NAME = "Agricultural Sensor Dashboard API"

router = APIRouter()


def get_service() -> TelemetryService:
    return build_default_service()


@router.post(
    "/readings",
    status_code=status.HTTP_201_CREATED,
    response_model=ReadingCreatedResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ValidationFailedResponse}},
    summary="Submit a new sensor reading.",
)
def create_reading(
    payload: Dict[str, Any] = Body(..., description="deviceId, timestamp, nitrogen, phosphorus, ph"),
    service: TelemetryService = Depends(get_service),
) -> Any:
    try:
        stored = service.submit(payload)
    except ReadingValidationError as exc:
        body = ValidationFailedResponse(
            details=[
                ViolationDetail(code=v.code.value, field=v.field, message=v.message)
                for v in exc.violations
            ]
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(),
        )
    except StorageUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    record = ReadingRecord.from_stored(stored)
    return ReadingCreatedResponse(**record.model_dump())


@router.get(
    "/readings",
    response_model=ReadingListResponse,
    summary="Readings from the trailing window, newest first.",
)
def list_readings(service: TelemetryService = Depends(get_service)) -> ReadingListResponse:
    readings = [ReadingRecord.from_stored(row) for row in service.recent_readings()]
    return ReadingListResponse(
        readings=readings,
        count=len(readings),
        time_range=service.window_label,
    )


@router.get(
    "/readings/latest",
    response_model=LatestReadingsResponse,
    summary="Most recent reading of each device, ordered by device id.",
)
def latest_readings(service: TelemetryService = Depends(get_service)) -> LatestReadingsResponse:
    latest = [ReadingRecord.from_stored(row) for row in service.latest_readings()]
    return LatestReadingsResponse(latest_readings=latest, count=len(latest))


@router.get(
    "/readings/alerts",
    response_model=AlertListResponse,
    summary="Threshold alerts over the latest reading of each device.",
)
def reading_alerts(service: TelemetryService = Depends(get_service)) -> AlertListResponse:
    alerts = [
        AlertPayload(
            device_id=alert.device_id,
            kind=alert.kind.value,
            severity=alert.severity.value,
            message=alert.message,
            value=alert.value,
        )
        for alert in service.alerts()
    ]
    return AlertListResponse(alerts=alerts, count=len(alerts))


@router.get(
    "/readings/series",
    response_model=SeriesResponse,
    summary="Windowed time series for charting; gaps are null.",
)
def reading_series(
    device: Optional[str] = Query(None, description="Restrict to one device id."),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of points."),
    metric: str = Query("nitrogen", pattern="^(nitrogen|phosphorus|ph)$"),
    service: TelemetryService = Depends(get_service),
) -> SeriesResponse:
    frame = service.series(device_id=device, max_points=limit, metric=metric)
    return SeriesResponse(
        metric=frame.metric,
        devices=frame.devices,
        rows=[
            SeriesRow(timestamp=row.timestamp, label=row.label, values=row.values)
            for row in frame.rows
        ],
        count=len(frame),
    )


@router.get(
    "/readings/overview",
    response_model=OverviewResponse,
    summary="Averages and alert count over the latest readings.",
)
def reading_overview(service: TelemetryService = Depends(get_service)) -> OverviewResponse:
    summary = service.overview()
    return OverviewResponse(
        total_devices=summary.total_devices,
        average_nitrogen=summary.average_nitrogen,
        average_phosphorus=summary.average_phosphorus,
        average_ph=summary.average_ph,
        alert_count=summary.alert_count,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        service=SERVICE_NAME,
    )


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "healthy", "detail": "See /health for service status."}
