from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading("Reading")
    echo_key_values(
        [
            ("id", payload.get("id")),
            ("deviceId", payload.get("deviceId")),
            ("timestamp", payload.get("timestamp")),
            ("nitrogen", payload.get("nitrogen")),
            ("phosphorus", payload.get("phosphorus")),
            ("ph", payload.get("ph")),
        ]
    )


def render_latest(payload: Dict[str, Any]) -> None:
    echo_heading(f"Latest readings ({payload.get('count', 0)} devices)")
    readings = payload.get("latestReadings") or []
    if not readings:
        typer.echo("No readings recorded.")
        return
    for reading in readings:
        typer.echo(
            f"  - {reading.get('deviceId')} @ {reading.get('timestamp')}: "
            f"N={reading.get('nitrogen')} ppm, P={reading.get('phosphorus')} ppm, "
            f"pH={reading.get('ph')}"
        )


def render_alerts(payload: Dict[str, Any]) -> None:
    alerts = payload.get("alerts") or []
    echo_heading(f"Alerts ({len(alerts)})")
    if not alerts:
        typer.secho("All devices within thresholds.", fg=typer.colors.GREEN)
        return
    for alert in alerts:
        typer.secho(f"  - [{alert.get('kind')}] {alert.get('message')}", fg=typer.colors.YELLOW)


def render_series(payload: Dict[str, Any]) -> None:
    devices = payload.get("devices") or []
    echo_heading(f"{payload.get('metric', 'nitrogen')} series ({payload.get('count', 0)} points)")
    if not devices:
        typer.echo("No chart data available.")
        return
    typer.echo("\t".join(["time", *devices]))
    for row in payload.get("rows") or []:
        values = row.get("values") or {}
        cells = ["-" if values.get(device) is None else str(values[device]) for device in devices]
        typer.echo("\t".join([row.get("label", ""), *cells]))
