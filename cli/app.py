from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_alerts, render_latest, render_reading, render_series


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the sensor telemetry service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    device_id: str = typer.Argument(..., help="Device identifier, e.g. GH001."),
    nitrogen: float = typer.Option(..., "--nitrogen", "-n", help="Nitrogen in ppm."),
    phosphorus: float = typer.Option(..., "--phosphorus", "-p", help="Phosphorus in ppm."),
    ph: float = typer.Option(..., "--ph", help="pH value."),
    timestamp: Optional[str] = typer.Option(
        None,
        "--timestamp",
        "-t",
        help="ISO-8601 reading time (defaults to now, UTC).",
    ),
) -> None:
    """Submit a single reading."""
    state = _get_state(ctx)
    payload = {
        "deviceId": device_id,
        "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
        "nitrogen": nitrogen,
        "phosphorus": phosphorus,
        "ph": ph,
    }
    result = state.client.submit_reading(payload)
    typer.secho(f"Reading accepted. id={result.get('id')}", fg=typer.colors.GREEN)
    render_reading(result)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the most recent reading of each device."""
    state = _get_state(ctx)
    render_latest(state.client.get_latest())


@app.command("alerts")
def alerts_command(ctx: typer.Context) -> None:
    """Show threshold alerts for the latest readings."""
    state = _get_state(ctx)
    render_alerts(state.client.get_alerts())


@app.command("series")
def series_command(
    ctx: typer.Context,
    device: Optional[str] = typer.Option(None, "--device", "-d", help="Restrict to one device."),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Maximum points."),
    metric: str = typer.Option("nitrogen", "--metric", "-m", help="nitrogen, phosphorus or ph."),
) -> None:
    """Print the trailing time series as a table; '-' marks a gap."""
    state = _get_state(ctx)
    render_series(state.client.get_series(device=device, limit=limit, metric=metric))
