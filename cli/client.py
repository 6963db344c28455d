from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the telemetry service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def submit_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._client.post("/readings", json=payload)
            if response.status_code == 400:
                self._handle_rejection(response)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            self._handle_request_error(exc)
        return response.json()

    def get_latest(self) -> Dict[str, Any]:
        return self._get("/readings/latest")

    def get_alerts(self) -> Dict[str, Any]:
        return self._get("/readings/alerts")

    def get_series(
        self,
        device: Optional[str] = None,
        limit: Optional[int] = None,
        metric: str = "nitrogen",
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"metric": metric}
        if device:
            params["device"] = device
        if limit is not None:
            params["limit"] = limit
        return self._get("/readings/series", params=params)

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            self._handle_request_error(exc)
        return response.json()

    @staticmethod
    def _handle_request_error(exc: httpx.RequestError) -> None:
        typer.secho(
            f"Could not reach {exc.request.url}: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    @staticmethod
    def _handle_rejection(response: httpx.Response) -> None:
        body = response.json()
        typer.secho(body.get("error", "Validation failed"), fg=typer.colors.RED, err=True)
        for detail in body.get("details") or []:
            typer.secho(
                f"  - {detail.get('code')}: {detail.get('message')}",
                fg=typer.colors.RED,
                err=True,
            )
        raise typer.Exit(code=1)

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail") or data.get("error")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
