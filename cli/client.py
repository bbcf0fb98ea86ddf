from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the air quality service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def submit_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._client.post("/api/readings", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            self._handle_request_error(exc)
        return response.json()

    def get_summary(self, sensor_id: Optional[str] = None) -> Dict[str, Any]:
        params = {"sensorId": sensor_id} if sensor_id else None
        try:
            response = self._client.get("/api/readings/summary", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            self._handle_request_error(exc)
        payload = response.json()
        summary = payload.get("summary")
        if not isinstance(summary, dict):
            raise typer.BadParameter("Unexpected response payload when fetching summary.")
        return summary

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            data = exc.response.json()
            detail = data.get("detail") or data.get("errors")
        except ValueError:
            detail = exc.response.text.strip()
        if isinstance(detail, list):
            detail = "; ".join(str(item) for item in detail)
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    def _handle_request_error(self, exc: httpx.RequestError) -> None:
        typer.secho(
            f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True
        )
        raise typer.Exit(code=1)
