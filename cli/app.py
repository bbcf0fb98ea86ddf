from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_reading, render_summary


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the air quality summary service.",
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
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8081).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
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
    sensor_id: str = typer.Argument(..., help="Identifier of the reporting sensor."),
    timestamp: Optional[str] = typer.Option(
        None,
        "--timestamp",
        "-t",
        help="ISO 8601 timestamp of the reading (defaults to now, UTC).",
    ),
    o3: Optional[float] = typer.Option(None, "--o3", help="Ozone concentration (ppm)."),
    co: Optional[float] = typer.Option(None, "--co", help="Carbon monoxide concentration (ppm)."),
    so2: Optional[float] = typer.Option(None, "--so2", help="Sulfur dioxide concentration (ppb)."),
    no2: Optional[float] = typer.Option(None, "--no2", help="Nitrogen dioxide concentration (ppb)."),
) -> None:
    """Submit a single reading."""
    state = _get_state(ctx)
    quality = {
        code: value
        for code, value in (("O3", o3), ("CO", co), ("SO2", so2), ("NO2", no2))
        if value is not None
    }
    payload = {
        "sensorId": sensor_id,
        "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
        "quality": quality,
    }
    typer.echo(f"Submitting reading for sensor {sensor_id} to {state.config.base_url} ...")
    result = state.client.submit_reading(payload)
    typer.secho("Reading stored.", fg=typer.colors.GREEN)
    render_reading(result)


@app.command("summary")
def summary_command(
    ctx: typer.Context,
    sensor_id: Optional[str] = typer.Option(
        None,
        "--sensor-id",
        "-s",
        help="Restrict the summary to one sensor.",
    ),
) -> None:
    """Show minimum, maximum and average per pollutant."""
    state = _get_state(ctx)
    summary = state.client.get_summary(sensor_id)
    render_summary(summary, sensor_id=sensor_id)
