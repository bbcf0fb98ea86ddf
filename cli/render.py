from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _format_extreme(extreme: Optional[Dict[str, Any]]) -> str:
    if not extreme:
        return "n/a"
    return f"{extreme.get('value')} at {extreme.get('timestamp')}"


def render_reading(payload: Dict[str, Any]) -> None:
    data = payload.get("data") or {}
    echo_heading("Stored Reading")
    echo_key_values(
        [
            ("sensorId", data.get("sensorId")),
            ("timestamp", data.get("timestamp")),
        ]
    )
    quality = data.get("quality") or {}
    for code, value in quality.items():
        if value is not None:
            typer.echo(f"  - {code}: {value}")


def render_summary(summary: Dict[str, Any], sensor_id: Optional[str] = None) -> None:
    heading = "Summary" if sensor_id is None else f"Summary for sensor {sensor_id}"
    echo_heading(heading)
    for code, stats in summary.items():
        typer.echo()
        units = stats.get("units")
        typer.secho(f"{code} ({units})", bold=True)
        if "average" not in stats:
            typer.echo("No readings recorded.")
            continue
        echo_key_values(
            [
                ("minimum", _format_extreme(stats.get("minimum"))),
                ("maximum", _format_extreme(stats.get("maximum"))),
                ("average", stats.get("average")),
            ]
        )
