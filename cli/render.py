from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _reading(realtime: Dict[str, Any], group: str, field: str) -> str:
    node = (realtime.get(group) or {}).get(field) or {}
    value = node.get("value")
    if value in (None, ""):
        return "n/a"
    unit = node.get("unit") or ""
    return f"{value} {unit}".strip()


def _latest(samples: List[Dict[str, Any]], unit: str) -> str:
    if not samples:
        return "no samples"
    last = samples[-1]
    stamp = datetime.fromtimestamp(last["time"] / 1000, tz=timezone.utc)
    return f"{len(samples)} samples, latest {last['value']:.1f} {unit} at {stamp:%Y-%m-%d %H:%M}Z"


def render_weather(payload: Dict[str, Any]) -> None:
    realtime = payload.get("realtime") or {}
    echo_heading("Current Conditions")
    echo_key_values(
        [
            ("outdoor_temperature", _reading(realtime, "outdoor", "temperature")),
            ("outdoor_humidity", _reading(realtime, "outdoor", "humidity")),
            ("relative_pressure", _reading(realtime, "pressure", "relative")),
        ]
    )

    typer.echo()
    echo_heading("Upstream History")
    history_error = payload.get("history_error")
    if payload.get("history") is not None:
        typer.echo("available")
    elif history_error:
        typer.echo(f"unavailable: {history_error.get('msg')} (code={history_error.get('code')})")
    else:
        typer.echo("unavailable")

    trends = payload.get("trends") or {}
    typer.echo()
    echo_heading("Trends")
    echo_key_values(
        [
            ("pressure", _latest(trends.get("pressure") or [], "hPa")),
            ("temperature", _latest(trends.get("temperature") or [], "C")),
        ]
    )
