from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

import typer

_SEVERITY_COLORS = {
    "success": typer.colors.GREEN,
    "warning": typer.colors.YELLOW,
    "error": typer.colors.RED,
}

_ADVISORY_COLORS = {
    "Freshwater": typer.colors.GREEN,
    "Brackish": typer.colors.BLUE,
    "HighSalinity": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _fmt(value: Any, digits: int) -> str:
    if isinstance(value, (int, float)):
        return f"{value:.{digits}f}"
    return str(value)


def render_readings(readings: Sequence[Dict[str, Any]]) -> None:
    echo_heading("History")
    if not readings:
        typer.echo("No readings recorded.")
        return
    for reading in readings:
        typer.echo(
            f"  - {reading.get('timestamp_label')}: "
            f"{_fmt(reading.get('salinity'), 2)} ppt, "
            f"{_fmt(reading.get('temperature'), 1)} °C"
        )


def render_modal(modal: Dict[str, Any]) -> None:
    if not modal or not modal.get("visible"):
        return
    color = _SEVERITY_COLORS.get(modal.get("severity", ""), None)
    typer.secho(f"[{modal.get('title')}] {modal.get('message')}", fg=color)


def render_notifications(config: Dict[str, Any]) -> None:
    echo_heading("Notifications")
    phone = config.get("phone_number") or "-"
    echo_key_values(
        [
            ("sms_enabled", config.get("sms_enabled")),
            ("push_enabled", config.get("push_enabled")),
            ("registered", config.get("is_registered")),
            ("phone_number", phone),
        ]
    )


def render_state(payload: Dict[str, Any]) -> None:
    reading = payload.get("reading") or {}
    advisory = payload.get("advisory") or {}

    echo_heading("Current Reading")
    echo_key_values(
        [
            ("time", reading.get("timestamp_label")),
            ("salinity", f"{_fmt(reading.get('salinity'), 2)} ppt"),
            ("temperature", f"{_fmt(reading.get('temperature'), 1)} °C"),
        ]
    )

    typer.echo()
    echo_heading("Advisory")
    typer.secho(
        f"{advisory.get('kind')}: {advisory.get('message')}",
        fg=_ADVISORY_COLORS.get(advisory.get("kind", ""), None),
    )
    typer.echo(advisory.get("description", ""))

    typer.echo()
    render_notifications(payload.get("notifications") or {})
    render_modal(payload.get("modal") or {})


def render_species(species: str, payload: Dict[str, Any]) -> None:
    verdict = "compatible" if payload.get("compatible") else "not compatible"
    color = typer.colors.GREEN if payload.get("compatible") else typer.colors.RED
    typer.secho(f"{species}: {verdict}", fg=color, bold=True)
    typer.echo(payload.get("reason", ""))
