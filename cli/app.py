from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_modal, render_readings, render_species, render_state
from services.monitor import create_engine


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the salinity monitor service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Monitor API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between refreshes for the watch command.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP request timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(
        base_url=base_url,
        poll_interval=poll_interval,
        request_timeout=timeout,
    )
    if ctx.invoked_subcommand == "simulate":
        return
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show the current reading, advisory and alert settings."""
    state = _get_state(ctx)
    render_state(state.client.get_state())


@app.command("history")
def history_command(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(None, "--count", "-n", min=1, help="Only show the last N readings."),
) -> None:
    """List the recorded reading history, oldest first."""
    state = _get_state(ctx)
    if count is None:
        count = state.config.history_count
    render_readings(state.client.get_readings(count))


@app.command("register-phone")
def register_phone_command(
    ctx: typer.Context,
    phone_number: str = typer.Argument(..., help="10-digit local mobile number, e.g. 9171234567."),
) -> None:
    """Register a phone number for SMS alerts."""
    state = _get_state(ctx)
    payload = state.client.register_phone(phone_number)
    render_modal(payload.get("modal") or {})
    if not (payload.get("notifications") or {}).get("is_registered"):
        raise typer.Exit(code=1)


@app.command("toggle-sms")
def toggle_sms_command(ctx: typer.Context) -> None:
    """Turn SMS alerts on or off."""
    state = _get_state(ctx)
    payload = state.client.toggle_sms()
    render_modal(payload.get("modal") or {})
    enabled = (payload.get("notifications") or {}).get("sms_enabled")
    typer.echo(f"sms_enabled: {enabled}")


@app.command("toggle-push")
def toggle_push_command(ctx: typer.Context) -> None:
    """Turn push notifications on or off."""
    state = _get_state(ctx)
    payload = state.client.toggle_push()
    enabled = (payload.get("notifications") or {}).get("push_enabled")
    typer.echo(f"push_enabled: {enabled}")


@app.command("ack")
def acknowledge_command(ctx: typer.Context) -> None:
    """Dismiss the pending alert message."""
    state = _get_state(ctx)
    state.client.acknowledge()
    typer.echo("Alert dismissed.")


@app.command("check-species")
def check_species_command(
    ctx: typer.Context,
    species: str = typer.Argument(..., help="Species to evaluate, e.g. Bangus."),
) -> None:
    """Ask the advisory service whether a species suits the current water."""
    state = _get_state(ctx)
    render_species(species, state.client.check_species(species))


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", min=1, help="Stop after N refreshes (default: run until interrupted)."
    ),
) -> None:
    """Print the monitor state repeatedly."""
    state = _get_state(ctx)
    for index, payload in enumerate(
        state.client.watch(state.config.poll_interval, iterations=iterations)
    ):
        if index:
            typer.echo()
        render_state(payload)


@app.command("simulate")
def simulate_command(
    ticks: int = typer.Option(10, "--ticks", "-t", min=1, help="Number of simulator ticks."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for a reproducible run."),
    salinity: float = typer.Option(1.5, "--salinity", help="Starting salinity in ppt."),
    temperature: float = typer.Option(29.2, "--temperature", help="Starting temperature in °C."),
) -> None:
    """Run the simulator locally without a server."""
    engine = create_engine(
        seed=seed,
        capacity=ticks,
        history_seed="empty",
        initial_salinity=salinity,
        initial_temperature=temperature,
    )
    for _ in range(ticks):
        snapshot = engine.tick()
        reading = snapshot.reading
        typer.echo(
            f"{snapshot.tick_count:>4} {reading.timestamp_label:>8} "
            f"{reading.salinity:6.3f} ppt {reading.temperature:6.3f} °C "
            f"{snapshot.advisory.kind.value}"
        )
