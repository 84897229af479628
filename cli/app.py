from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
import typer

from cli.client import ApiClient, report_http_error
from cli.config import CLIConfig, load_config
from cli.poller import DashboardPoller
from cli.render import (
    render_appliance_cards,
    render_appliances,
    render_dashboard,
    render_reading,
)
from logging_config import configure_logging
from models.records import SAMPLE_APPLIANCES
from services.dashboard import (
    SORTABLE_COLUMNS,
    DashboardView,
    filter_appliances,
    sort_appliances,
)


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Dashboard client and device simulator for the energy meter telemetry service.",
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
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    device_id: Optional[str] = typer.Option(
        None,
        "--device-id",
        "-d",
        help="Device to read or push for (defaults to METER_DEVICE_ID env or esp32_1).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log poll activity to stderr."),
) -> None:
    """Entry point for the CLI."""
    configure_logging("INFO" if verbose else "WARNING", force=True)
    config = load_config(
        base_url=base_url,
        device_id=device_id,
        request_timeout=timeout,
    )
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the latest stored reading for the device."""
    state = _get_state(ctx)
    try:
        payload = state.client.get_latest(state.config.device_id)
    except httpx.HTTPError as exc:
        report_http_error(exc)
        return
    render_reading(payload, state.config.device_id)


@app.command("push")
def push_command(
    ctx: typer.Context,
    voltage: Optional[str] = typer.Option(None, "--voltage", help="Voltage in volts."),
    current: Optional[str] = typer.Option(None, "--current", help="Current in milliamps."),
    power: Optional[str] = typer.Option(None, "--power", help="Power in watts."),
    raw_adc: Optional[str] = typer.Option(None, "--raw-adc", help="Raw ADC counts."),
    timestamp: Optional[str] = typer.Option(
        None, "--timestamp", help="Device uptime in ms; the service stamps receipt time if omitted."
    ),
) -> None:
    """Push one reading the way the device does."""
    state = _get_state(ctx)
    payload: Dict[str, Any] = {"deviceId": state.config.device_id}
    fields = {
        "voltage": voltage,
        "current": current,
        "power": power,
        "rawAdc": raw_adc,
        "timestamp": timestamp,
    }
    payload.update({key: value for key, value in fields.items() if value is not None})
    try:
        state.client.push_reading(payload)
    except httpx.HTTPError as exc:
        report_http_error(exc)
        return
    typer.secho(f"Reading accepted for {state.config.device_id}.", fg=typer.colors.GREEN)


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between polls (defaults to CLI_POLL_INTERVAL env or 2).",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        min=1,
        help="Stop after this many polls instead of running until interrupted.",
    ),
) -> None:
    """Poll the service and render the live dashboard."""
    state = _get_state(ctx)
    poll_interval = interval if interval is not None else state.config.poll_interval
    poller = DashboardPoller(state.client, state.config.device_id)

    def on_tick(view: DashboardView) -> None:
        typer.echo()
        render_dashboard(view, state.config.device_id)

    try:
        poller.run(poll_interval, on_tick=on_tick, count=count)
    except KeyboardInterrupt:
        raise typer.Exit(code=0)


@app.command("appliances")
def appliances_command(
    sort: str = typer.Option("name", "--sort", help=f"One of: {', '.join(SORTABLE_COLUMNS)}."),
    descending: bool = typer.Option(False, "--desc", help="Sort in descending order."),
    search: str = typer.Option(
        "", "--search", "-s", help="Only show rows containing this text, ignoring case."
    ),
) -> None:
    """Show the sample appliance table with voltage and current cards."""
    try:
        appliances = sort_appliances(SAMPLE_APPLIANCES, sort, descending=descending)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--sort") from exc
    appliances = filter_appliances(appliances, search)
    if not appliances:
        typer.echo(f"No appliances match {search!r}.")
        return
    render_appliances(appliances)
    typer.echo()
    render_appliance_cards(appliances)
