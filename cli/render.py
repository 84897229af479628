from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, Sequence

import typer

from models.records import AlertSample, ApplianceSample, Severity
from services.connection import ConnectionStatus, LinkState
from services.dashboard import DashboardView, current_shares, voltage_indicator

_SEVERITY_COLORS = {
    Severity.critical: typer.colors.RED,
    Severity.warning: typer.colors.YELLOW,
    Severity.info: typer.colors.BLUE,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_status(status: ConnectionStatus, device_id: str) -> None:
    if status.state is LinkState.live:
        typer.secho(f"Live ({device_id})", fg=typer.colors.GREEN)
    elif status.last_observed_at is not None:
        typer.secho(f"{device_id} disconnected", fg=typer.colors.RED)
    else:
        typer.secho("Offline", fg=typer.colors.RED)
    if status.last_observed_at is not None:
        observed = datetime.fromtimestamp(status.last_observed_at).strftime("%H:%M:%S")
        typer.echo(f"Last updated: {observed}")


def render_reading(payload: Dict[str, Any], device_id: str) -> None:
    if not payload:
        typer.echo(f"No reading stored for {device_id}.")
        return
    echo_heading("Latest Reading")
    echo_key_values(
        [
            ("deviceId", payload.get("deviceId")),
            ("voltage", payload.get("voltage")),
            ("current", payload.get("current")),
            ("power", payload.get("power")),
            ("rawAdc", payload.get("rawAdc")),
            ("timestamp", payload.get("timestamp")),
        ]
    )


def render_appliances(appliances: Sequence[ApplianceSample]) -> None:
    echo_heading("Appliances (sample data)")
    typer.echo(
        f"{'Appliance':<16} {'Circuit':<13} {'Current (A)':>11} "
        f"{'Voltage (V)':>11} {'Power (W)':>9}  Status"
    )
    for item in appliances:
        typer.echo(
            f"{item.name:<16} {item.circuit:<13} {item.current:>11.1f} "
            f"{item.voltage:>11.1f} {item.power:>9.0f}  {item.status}"
        )


def render_appliance_cards(appliances: Sequence[ApplianceSample]) -> None:
    echo_heading("Voltage & Current by Appliance")
    for item, share in current_shares(appliances):
        bar = "#" * round(share / 10)
        typer.echo(
            f"  - {item.name}: {item.voltage:.1f} V ({voltage_indicator(item.voltage)}), "
            f"{item.current:.1f} A [{bar:<10}]"
        )


def render_alerts(title: str, alerts: Sequence[AlertSample]) -> None:
    echo_heading(title)
    if not alerts:
        typer.echo("No alerts.")
        return
    for alert in alerts:
        badge = typer.style(alert.severity.value.upper(), fg=_SEVERITY_COLORS[alert.severity])
        typer.echo(
            f"  - [{badge}] {alert.type} on {alert.appliance} ({alert.time}): {alert.description}"
        )


def render_dashboard(view: DashboardView, device_id: str) -> None:
    render_status(view.status, device_id)
    typer.echo()
    for widget in view.widgets:
        typer.echo(f"{widget.label}: {widget.value}")

    if view.is_live:
        return

    typer.echo()
    render_appliances(view.appliances)
    typer.echo()
    render_alerts("Active Alerts", view.alerts)
    typer.echo()
    render_alerts("Alert History", view.alert_history)
