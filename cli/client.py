from __future__ import annotations

from typing import Any, Dict

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the telemetry service.

    Methods raise ``httpx.HTTPError`` on transport failures and non-2xx
    responses so the poller can treat them as "no live data"; the one-shot
    commands go through :func:`report_http_error` instead.
    """

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def get_latest(self, device_id: str) -> Dict[str, Any]:
        response = self._client.get("/latest", params={"deviceId": device_id})
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Unexpected response payload for latest reading.")
        return payload

    def push_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._client.post("/readings", json=payload)
        response.raise_for_status()
        return response.json()


def report_http_error(exc: httpx.HTTPError) -> None:
    """Print a failed one-shot request in red on stderr and exit with code 1."""
    if isinstance(exc, httpx.HTTPStatusError):
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: "
            f"{detail or 'no detail provided.'}"
        )
    else:
        message = f"Request failed: {exc}"
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)
