from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import CLIConfig

_REQUEST = httpx.Request("GET", "http://meter.test/latest")


class StubClient:
    def __init__(self, config, latest: Optional[Dict[str, Any]] = None) -> None:
        self.config = config
        self.latest_payload: Dict[str, Any] = (
            latest
            if latest is not None
            else {
                "deviceId": "esp32_1",
                "voltage": 120.5,
                "current": 250,
                "power": 30,
                "rawAdc": 512,
                "timestamp": 61000,
            }
        )
        self.error: Optional[httpx.HTTPError] = None
        self.latest_calls: List[str] = []
        self.pushed: List[Dict[str, Any]] = []
        self.closed = False

    def get_latest(self, device_id: str) -> Dict[str, Any]:
        self.latest_calls.append(device_id)
        if self.error is not None:
            raise self.error
        return self.latest_payload

    def push_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.pushed.append(payload)
        return {"ok": True}

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr("cli.app.configure_logging", lambda *args, **kwargs: None)


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_latest_renders_reading(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["latest"])

    assert result.exit_code == 0
    assert "Latest Reading" in result.stdout
    assert "voltage: 120.5" in result.stdout
    assert stub.latest_calls == ["esp32_1"]
    assert stub.closed is True


def test_latest_reports_empty_store(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None, latest={})
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--device-id", "esp32_2", "latest"])

    assert result.exit_code == 0
    assert "No reading stored for esp32_2." in result.stdout
    assert stub.latest_calls == ["esp32_2"]


def test_latest_http_failure_exits_non_zero(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    stub.error = httpx.ConnectError("connection refused", request=_REQUEST)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["latest"])

    assert result.exit_code == 1
    assert "Request failed: connection refused" in result.output
    assert stub.closed is True


def test_push_sends_raw_values(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(
        app,
        ["-d", "esp32_2", "push", "--voltage", "120.5", "--current", "250", "--raw-adc", "512"],
    )

    assert result.exit_code == 0
    assert "Reading accepted for esp32_2." in result.stdout
    assert stub.pushed == [
        {"deviceId": "esp32_2", "voltage": "120.5", "current": "250", "rawAdc": "512"}
    ]


def test_push_reports_status_error(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    stub.error = httpx.HTTPStatusError(
        "bad request",
        request=_REQUEST,
        response=httpx.Response(400, json={"detail": "Request body is not valid JSON."}, request=_REQUEST),
    )
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["push", "--voltage", "1"])

    assert result.exit_code == 1
    assert "status 400: Request body is not valid JSON." in result.output


def test_watch_renders_live_dashboard(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["watch", "--count", "2", "--interval", "0"])

    assert result.exit_code == 0
    assert result.stdout.count("Live (esp32_1)") == 2
    assert "Total Power (W): 30.0" in result.stdout
    assert "Total Current (mA): 250.0" in result.stdout
    assert "Line Voltage (V): 120.50" in result.stdout
    assert "Appliances (sample data)" not in result.stdout
    assert len(stub.latest_calls) == 2


def test_watch_falls_back_to_samples_when_offline(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None, latest={})
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["watch", "-n", "1"])

    assert result.exit_code == 0
    assert "Offline" in result.stdout
    assert "Total Power: --" in result.stdout
    assert "Appliances (sample data)" in result.stdout
    assert "Active Alerts" in result.stdout
    assert "CRITICAL" in result.stdout


def test_appliances_sorted_by_power(monkeypatch, runner: CliRunner) -> None:
    _install_stub(monkeypatch, StubClient(config=None))

    result = runner.invoke(app, ["appliances", "--sort", "power", "--desc"])

    assert result.exit_code == 0
    rows = [line for line in result.stdout.splitlines() if line.startswith(("Microwave", "Air Conditioner"))]
    assert rows[0].startswith("Microwave")
    assert "Microwave: 119.5 V (Normal), 12.5 A [##########]" in result.stdout


def test_appliances_rejects_unknown_column(monkeypatch, runner: CliRunner) -> None:
    _install_stub(monkeypatch, StubClient(config=None))

    result = runner.invoke(app, ["appliances", "--sort", "colour"])

    assert result.exit_code == 2


def test_api_client_talks_to_service_routes() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/latest":
            return httpx.Response(200, json={"deviceId": request.url.params["deviceId"], "voltage": 1.0})
        return httpx.Response(200, json={"ok": True})

    client = ApiClient(CLIConfig(base_url="http://meter.test"))
    client._client.close()
    client._client = httpx.Client(base_url="http://meter.test", transport=httpx.MockTransport(handler))
    try:
        assert client.get_latest("esp32_3") == {"deviceId": "esp32_3", "voltage": 1.0}
        assert client.push_reading({"voltage": "1"}) == {"ok": True}
    finally:
        client.close()

    assert [request.method for request in seen] == ["GET", "POST"]
    assert json.loads(seen[1].content) == {"voltage": "1"}


def test_api_client_raises_for_error_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    client = ApiClient(CLIConfig(base_url="http://meter.test"))
    client._client.close()
    client._client = httpx.Client(base_url="http://meter.test", transport=transport)
    try:
        with pytest.raises(httpx.HTTPStatusError):
            client.get_latest("esp32_1")
    finally:
        client.close()


def test_appliances_search_filters_rows(monkeypatch, runner: CliRunner) -> None:
    _install_stub(monkeypatch, StubClient(config=None))

    result = runner.invoke(app, ["appliances", "--search", "kitchen", "--sort", "power", "--desc"])

    assert result.exit_code == 0
    names = ("Microwave", "Coffee Maker", "Refrigerator", "Dishwasher", "Television")
    rows = [line for line in result.stdout.splitlines() if line.startswith(names)]
    assert [row.split("  ")[0] for row in rows] == [
        "Microwave",
        "Coffee Maker",
        "Refrigerator",
        "Dishwasher",
    ]
    assert "Television" not in result.stdout


def test_appliances_search_without_matches(monkeypatch, runner: CliRunner) -> None:
    _install_stub(monkeypatch, StubClient(config=None))

    result = runner.invoke(app, ["appliances", "-s", "garage"])

    assert result.exit_code == 0
    assert "No appliances match 'garage'." in result.stdout
    assert "Appliances (sample data)" not in result.stdout
