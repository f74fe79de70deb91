from __future__ import annotations

import json
from typing import Any, Dict

import httpx
import pytest
import typer
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import CLIConfig, load_config


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.payload: Dict[str, Any] = {
            "realtime": {
                "outdoor": {
                    "temperature": {"unit": "ºF", "value": "68.0"},
                    "humidity": {"unit": "%", "value": "54"},
                },
                "pressure": {"relative": {"unit": "inHg", "value": "29.92"}},
            },
            "history": None,
            "history_error": {"code": None, "msg": "HTTP 500"},
            "trends": {
                "pressure": [{"time": 1_700_000_000_000, "value": 1013.21}],
                "temperature": [
                    {"time": 1_699_999_000_000, "value": 19.4},
                    {"time": 1_700_000_000_000, "value": 20.0},
                ],
            },
        }
        self.calls = 0
        self.closed = False

    def get_weather(self) -> Dict[str, Any]:
        self.calls += 1
        return self.payload

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_current_renders_summary(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["current"])

    assert result.exit_code == 0
    assert "Current Conditions" in result.stdout
    assert "outdoor_temperature: 68.0 ºF" in result.stdout
    assert "relative_pressure: 29.92 inHg" in result.stdout
    assert "unavailable: HTTP 500" in result.stdout
    assert "temperature: 2 samples, latest 20.0 C" in result.stdout
    assert stub.calls == 1
    assert stub.closed is True


def test_current_raw_prints_json(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--base-url", "http://proxy.test/", "current", "--raw"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == stub.payload
    assert stub.config.base_url == "http://proxy.test"


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://weather.local:9000/")
    monkeypatch.setenv("CLI_TIMEOUT", "not-a-number")

    config = load_config()

    assert config == CLIConfig(base_url="http://weather.local:9000", timeout=30.0)


def test_api_client_exits_on_http_error(monkeypatch, capsys) -> None:
    client = ApiClient(CLIConfig(base_url="http://proxy.test"))
    client.close()
    transport = httpx.MockTransport(
        lambda request: httpx.Response(502, json={"error": "Failed to reach Ecowitt API: HTTP 503"})
    )
    monkeypatch.setattr(
        client, "_client", httpx.Client(base_url="http://proxy.test", transport=transport)
    )

    try:
        with pytest.raises(typer.Exit) as excinfo:
            client.get_weather()
    finally:
        client.close()

    assert excinfo.value.exit_code == 1
    assert "Failed to reach Ecowitt API: HTTP 503" in capsys.readouterr().err
