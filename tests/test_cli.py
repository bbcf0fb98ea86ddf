from __future__ import annotations

from typing import Any, Dict, List, Optional

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
        self.submitted: List[Dict[str, Any]] = []
        self.summary_calls: List[Optional[str]] = []
        self.summary_payload: Dict[str, Any] = {
            "O3": {
                "units": "ppm",
                "minimum": {"timestamp": "2023-06-13T15:58:29Z", "value": 0.2},
                "maximum": {"timestamp": "2023-06-13T15:59:29Z", "value": 0.6},
                "average": 0.4,
            },
            "CO": {"units": "ppm"},
        }
        self.closed = False

    def submit_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.submitted.append(payload)
        return {"message": "Success", "data": payload}

    def get_summary(self, sensor_id: Optional[str] = None) -> Dict[str, Any]:
        self.summary_calls.append(sensor_id)
        return self.summary_payload

    def close(self) -> None:
        self.closed = True


def _mock_client(handler) -> ApiClient:
    client = ApiClient(CLIConfig(base_url="http://test"))
    client.close()
    client._client = httpx.Client(base_url="http://test", transport=httpx.MockTransport(handler))
    return client


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return client


def test_submit_sends_only_given_categories(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(
        app,
        ["submit", "59", "--timestamp", "2024-01-01T00:00:00Z", "--o3", "0.2", "--no2", "2049"],
    )

    assert result.exit_code == 0, result.output
    assert "Reading stored." in result.stdout
    assert stub.submitted == [
        {
            "sensorId": "59",
            "timestamp": "2024-01-01T00:00:00Z",
            "quality": {"O3": 0.2, "NO2": 2049.0},
        }
    ]
    assert stub.closed is True


def test_submit_defaults_timestamp_to_now(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["submit", "59", "--co", "0.3"])

    assert result.exit_code == 0, result.output
    assert stub.submitted[0]["timestamp"]


def test_summary_command_renders_statistics(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["summary", "--sensor-id", "59"])

    assert result.exit_code == 0, result.output
    assert stub.summary_calls == ["59"]
    assert "Summary for sensor 59" in result.stdout
    assert "O3 (ppm)" in result.stdout
    assert "average: 0.4" in result.stdout
    assert "No readings recorded." in result.stdout


def test_base_url_option_reaches_client(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["--base-url", "http://example.test/", "summary"])

    assert result.exit_code == 0, result.output
    assert stub.config == CLIConfig(base_url="http://example.test", timeout=30.0)


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://env.test:9000/")
    monkeypatch.setenv("CLI_REQUEST_TIMEOUT", "not-a-number")

    config = load_config()

    assert config.base_url == "http://env.test:9000"
    assert config.timeout == 30.0


def test_api_client_reports_validation_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"errors": ["quality.NO2: too high"]})

    client = _mock_client(handler)

    with pytest.raises(typer.Exit):
        client.submit_reading({"sensorId": "1"})
    client.close()


def test_api_client_fetches_summary() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params.get("sensorId") == "13"
        return httpx.Response(200, json={"summary": {"O3": {"units": "ppm"}}})

    client = _mock_client(handler)

    assert client.get_summary("13") == {"O3": {"units": "ppm"}}
    client.close()


def test_api_client_reports_unreachable_service() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _mock_client(handler)

    with pytest.raises(typer.Exit) as excinfo:
        client.get_summary()
    assert excinfo.value.exit_code == 1

    with pytest.raises(typer.Exit):
        client.submit_reading({"sensorId": "1"})
    client.close()


def test_summary_command_exits_when_service_is_down(runner: CliRunner, monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    monkeypatch.setattr("cli.app.ApiClient", lambda config: _mock_client(handler))

    result = runner.invoke(app, ["summary"])

    assert result.exit_code == 1
    assert "Traceback" not in result.output
