# client tests use a fake session, so nothing here touches the network

import pytest
import requests
from tempheatmap.client import DEFAULT_CSV_URL, TemperatureCSVClient, TemperatureDataError


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


def _client(monkeypatch, session, **kwargs):
    client = TemperatureCSVClient(source="https://example.test/t.csv", **kwargs)
    monkeypatch.setattr(client, "_session", lambda: session)
    return client


def test_defaults(monkeypatch):
    monkeypatch.delenv("TEMPHEATMAP_CSV_URL", raising=False)
    monkeypatch.delenv("TEMPHEATMAP_TIMEOUT", raising=False)
    monkeypatch.delenv("TEMPHEATMAP_MAX_RETRIES", raising=False)
    client = TemperatureCSVClient()
    assert client.source == DEFAULT_CSV_URL
    assert client.is_remote
    # no timeout and no retries unless configured
    assert client.timeout is None
    assert client._retry.total == 0


def test_env_configuration(monkeypatch):
    monkeypatch.setenv("TEMPHEATMAP_CSV_URL", "https://example.test/other.csv")
    monkeypatch.setenv("TEMPHEATMAP_TIMEOUT", "2.5")
    monkeypatch.setenv("TEMPHEATMAP_MAX_RETRIES", "3")
    client = TemperatureCSVClient()
    assert client.source == "https://example.test/other.csv"
    assert client.timeout == 2.5
    assert client._retry.total == 3


def test_bad_env_value(monkeypatch):
    monkeypatch.setenv("TEMPHEATMAP_TIMEOUT", "soon")
    with pytest.raises(TemperatureDataError):
        TemperatureCSVClient()


def test_remote_frame(monkeypatch):
    body = "date,max_temperature,min_temperature\n2020-01-01,5,1\n"
    session = FakeSession(FakeResponse(text=body))
    frame = _client(monkeypatch, session).get_daily_frame()

    assert list(frame.columns) == ["date", "max_temperature", "min_temperature"]
    assert frame.iloc[0]["max_temperature"] == "5"
    assert session.calls == [("https://example.test/t.csv", None)]


def test_http_error(monkeypatch):
    session = FakeSession(FakeResponse(status_code=404, text="not found"))
    with pytest.raises(TemperatureDataError, match="HTTP 404"):
        _client(monkeypatch, session).get_daily_frame()


def test_request_exception_is_wrapped(monkeypatch):
    session = FakeSession(exc=requests.ConnectionError("boom"))
    with pytest.raises(TemperatureDataError, match="Request error"):
        _client(monkeypatch, session).fetch_text()


def test_missing_columns(monkeypatch):
    session = FakeSession(FakeResponse(text="day,temp\n1,2\n"))
    with pytest.raises(TemperatureDataError, match="missing columns"):
        _client(monkeypatch, session).get_daily_frame()


def test_empty_body(monkeypatch):
    session = FakeSession(FakeResponse(text=""))
    with pytest.raises(TemperatureDataError, match="Invalid CSV"):
        _client(monkeypatch, session).get_daily_frame()


def test_local_file(csv_path):
    client = TemperatureCSVClient(source=str(csv_path))
    assert not client.is_remote
    assert len(client.get_daily_frame()) == 11


def test_missing_local_file(tmp_path):
    with pytest.raises(TemperatureDataError, match="Cannot read"):
        TemperatureCSVClient(source=str(tmp_path / "nope.csv")).fetch_text()
