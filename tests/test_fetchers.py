import logging

import pytest
import requests

import fetchers
from config import SheetSource
from fetchers import GoogleSheetFetcher, fetch_sheet


class FakeResponse:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._bad_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def source():
    return SheetSource(base_url="http://sheets.test/", sheet="Aug2025", timeout=5)


def fetcher_returning(monkeypatch, source, *responses):
    fetcher = GoogleSheetFetcher(source)
    calls = []
    queue = list(responses)

    def request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(fetcher.session, "request", request)
    return fetcher, calls


def test_requests_the_configured_sheet(monkeypatch, source):
    fetcher, calls = fetcher_returning(monkeypatch, source, FakeResponse(payload={"success": True, "data": []}))
    assert fetcher.fetch() == []
    method, url, kwargs = calls[0]
    assert method == "GET"
    assert url == "http://sheets.test/google-sheet"
    assert kwargs["params"] == {"sheet": "Aug2025"}
    assert kwargs["timeout"] == 5


def test_returns_rows_as_text(monkeypatch, source):
    payload = {"success": True, "data": [
        {"Location": "Ghansoli", "Rent": 8500, "Notes": None},
        "garbage",
        {"Location": "Vashi"},
    ]}
    fetcher, _ = fetcher_returning(monkeypatch, source, FakeResponse(payload=payload))
    assert fetcher.fetch() == [
        {"Location": "Ghansoli", "Rent": "8500"},
        {"Location": "Vashi"},
    ]


def test_success_false_is_no_data(monkeypatch, source, caplog):
    fetcher, _ = fetcher_returning(monkeypatch, source, FakeResponse(payload={"success": False, "data": [{}]}))
    with caplog.at_level(logging.WARNING):
        assert fetcher.fetch() is None
    assert "success=false" in caplog.text


def test_non_list_data_is_no_data(monkeypatch, source):
    fetcher, _ = fetcher_returning(monkeypatch, source, FakeResponse(payload={"success": True, "data": {}}))
    assert fetcher.fetch() is None


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=500),
    FakeResponse(status_code=404),
    FakeResponse(bad_json=True),
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.Timeout("slow"),
])
def test_failures_are_soft(monkeypatch, source, caplog, response):
    fetcher, _ = fetcher_returning(monkeypatch, source, response)
    with caplog.at_level(logging.ERROR):
        assert fetcher.fetch() is None
    assert "[google-sheet]" in caplog.text


def test_rate_limit_waits_and_retries_once(monkeypatch, source):
    sleeps = []
    monkeypatch.setattr(fetchers.time, "sleep", sleeps.append)
    fetcher, calls = fetcher_returning(
        monkeypatch, source,
        FakeResponse(status_code=429),
        FakeResponse(payload={"success": True, "data": [{"Location": "Nerul ( W )"}]}),
    )
    assert fetcher.fetch() == [{"Location": "Nerul ( W )"}]
    assert sleeps == [60]
    assert len(calls) == 2


def test_fetch_sheet_closes_session(monkeypatch, source):
    closed = []

    def fake_fetch(self):
        return [{"Location": "Ghansoli"}]

    monkeypatch.setattr(GoogleSheetFetcher, "fetch", fake_fetch)
    monkeypatch.setattr(GoogleSheetFetcher, "close", lambda self: closed.append(True))
    assert fetch_sheet(source) == [{"Location": "Ghansoli"}]
    assert closed == [True]


def test_fetch_sheet_logs_unexpected_errors(monkeypatch, source, caplog):
    def boom(self):
        raise RuntimeError("kaput")

    monkeypatch.setattr(GoogleSheetFetcher, "fetch", boom)
    with caplog.at_level(logging.ERROR):
        assert fetch_sheet(source) is None
    assert "kaput" in caplog.text


def test_endpoint_strips_trailing_slash():
    assert SheetSource(base_url="http://x:3000/").endpoint == "http://x:3000/google-sheet"
