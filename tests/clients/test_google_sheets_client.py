import json
import types

import pytest


class _FakeRequest:
    def __init__(self, body=None, error=None):
        self._body = body
        self._error = error

    def execute(self):
        if self._error is not None:
            raise self._error
        return self._body


class _FakeService:
    def __init__(self):
        self.body = {}
        self.error = None
        self.batch_calls = []

    def spreadsheets(self):
        return self

    def values(self):
        return self

    def batchGet(self, **kwargs):
        self.batch_calls.append(kwargs)
        return _FakeRequest(self.body, self.error)


@pytest.fixture
def fake_google(monkeypatch):
    import app.clients.google_sheets as mod

    service = _FakeService()
    captured = {}

    def fake_build(api, version, credentials=None, cache_discovery=True):
        captured["build"] = (api, version, credentials, cache_discovery)
        return service

    def from_info(info, scopes=None):
        captured["info"] = (info, scopes)
        return "creds-from-info"

    def from_file(path, scopes=None):
        captured["file"] = (path, scopes)
        return "creds-from-file"

    monkeypatch.setattr(mod, "build", fake_build)
    monkeypatch.setattr(
        mod.service_account,
        "Credentials",
        types.SimpleNamespace(
            from_service_account_info=from_info,
            from_service_account_file=from_file,
        ),
    )
    return types.SimpleNamespace(service=service, captured=captured)


def test_init_from_json_credentials(fake_google):
    from app.clients import GoogleSheetsClient

    GoogleSheetsClient(credentials_json=json.dumps({"type": "service_account"}), scopes=["s"])
    assert fake_google.captured["info"] == ({"type": "service_account"}, ["s"])
    assert fake_google.captured["build"] == ("sheets", "v4", "creds-from-info", False)


def test_init_from_credentials_file(fake_google):
    from app.clients import GoogleSheetsClient

    GoogleSheetsClient(credentials_file="/tmp/sa.json", scopes=["s"])
    assert fake_google.captured["file"] == ("/tmp/sa.json", ["s"])


def test_missing_credentials_raise(fake_google, monkeypatch):
    from app.clients import GoogleSheetsClient
    from app.core.config import settings

    monkeypatch.setattr(settings.google, "credentials_file", None)
    monkeypatch.setattr(settings.google, "credentials_json", None)
    with pytest.raises(ValueError):
        GoogleSheetsClient()


def test_batch_get_values_returns_ordered_pairs(fake_google):
    from app.clients import GoogleSheetsClient

    client = GoogleSheetsClient(credentials_file="/tmp/sa.json")
    fake_google.service.body = {
        "spreadsheetId": "sid",
        "valueRanges": [
            {"range": "'Sheet1'!A2:A13", "majorDimension": "ROWS", "values": [["a"], ["b"]]},
            {"range": "'Sheet1'!C1", "majorDimension": "ROWS"},
        ],
    }
    pairs = client.batch_get_values("sid", ["A2:A13", "C1"])
    assert pairs == [("'Sheet1'!A2:A13", [["a"], ["b"]]), ("'Sheet1'!C1", [])]
    call = fake_google.service.batch_calls[0]
    assert call["spreadsheetId"] == "sid"
    assert call["ranges"] == ["A2:A13", "C1"]
    assert call["valueRenderOption"] == "FORMATTED_VALUE"


def test_batch_get_values_wraps_http_error(fake_google):
    from googleapiclient.errors import HttpError
    from app.clients import GoogleSheetsClient

    client = GoogleSheetsClient(credentials_file="/tmp/sa.json")
    resp = types.SimpleNamespace(status=403, reason="Forbidden")
    fake_google.service.error = HttpError(resp, b'{"error": {"message": "denied"}}')
    with pytest.raises(RuntimeError):
        client.batch_get_values("sid", ["A2:A13"])


def test_unreadable_credentials_file_raises_value_error(fake_google, monkeypatch):
    import app.clients.google_sheets as mod
    from app.clients import GoogleSheetsClient

    def missing_file(path, scopes=None):
        raise FileNotFoundError(2, "No such file or directory", path)

    monkeypatch.setattr(
        mod.service_account,
        "Credentials",
        types.SimpleNamespace(from_service_account_file=missing_file),
    )
    with pytest.raises(ValueError):
        GoogleSheetsClient(credentials_file="/nonexistent/sa.json")
