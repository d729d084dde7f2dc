"""Tests for the requests-based portal client using a mocked session."""

from unittest.mock import MagicMock

import pytest
import requests

from portal_client import PortalClient


def _response(status_code=200, payload=None, text=""):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.content = b"x" if payload is not None or text else b""
    response.text = text
    if payload is not None:
        response.json.return_value = payload
    else:
        response.json.side_effect = ValueError("no json")
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error", response=response)
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return PortalClient("http://portal.local/", session=session)


class TestRequests:
    def test_sign_in_stores_token_for_later_calls(self, client, session):
        session.request.side_effect = [
            _response(payload={"access_token": "abc", "token_type": "bearer"}),
            _response(payload=[{"id": 1, "name": "DJ Alok"}]),
        ]
        token, error = client.sign_in("admin@agency.com", "secret123")
        assert error is None
        assert token["access_token"] == "abc"

        djs, error = client.list_djs(search="alok", genre=None)
        assert error is None
        assert djs == [{"id": 1, "name": "DJ Alok"}]

        login_call, list_call = session.request.call_args_list
        assert login_call.kwargs["url"] == "http://portal.local/api/v1/users/login"
        assert "Authorization" not in login_call.kwargs["headers"]
        assert list_call.kwargs["headers"]["Authorization"] == "Bearer abc"
        assert list_call.kwargs["params"] == {"search": "alok"}

    def test_http_error_uses_detail(self, client, session):
        session.request.return_value = _response(403, payload={"detail": "Insufficient permissions"})
        data, error = client.create_dj({"name": "X"})
        assert data is None
        assert error == {"status_code": 403, "message": "Insufficient permissions"}

    def test_http_error_without_json_uses_text(self, client, session):
        session.request.return_value = _response(502, text="Bad Gateway")
        events, error = client.list_events()
        assert events == []
        assert error == {"status_code": 502, "message": "Bad Gateway"}

    def test_connection_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")
        producers, error = client.list_producers()
        assert producers == []
        assert error["status_code"] is None
        assert "refused" in error["message"]

    def test_delete_event(self, client, session):
        session.request.return_value = _response(204)
        assert client.delete_event(5) == (True, None)
        assert session.request.call_args.kwargs["method"] == "DELETE"
        assert session.request.call_args.kwargs["url"].endswith("/api/v1/events/5")


class TestLoadAll:
    def test_failures_are_reported_per_collection(self, client, session):
        def fake_request(method, url, **kwargs):
            if url.endswith("/producers/"):
                return _response(403, payload={"detail": "Insufficient permissions"})
            if url.endswith("/contracts/"):
                raise requests.Timeout("timed out")
            return _response(payload=[{"id": 1}])

        session.request.side_effect = fake_request
        data, errors = client.load_all()
        assert data == {"djs": [{"id": 1}], "events": [{"id": 1}], "contracts": [], "producers": []}
        assert set(errors) == {"contracts", "producers"}
        assert errors["producers"]["status_code"] == 403

    def test_everything_loaded(self, client, session):
        session.request.return_value = _response(payload=[])
        data, errors = client.load_all()
        assert errors == {}
        assert set(data) == set(PortalClient.COLLECTIONS)
