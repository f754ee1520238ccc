import base64
import json

import pytest
import requests

from review_app.core.errors import PersistenceError
from review_app.core.github_client import GitHubContentsAPI, GitHubGateway
from review_app.core.service import ReviewService


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = json.dumps(self._payload)

    def json(self):
        return self._payload


class FakeSession:
    """Minimal in-memory stand-in for the contents endpoint."""

    def __init__(self):
        self.files = {}
        self.puts = []
        self.fail_with = None

    def get(self, url, headers=None, params=None, timeout=None):
        if self.fail_with:
            raise self.fail_with
        path = url.split("/contents/", 1)[1]
        if path not in self.files:
            return FakeResponse(404, {"message": "Not Found"})
        content, sha = self.files[path]
        encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
        return FakeResponse(200, {"type": "file", "content": encoded, "sha": sha})

    def put(self, url, headers=None, json=None, timeout=None):
        path = url.split("/contents/", 1)[1]
        self.puts.append((path, json))
        if path in self.files and json.get("sha") != self.files[path][1]:
            return FakeResponse(409, {"message": "sha mismatch"})
        content = base64.b64decode(json["content"]).decode("utf-8")
        sha = f"sha{len(self.puts)}"
        self.files[path] = (content, sha)
        return FakeResponse(201, {"content": {"sha": sha}})


def _gateway(session, token="tkn"):
    api = GitHubContentsAPI("studio", "reviews", token, branch="data", session=session)
    return GitHubGateway(api, data_dir="data")


def test_missing_file_loads_as_none():
    assert _gateway(FakeSession()).load("games") is None


def test_save_then_load_round_trip():
    session = FakeSession()
    gw = _gateway(session)
    assert gw.save("games", [{"id": "1", "name": "Star Drift"}]) is True
    assert gw.save("games", [{"id": "1", "name": "Renamed"}]) is True
    assert gw.load("games") == [{"id": "1", "name": "Renamed"}]

    first, second = session.puts
    assert first[0] == "data/games.json"
    assert "sha" not in first[1]
    assert second[1]["sha"] == "sha1"
    assert second[1]["branch"] == "data"
    assert second[1]["message"] == "Update games data"


def test_missing_token_fails_save_and_load():
    gw = _gateway(FakeSession(), token=None)
    assert gw.save("members", []) is False
    with pytest.raises(PersistenceError) as excinfo:
        gw.load("members")
    assert excinfo.value.collection == "members"


def test_network_error_becomes_persistence_error():
    session = FakeSession()
    session.fail_with = requests.ConnectionError("offline")
    gw = _gateway(session)
    with pytest.raises(PersistenceError):
        gw.load("games")
    assert gw.save("games", []) is False


def test_unreadable_json_is_reported():
    session = FakeSession()
    session.files["data/games.json"] = ("{not json", "abc")
    with pytest.raises(PersistenceError):
        _gateway(session).load("games")


class TextResponse:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text

    def json(self):
        return json.loads(self.text)


class StaticSession:
    """Answers every GET with the same response."""

    def __init__(self, response):
        self.response = response

    def get(self, url, headers=None, params=None, timeout=None):
        return self.response


def test_html_body_becomes_persistence_error():
    gw = _gateway(StaticSession(TextResponse(200, "<html>proxy login</html>")))
    with pytest.raises(PersistenceError) as excinfo:
        gw.load("games")
    assert excinfo.value.collection == "games"
    assert ReviewService(gw).load() is False


def test_directory_listing_becomes_persistence_error():
    gw = _gateway(StaticSession(FakeResponse(200, [{"type": "file", "name": "games.json"}])))
    with pytest.raises(PersistenceError):
        gw.load("games")
    assert gw.save("games", []) is False
