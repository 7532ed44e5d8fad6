import http.client
import io
import json
import urllib.error

import pytest

from relman.core.errors import GitHubError, NotFoundError
from relman.core.github_client import GitHubClient


class FakeResponse:
    def __init__(self, payload):
        if isinstance(payload, bytes):
            self._body = payload
        else:
            self._body = json.dumps(payload).encode("utf-8") if payload is not None else b""

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeUrlopen:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return FakeResponse(result)


def _http_error(code, message):
    body = io.BytesIO(json.dumps({"message": message}).encode("utf-8"))
    return urllib.error.HTTPError("https://api.github.com/x", code, message, {}, body)


def test_search_repositories_pages_until_total_count(monkeypatch):
    fake = FakeUrlopen(
        [
            {"total_count": 3, "items": [{"name": "a"}, {"name": "b"}]},
            {"total_count": 3, "items": [{"name": "c"}]},
        ]
    )
    monkeypatch.setattr("urllib.request.urlopen", fake)

    names = [r["name"] for r in GitHubClient(token="t").search_repositories("moxionio", "managed-release", "private")]

    assert names == ["a", "b", "c"]
    assert "topic%3Amanaged-release" in fake.requests[0].full_url
    assert "is%3Aprivate" in fake.requests[0].full_url
    assert fake.requests[0].get_header("Authorization") == "Bearer t"


def test_create_pull_request_posts_json(monkeypatch):
    fake = FakeUrlopen([{"number": 12}])
    monkeypatch.setattr("urllib.request.urlopen", fake)

    GitHubClient().create_pull_request("moxionio/app-a", title="Production Release REL-42", head="stage", base="prod")

    req = fake.requests[0]
    assert req.get_method() == "POST"
    assert req.full_url.endswith("/repos/moxionio/app-a/pulls")
    assert json.loads(req.data) == {"title": "Production Release REL-42", "head": "stage", "base": "prod", "body": ""}


def test_merge_pull_request_uses_put(monkeypatch):
    fake = FakeUrlopen([{"merged": True}])
    monkeypatch.setattr("urllib.request.urlopen", fake)

    GitHubClient().merge_pull_request("moxionio/app-a", 3)

    assert fake.requests[0].get_method() == "PUT"
    assert fake.requests[0].full_url.endswith("/pulls/3/merge")


def test_http_error_is_wrapped_with_status(monkeypatch):
    monkeypatch.setattr("urllib.request.urlopen", FakeUrlopen([_http_error(422, "Validation Failed")]))

    with pytest.raises(GitHubError, match="Validation Failed") as excinfo:
        GitHubClient().add_labels("moxionio/app-a", 1, ["REL-42"])

    assert excinfo.value.status == 422


def test_missing_branch_raises_not_found(monkeypatch):
    monkeypatch.setattr("urllib.request.urlopen", FakeUrlopen([_http_error(404, "Branch not found")]))

    with pytest.raises(NotFoundError, match="prod"):
        GitHubClient().get_branch_sha("moxionio/app-a", "prod")


def test_get_branch_sha(monkeypatch):
    monkeypatch.setattr("urllib.request.urlopen", FakeUrlopen([{"commit": {"sha": "def456"}}]))

    assert GitHubClient().get_branch_sha("moxionio/app-a", "prod") == "def456"


@pytest.mark.parametrize(
    "failure",
    [TimeoutError("The read operation timed out"), http.client.RemoteDisconnected("Remote end closed connection")],
)
def test_socket_failures_are_wrapped(monkeypatch, failure):
    monkeypatch.setattr("urllib.request.urlopen", FakeUrlopen([failure]))

    with pytest.raises(GitHubError, match=type(failure).__name__) as excinfo:
        GitHubClient().get_branch_sha("moxionio/app-a", "prod")

    assert excinfo.value.status is None


def test_non_json_body_is_wrapped(monkeypatch):
    monkeypatch.setattr("urllib.request.urlopen", FakeUrlopen([b"<html>502 Bad Gateway</html>"]))

    with pytest.raises(GitHubError, match="JSONDecodeError"):
        GitHubClient().get_repository("moxionio/app-a")
