"""Tests for core HTTP client behavior."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

import httpx
import pytest

from modzyctl.core import client as client_module
from modzyctl.core.client import ModzyClient
from modzyctl.core.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    InvalidURLError,
    PermissionDeniedError,
    ResourceNotFoundError,
    RetryExhaustedError,
    ServerUnreachableError,
)


def _make_response(status_code: int, method: str = "GET", json: object | None = None) -> httpx.Response:
    req = httpx.Request(method, "https://modzy.example.com/api/jobs")
    return httpx.Response(status_code, request=req, json=json if json is not None else {"ok": True})


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client_module.time, "sleep", lambda _: None)


def _client(monkeypatch: pytest.MonkeyPatch, *responses: object, max_retries: int = 3) -> tuple[ModzyClient, MagicMock]:
    client = ModzyClient(base_url="https://modzy.example.com/api/", api_key="key.secret", max_retries=max_retries)
    mock_httpx = MagicMock()
    mock_httpx.request = MagicMock(side_effect=list(responses))
    monkeypatch.setattr(client, "_get_client", MagicMock(return_value=mock_httpx))
    return client, mock_httpx


class TestClientInit:
    """Tests for construction and headers."""

    def test_base_url_normalized(self):
        client = ModzyClient(base_url="https://modzy.example.com/api/", api_key="k.s")
        assert client.base_url == "https://modzy.example.com/api"

    def test_api_key_header(self):
        client = ModzyClient(base_url="https://modzy.example.com/api", api_key="k.s")
        assert client.headers == {"Authorization": "ApiKey k.s"}

    def test_missing_api_key_raises(self):
        with pytest.raises(ConfigurationError):
            ModzyClient(base_url="https://modzy.example.com/api")

    def test_invalid_url_raises(self):
        with pytest.raises(InvalidURLError):
            ModzyClient(base_url="ftp://modzy.example.com", api_key="k.s")

    def test_context_manager_closes(self):
        client = ModzyClient(base_url="https://modzy.example.com/api", api_key="k.s")
        inner = MagicMock()
        client._client = inner

        with client:
            pass

        inner.close.assert_called_once()
        assert client._client is None

    def test_shared_client_built_once_across_threads(self, monkeypatch):
        client = ModzyClient(base_url="https://modzy.example.com/api", api_key="k.s")
        built: list[MagicMock] = []

        def slow_factory(**kwargs):
            threading.Event().wait(0.01)
            inner = MagicMock()
            built.append(inner)
            return inner

        monkeypatch.setattr(client_module.httpx, "Client", slow_factory)
        barrier = threading.Barrier(8)
        seen: list[object] = []

        def worker():
            barrier.wait()
            seen.append(client._get_client())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(built) == 1
        assert all(c is built[0] for c in seen)


class TestStatusMapping:
    """Error responses map onto typed exceptions."""

    @pytest.mark.parametrize(
        "status,exc_type",
        [
            (401, AuthenticationError),
            (403, PermissionDeniedError),
            (404, ResourceNotFoundError),
            (400, ApiError),
            (500, ApiError),
        ],
    )
    def test_error_status(self, monkeypatch, status, exc_type):
        client, _ = _client(monkeypatch, _make_response(status, "POST"))

        with pytest.raises(exc_type) as exc_info:
            client.post("/jobs", json={})

        assert exc_info.value.status_code == status

    def test_error_message_from_body(self, monkeypatch):
        resp = _make_response(400, "POST", json={"message": "model version not deployed"})
        client, _ = _client(monkeypatch, resp)

        with pytest.raises(ApiError) as exc_info:
            client.post("/jobs", json={})

        assert "model version not deployed" in str(exc_info.value)

    def test_success_returns_response(self, monkeypatch):
        client, mock_httpx = _client(monkeypatch, _make_response(200))

        resp = client.get("/jobs/features")

        assert resp.status_code == 200
        assert mock_httpx.request.call_args[0] == ("GET", "/jobs/features")


class TestRetries:
    """Only idempotent requests are retried."""

    def test_post_not_retried_on_503(self, monkeypatch):
        client, mock_httpx = _client(monkeypatch, _make_response(503, "POST"), _make_response(200, "POST"))

        with pytest.raises(ApiError) as exc_info:
            client.post("/jobs/j1/input/a.txt", files={"input": ("a.txt", b"x", "application/octet-stream")})

        assert exc_info.value.status_code == 503
        assert mock_httpx.request.call_count == 1

    def test_post_connect_error_not_retried(self, monkeypatch):
        client, mock_httpx = _client(monkeypatch, httpx.ConnectError("refused"), _make_response(200, "POST"))

        with pytest.raises(ServerUnreachableError) as exc_info:
            client.post("/jobs", json={})

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert mock_httpx.request.call_count == 1

    def test_get_retried_on_503(self, monkeypatch):
        client, mock_httpx = _client(monkeypatch, _make_response(503), _make_response(200))

        resp = client.get("/jobs/features")

        assert resp.status_code == 200
        assert mock_httpx.request.call_count == 2

    def test_get_retry_exhausted(self, monkeypatch):
        client, mock_httpx = _client(
            monkeypatch,
            httpx.ConnectError("refused"),
            httpx.ConnectError("refused"),
            max_retries=1,
        )

        with pytest.raises(RetryExhaustedError) as exc_info:
            client.get("/jobs/features")

        assert exc_info.value.attempts == 2
        assert mock_httpx.request.call_count == 2

    def test_delete_not_retried_on_404(self, monkeypatch):
        client, mock_httpx = _client(monkeypatch, _make_response(404, "DELETE"))

        with pytest.raises(ResourceNotFoundError):
            client.delete("/jobs/j1")

        assert mock_httpx.request.call_count == 1

    def test_timeout_override_passed(self, monkeypatch):
        client, mock_httpx = _client(monkeypatch, _make_response(200, "POST"))

        client.post("/jobs/j1/close", json={}, timeout=300)

        assert mock_httpx.request.call_args.kwargs["timeout"] == 300
