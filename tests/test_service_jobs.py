"""Unit tests for JobService."""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from modzyctl.core.exceptions import InvalidIdentifierError, JobTimeoutError, ValidationError
from modzyctl.models.job import JobStatus
from modzyctl.services.jobs import JobService, encode_data_url, path_to_data_url


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock ModzyClient."""
    client = MagicMock()
    client.base_url = "https://app.modzy.com/api"
    return client


@pytest.fixture
def service(mock_client: MagicMock) -> JobService:
    """Create JobService with mock client."""
    return JobService(mock_client)


def _resp(json_data: object, content_type: str = "application/json") -> MagicMock:
    """Build a mock httpx.Response."""
    resp = MagicMock(spec=httpx.Response)
    resp.json.return_value = json_data
    resp.text = str(json_data)
    resp.headers = {"content-type": content_type}
    return resp


def _job(status: str = "SUBMITTED", **extra: object) -> dict:
    return {"jobIdentifier": "j-1", "status": status, **extra}


class TestDataUrls:
    """Tests for data URL helpers."""

    def test_encode_data_url(self):
        assert encode_data_url(b"hi", "text/plain") == "data:text/plain;base64,aGk="

    def test_path_to_data_url_guesses_type(self, temp_dir: Path):
        f = temp_dir / "note.txt"
        f.write_bytes(b"hello")

        url = path_to_data_url(f)

        assert url.startswith("data:text/plain;base64,")
        assert base64.b64decode(url.split(",", 1)[1]) == b"hello"

    def test_path_to_data_url_unknown_type(self, temp_dir: Path):
        f = temp_dir / "blob.unknownext"
        f.write_bytes(b"\x00")
        assert path_to_data_url(f).startswith("data:application/octet-stream;base64,")


class TestSubmit:
    """Tests for single-request submissions."""

    def test_submit_text(self, service, mock_client):
        mock_client.post.return_value = _resp(_job())

        job = service.submit_text("ed542963de", "1.0.1", {"input.txt": {"review": "great"}})

        assert job.job_identifier == "j-1"
        path = mock_client.post.call_args[0][0]
        body = mock_client.post.call_args.kwargs["json"]
        assert path == "/jobs"
        assert body["model"] == {"identifier": "ed542963de", "version": "1.0.1"}
        assert body["explain"] is False
        assert body["input"] == {"type": "text", "sources": {"input.txt": {"review": "great"}}}

    def test_submit_text_requires_sources(self, service, mock_client):
        with pytest.raises(ValidationError):
            service.submit_text("m", "1.0", {})
        mock_client.post.assert_not_called()

    def test_submit_text_invalid_model(self, service):
        with pytest.raises(InvalidIdentifierError):
            service.submit_text("bad/model", "1.0", {"a": {"b": "c"}})

    def test_submit_embedded_encodes_bytes(self, service, mock_client):
        mock_client.post.return_value = _resp(_job())

        service.submit_embedded("m", "1.0", {"image": {"cat": b"\x89PNG"}}, media_type="image/png")

        body = mock_client.post.call_args.kwargs["json"]
        assert body["input"]["type"] == "embedded"
        assert body["input"]["sources"]["image"]["cat"] == encode_data_url(b"\x89PNG", "image/png")

    def test_submit_embedded_keeps_data_urls(self, service, mock_client):
        mock_client.post.return_value = _resp(_job())
        url = "data:text/plain;base64,aGk="

        service.submit_embedded("m", "1.0", {"input": {"a": url}})

        assert mock_client.post.call_args.kwargs["json"]["input"]["sources"]["input"]["a"] == url

    def test_submit_embedded_rejects_plain_string(self, service):
        with pytest.raises(ValidationError):
            service.submit_embedded("m", "1.0", {"input": {"a": "just text"}})

    def test_submit_aws_s3(self, service, mock_client):
        mock_client.post.return_value = _resp(_job())

        service.submit_aws_s3(
            "m",
            "1.0",
            "AKIA",
            "secret",
            "us-east-1",
            {"input": {"item": {"bucket": "b", "key": "k/a.jpg"}}},
        )

        payload = mock_client.post.call_args.kwargs["json"]["input"]
        assert payload["type"] == "aws-s3"
        assert payload["accessKeyID"] == "AKIA"
        assert payload["secretAccessKey"] == "secret"
        assert payload["region"] == "us-east-1"
        assert payload["sources"] == {"input": {"item": {"bucket": "b", "key": "k/a.jpg"}}}

    def test_submit_jdbc(self, service, mock_client):
        mock_client.post.return_value = _resp(_job())

        service.submit_jdbc(
            "m", "1.0", "jdbc:postgresql://db:5432/x", "u", "p", "org.postgresql.Driver", "select 1"
        )

        payload = mock_client.post.call_args.kwargs["json"]["input"]
        assert payload == {
            "type": "jdbc",
            "url": "jdbc:postgresql://db:5432/x",
            "username": "u",
            "password": "p",
            "driver": "org.postgresql.Driver",
            "query": "select 1",
        }


class TestLifecycle:
    """Tests for open, close and cancel."""

    def test_open_job(self, service, mock_client):
        mock_client.post.return_value = _resp({"jobIdentifier": "j-1"})

        job = service.open_job("m", "1.0", explain=True)

        assert job.status == JobStatus.OPEN.value
        body = mock_client.post.call_args.kwargs["json"]
        assert "input" not in body
        assert body["explain"] is True

    def test_close_job(self, service, mock_client):
        mock_client.post.return_value = _resp(_job())

        data = service.close_job("j-1")

        assert data["status"] == "SUBMITTED"
        assert mock_client.post.call_args[0][0] == "/jobs/j-1/close"
        assert mock_client.post.call_args.kwargs["json"] == {}

    def test_close_job_text_body(self, service, mock_client):
        mock_client.post.return_value = _resp("", content_type="text/plain")
        assert service.close_job("j-1") == {}

    def test_cancel_job(self, service, mock_client):
        mock_client.delete.return_value = _resp(_job("CANCELED"))

        data = service.cancel_job("j-1")

        assert data["status"] == "CANCELED"
        assert mock_client.delete.call_args[0][0] == "/jobs/j-1"

    def test_cancel_job_empty_body(self, service, mock_client):
        mock_client.delete.return_value = _resp(None, content_type="")
        assert service.cancel_job("j-1") == {}


class TestStatus:
    """Tests for status and waiting."""

    def test_get_job(self, service, mock_client):
        mock_client.get.return_value = _resp(
            _job("IN_PROGRESS", model={"identifier": "m", "version": "1.0"}, total=3, completed=1)
        )

        job = service.get_job("j-1")

        assert job.status == "IN_PROGRESS"
        assert job.model.identifier == "m"
        assert not job.is_terminal
        assert job.to_row()["version"] == "1.0"

    def test_wait_until_terminal(self, service, mock_client):
        mock_client.get.side_effect = [
            _resp(_job("SUBMITTED")),
            _resp(_job("IN_PROGRESS")),
            _resp(_job("COMPLETED")),
        ]
        seen: list[str] = []

        with patch("modzyctl.services.jobs.time.sleep") as sleep:
            job = service.wait("j-1", poll_interval=0.5, progress_callback=lambda j: seen.append(j.status))

        assert job.status == "COMPLETED"
        assert seen == ["SUBMITTED", "IN_PROGRESS", "COMPLETED"]
        assert sleep.call_count == 2

    def test_wait_timeout(self, service, mock_client):
        mock_client.get.return_value = _resp(_job("IN_PROGRESS"))

        with patch("modzyctl.services.jobs.time.sleep"):
            with patch("modzyctl.services.jobs.time.time", side_effect=[0, 5, 11]):
                with pytest.raises(JobTimeoutError) as exc_info:
                    service.wait("j-1", timeout=10, poll_interval=1)

        assert exc_info.value.last_status == "IN_PROGRESS"

    def test_wait_invalid_timeout(self, service):
        with pytest.raises(ValidationError):
            service.wait("j-1", timeout=0)


class TestHistory:
    """Tests for history and engines."""

    def test_history_defaults(self, service, mock_client):
        mock_client.get.return_value = _resp([_job("COMPLETED")])

        jobs = service.get_history(status="COMPLETED")

        assert len(jobs) == 1
        path = mock_client.get.call_args[0][0]
        params = mock_client.get.call_args.kwargs["params"]
        assert path == "/jobs/history"
        assert params["status"] == "COMPLETED"
        assert params["per-page"] == 100
        assert "user" not in params
        start = datetime.fromisoformat(params["startDate"].replace("Z", "+00:00"))
        assert abs((datetime.now(timezone.utc) - start) - timedelta(days=30)) < timedelta(minutes=1)

    def test_history_explicit_start(self, service, mock_client):
        mock_client.get.return_value = _resp([])

        service.get_history(start_date="2024-01-01T00:00:00.000Z")

        assert mock_client.get.call_args.kwargs["params"]["startDate"] == "2024-01-01T00:00:00.000Z"

    def test_processing_engines(self, service, mock_client):
        mock_client.get.return_value = _resp(
            [{"identifier": "m", "version": "1.0", "ready": 1, "spinningUp": 2}]
        )

        engines = service.get_processing_engines()

        assert engines[0].spinning_up == 2
        assert mock_client.get.call_args[0][0] == "/resources/processing/engines"
