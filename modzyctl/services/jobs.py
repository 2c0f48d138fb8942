"""Job service for submitting, tracking and cancelling jobs.

Covers the single-request submission modes (text, embedded, AWS S3, JDBC)
and the open/close/cancel calls used by chunked file submission. Data URL
helpers for embedded inputs are available for direct import.
"""

from __future__ import annotations

import base64
import logging
import mimetypes
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional, Union

from modzyctl.core.exceptions import JobTimeoutError, ValidationError
from modzyctl.core.timeouts import DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_WAIT_TIMEOUT_SECONDS
from modzyctl.core.validation import validate_identifier, validate_timeout
from modzyctl.models.job import Job, JobStatus
from modzyctl.models.model import Engine

from .base import BaseService

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"
HISTORY_DEFAULT_DAYS = 30


# =============================================================================
# Data URL Helpers
# =============================================================================


def encode_data_url(data: bytes, media_type: str = DEFAULT_MEDIA_TYPE) -> str:
    """Encode bytes as a base64 data URL."""
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def path_to_data_url(path: Union[str, Path], media_type: Optional[str] = None) -> str:
    """Read a file and encode it as a base64 data URL.

    Args:
        path: File to embed.
        media_type: Media type; guessed from the file name when omitted.

    Returns:
        ``data:<media type>;base64,<content>`` string.
    """
    path = Path(path)
    if media_type is None:
        media_type = mimetypes.guess_type(path.name)[0] or DEFAULT_MEDIA_TYPE
    return encode_data_url(path.read_bytes(), media_type)


def _model_body(model_id: str, version: str, explain: bool) -> dict[str, Any]:
    return {
        "model": {
            "identifier": validate_identifier(model_id, "model"),
            "version": validate_identifier(version, "version"),
        },
        "explain": explain,
    }


def _check_sources(sources: Mapping[str, Mapping[str, Any]]) -> None:
    if not sources:
        raise ValidationError("At least one input is required", field="sources")
    for slot, items in sources.items():
        if not items:
            raise ValidationError(f"Input '{slot}' has no data items", field="sources")


# =============================================================================
# JobService
# =============================================================================


class JobService(BaseService):
    """Service for job operations."""

    # =========================================================================
    # Submission
    # =========================================================================

    def submit(self, body: dict[str, Any]) -> Job:
        """Submit a job request body as-is.

        Args:
            body: Request body with ``model``, ``explain`` and optional ``input``

        Returns:
            Job created by the server
        """
        data = self._post("/jobs", json=body)
        return Job.model_validate(data)

    def open_job(self, model_id: str, version: str, explain: bool = False) -> Job:
        """Create a job without inputs that accepts chunked uploads until closed.

        Returns:
            Job in OPEN state
        """
        data = self._post("/jobs", json=_model_body(model_id, version, explain))
        if isinstance(data, dict):
            data.setdefault("status", JobStatus.OPEN.value)
        job = Job.model_validate(data)
        logger.debug("Opened job %s for %s@%s", job.job_identifier, model_id, version)
        return job

    def submit_text(
        self,
        model_id: str,
        version: str,
        sources: Mapping[str, Mapping[str, str]],
        explain: bool = False,
    ) -> Job:
        """Submit a job with inline text inputs.

        Args:
            model_id: Model identifier
            version: Model version
            sources: Mapping of input key to {data item name: text}
            explain: Request explanations

        Returns:
            Submitted job
        """
        _check_sources(sources)
        body = _model_body(model_id, version, explain)
        body["input"] = {"type": "text", "sources": {k: dict(v) for k, v in sources.items()}}
        return self.submit(body)

    def submit_embedded(
        self,
        model_id: str,
        version: str,
        sources: Mapping[str, Mapping[str, Union[bytes, str]]],
        explain: bool = False,
        media_type: str = DEFAULT_MEDIA_TYPE,
    ) -> Job:
        """Submit a job with base64-embedded inputs.

        Byte values are encoded as data URLs with ``media_type``; string values
        are sent unchanged and must already be data URLs.

        Returns:
            Submitted job
        """
        _check_sources(sources)
        encoded: dict[str, dict[str, str]] = {}
        for slot, items in sources.items():
            encoded[slot] = {}
            for name, value in items.items():
                if isinstance(value, (bytes, bytearray)):
                    value = encode_data_url(bytes(value), media_type)
                elif not str(value).startswith("data:"):
                    raise ValidationError(
                        f"Embedded input {slot}/{name} must be bytes or a data URL",
                        field="sources",
                    )
                encoded[slot][name] = value

        body = _model_body(model_id, version, explain)
        body["input"] = {"type": "embedded", "sources": encoded}
        return self.submit(body)

    def submit_aws_s3(
        self,
        model_id: str,
        version: str,
        access_key_id: str,
        secret_access_key: str,
        region: str,
        sources: Mapping[str, Mapping[str, Mapping[str, str]]],
        explain: bool = False,
    ) -> Job:
        """Submit a job whose inputs are objects in AWS S3.

        Args:
            sources: Mapping of input key to {data item name: {"bucket", "key"}}

        Returns:
            Submitted job
        """
        _check_sources(sources)
        body = _model_body(model_id, version, explain)
        body["input"] = {
            "type": "aws-s3",
            "accessKeyID": access_key_id,
            "secretAccessKey": secret_access_key,
            "region": region,
            "sources": {k: {n: dict(o) for n, o in v.items()} for k, v in sources.items()},
        }
        return self.submit(body)

    def submit_jdbc(
        self,
        model_id: str,
        version: str,
        url: str,
        username: str,
        password: str,
        driver: str,
        query: str,
        explain: bool = False,
    ) -> Job:
        """Submit a job whose inputs are the rows of a JDBC query.

        The server runs the query and matches result columns against the
        model's input names.

        Returns:
            Submitted job
        """
        body = _model_body(model_id, version, explain)
        body["input"] = {
            "type": "jdbc",
            "url": url,
            "username": username,
            "password": password,
            "driver": driver,
            "query": query,
        }
        return self.submit(body)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close_job(self, job_id: str) -> dict[str, Any]:
        """Signal that all inputs of an open job were uploaded.

        Returns:
            Updated job data from the server (may be empty)
        """
        path = self._build_path("jobs", job_id, "close")
        data = self._post(path, json={})
        return data if isinstance(data, dict) else {}

    def cancel_job(self, job_id: str) -> dict[str, Any]:
        """Cancel a job.

        Returns:
            Updated job data from the server (may be empty)
        """
        data = self._delete(self._build_path("jobs", job_id))
        return data if isinstance(data, dict) else {}

    # =========================================================================
    # Status
    # =========================================================================

    def get_job(self, job_id: str) -> Job:
        """Get a job by identifier."""
        data = self._get(self._build_path("jobs", validate_identifier(job_id, "job")))
        return Job.model_validate(data)

    def wait(
        self,
        job_id: str,
        timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        progress_callback: Optional[Callable[[Job], None]] = None,
    ) -> Job:
        """Poll a job until it reaches a terminal status.

        Args:
            job_id: Job identifier
            timeout: Maximum wait time in seconds
            poll_interval: Seconds between status checks
            progress_callback: Called with the job on each poll

        Returns:
            Job in COMPLETED, CANCELED, TIMEDOUT or FAILED state

        Raises:
            JobTimeoutError: If the job is still running after ``timeout``
        """
        validate_timeout(timeout)
        validate_timeout(poll_interval)
        start_time = time.time()
        last_status: Optional[str] = None

        while True:
            job = self.get_job(job_id)
            last_status = job.status

            if progress_callback:
                progress_callback(job)

            if job.is_terminal:
                return job

            if time.time() - start_time > timeout:
                raise JobTimeoutError(job_id, timeout, last_status)

            time.sleep(poll_interval)

    def get_history(
        self,
        user: Optional[str] = None,
        access_key: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        model: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 100,
        direction: str = "DESC",
        sort_by: str = "createdAt",
    ) -> list[Job]:
        """Search job history.

        ``start_date`` defaults to 30 days ago.

        Returns:
            Matching jobs, newest first by default
        """
        if start_date is None:
            start = datetime.now(timezone.utc) - timedelta(days=HISTORY_DEFAULT_DAYS)
            start_date = start.isoformat(timespec="milliseconds").replace("+00:00", "Z")

        params = self._drop_none(
            {
                "user": user,
                "accessKey": access_key,
                "startDate": start_date,
                "endDate": end_date,
                "model": model,
                "status": status,
                "sort-by": sort_by,
                "direction": direction,
                "page": page,
                "per-page": per_page,
            }
        )
        data = self._get("/jobs/history", params=params)
        return [Job.model_validate(item) for item in data or []]

    def get_processing_engines(self) -> list[Engine]:
        """Get processing engine status for all deployed model versions."""
        data = self._get("/resources/processing/engines")
        return [Engine.model_validate(item) for item in data or []]
