"""File job submission with chunked input uploads.

A file job is opened without inputs, every data item is appended in chunks
no larger than the server's advertised limit, and the job is closed to start
processing. If anything fails after the job was opened, the job is cancelled
on a best-effort basis and the original error is re-raised.

Upload endpoint per data item::

    POST /jobs/{job}/{input key}/{data item}    (multipart, field "input")
"""

from __future__ import annotations

import io
import logging
import os
import time
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote

import pydantic

from modzyctl.core.exceptions import ValidationError
from modzyctl.core.logging import LogContext
from modzyctl.core.validation import (
    validate_chunk_size,
    validate_input_key,
    validate_path_exists,
)
from modzyctl.models.job import Job, JobStatus
from modzyctl.models.progress import SubmissionPhase, UploadProgress, UploadSummary
from modzyctl.uploaders.chunks import ChunkInput, ChunkSource, is_in_memory, source_name
from modzyctl.uploaders.constants import CHUNK_CONTENT_TYPE, CHUNK_FORM_FIELD, DEFAULT_TIMEOUT

from .base import BaseService
from .features import FeatureService
from .jobs import JobService

if TYPE_CHECKING:
    from modzyctl.core.client import ModzyClient

logger = logging.getLogger(__name__)

FileSources = Mapping[str, Mapping[str, ChunkInput]]
ProgressCallback = Callable[[UploadProgress], None]


def validate_file_sources(sources: FileSources) -> None:
    """Check input keys and values before any job is created.

    Raises:
        ValidationError: If there are no inputs, a key is invalid, or a value
            is neither bytes, an existing file, nor a binary file object.
        PathValidationError: If a path value does not exist.
    """
    if not sources:
        raise ValidationError("At least one input is required", field="sources")

    for slot, items in sources.items():
        validate_input_key(slot)
        if not items:
            raise ValidationError(f"Input '{slot}' has no data items", field="sources")
        for item, value in items.items():
            validate_input_key(item)
            if isinstance(value, io.TextIOBase):
                raise ValidationError(
                    f"Input {slot}/{item} is a text-mode file; open it in binary mode ('rb')",
                    field="sources",
                    value=source_name(value),
                )
            if is_in_memory(value) or hasattr(value, "read"):
                continue
            if isinstance(value, (str, os.PathLike)):
                validate_path_exists(value, must_be_file=True)
                continue
            raise ValidationError(
                f"Input {slot}/{item} must be bytes, a file path or a binary file object",
                field="sources",
                value=type(value).__name__,
            )


class FileJobService(BaseService):
    """Service for submitting jobs with chunk-uploaded file inputs."""

    def __init__(
        self,
        client: "ModzyClient",
        jobs: Optional[JobService] = None,
        features: Optional[FeatureService] = None,
        chunk_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize service.

        Args:
            client: Configured ModzyClient instance
            jobs: Job service used to open, close and cancel jobs
            features: Feature service used to negotiate the chunk size
            chunk_timeout: HTTP timeout for each chunk request
        """
        super().__init__(client)
        self.jobs = jobs or JobService(client)
        self.features = features or FeatureService(client)
        self.chunk_timeout = chunk_timeout

    # =========================================================================
    # Submission
    # =========================================================================

    def submit_files(
        self,
        model_id: str,
        version: str,
        sources: FileSources,
        explain: bool = False,
        *,
        upload_empty_items: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Job:
        """Submit a job whose inputs are uploaded in chunks.

        Args:
            model_id: Model identifier
            version: Model version
            sources: Mapping of input key to {data item name: bytes, path or
                binary file object}; uploaded in mapping order
            explain: Request explanations
            upload_empty_items: Send one empty chunk for zero-length items
                instead of skipping them
            progress_callback: Called after every accepted chunk

        Returns:
            Closed job carrying the identifier assigned when it was opened

        Raises:
            ValidationError: If the sources are invalid (no job is created)
            ModzyError: The first failure while opening, uploading or closing
        """
        validate_file_sources(sources)

        logger.debug("File job %s@%s: %s", model_id, version, SubmissionPhase.OPENING.value)
        job = self.jobs.open_job(model_id, version, explain)
        job_id = job.job_identifier

        phase = SubmissionPhase.UPLOADING
        try:
            with LogContext("file job submission", logger, job=job_id, model=model_id) as ctx:
                logger.debug("Job %s: %s", job_id, phase.value)
                max_chunk_size = self.features.get_upload_chunk_limit()
                summary = self.upload_inputs(
                    job,
                    sources,
                    max_chunk_size,
                    upload_empty_items=upload_empty_items,
                    progress_callback=progress_callback,
                )
                ctx.info(
                    "uploaded %d items in %d chunks (%.2f MB, %.2f MB/s)",
                    summary.items,
                    summary.chunks,
                    summary.total_mb,
                    summary.throughput_mbps,
                )
                if summary.skipped_items:
                    ctx.warning("skipped empty items: %s", ", ".join(summary.skipped_items))

                phase = SubmissionPhase.CLOSING
                logger.debug("Job %s: %s", job_id, phase.value)
                closed = self.jobs.close_job(job_id)
        except BaseException:
            logger.debug(
                "Job %s: %s after failure while %s",
                job_id,
                SubmissionPhase.ABORTING.value,
                phase.value,
            )
            self._cancel_quietly(job_id)
            raise

        logger.debug("Job %s: %s", job_id, SubmissionPhase.DONE.value)
        return _merge_closed(job, closed)

    def _cancel_quietly(self, job_id: str) -> None:
        """Cancel a job, logging and discarding any error."""
        try:
            self.jobs.cancel_job(job_id)
            logger.info("Cancelled job %s", job_id)
        except Exception as e:
            logger.warning("Could not cancel job %s: %s", job_id, e)

    # =========================================================================
    # Uploads
    # =========================================================================

    def upload_inputs(
        self,
        job: Job,
        inputs: FileSources,
        max_chunk_size: int,
        *,
        upload_empty_items: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> UploadSummary:
        """Upload every data item of every input to an open job, in order.

        Chunks are sent one at a time and each must be accepted before the
        next is read. The first failure stops all remaining uploads.

        Args:
            job: Open job
            inputs: Mapping of input key to {data item name: source}
            max_chunk_size: Maximum chunk size in bytes
            upload_empty_items: Send one empty chunk for zero-length items
            progress_callback: Called after every accepted chunk

        Returns:
            Upload summary

        Raises:
            ModzyError: If a chunk request or a read fails
        """
        validate_chunk_size(max_chunk_size)
        summary = UploadSummary(job_id=job.job_identifier, chunk_size=max_chunk_size)
        start = time.time()

        for slot, items in inputs.items():
            for item, value in items.items():
                chunks, sent = self._upload_item(
                    job.job_identifier,
                    slot,
                    item,
                    value,
                    max_chunk_size,
                    upload_empty_items=upload_empty_items,
                    bytes_before=summary.bytes_sent,
                    progress_callback=progress_callback,
                )
                summary.items += 1
                summary.chunks += chunks
                summary.bytes_sent += sent
                if chunks == 0:
                    summary.skipped_items.append(f"{slot}/{item}")

        summary.duration = time.time() - start
        return summary

    def _upload_item(
        self,
        job_id: str,
        slot: str,
        item: str,
        value: ChunkInput,
        max_chunk_size: int,
        *,
        upload_empty_items: bool,
        bytes_before: int,
        progress_callback: Optional[ProgressCallback],
    ) -> tuple[int, int]:
        """Upload one data item; returns (chunks sent, bytes sent)."""
        chunks = 0
        sent = 0

        with ChunkSource(value, max_chunk_size) as source:
            logger.debug(
                "Uploading %s/%s to job %s (%s bytes, %s chunks)",
                slot,
                item,
                job_id,
                source.total_size,
                source.chunk_count,
            )
            for chunk in source:
                self.upload_chunk(job_id, slot, item, chunk)
                chunks += 1
                sent += len(chunk)
                if progress_callback:
                    progress_callback(
                        UploadProgress(
                            job_id=job_id,
                            slot=slot,
                            item=item,
                            chunk_index=chunks - 1,
                            chunk_bytes=len(chunk),
                            item_bytes_sent=sent,
                            item_total_bytes=source.total_size,
                            bytes_sent=bytes_before + sent,
                        )
                    )

        if chunks == 0:
            if upload_empty_items:
                self.upload_chunk(job_id, slot, item, b"")
                return 1, 0
            logger.debug("Skipping empty data item %s/%s", slot, item)

        return chunks, sent

    def upload_chunk(self, job_id: str, slot: str, item: str, chunk: bytes) -> None:
        """Append one chunk to a data item of an open job.

        Raises:
            ApiError: If the server rejects the chunk
            ConnectionError: If the request fails in transit
        """
        path = self._build_path("jobs", job_id, quote(slot, safe=""), quote(item, safe=""))
        self.client.post(
            path,
            files={CHUNK_FORM_FIELD: (item, chunk, CHUNK_CONTENT_TYPE)},
            timeout=self.chunk_timeout,
        )


def _merge_closed(job: Job, closed: Mapping[str, Any]) -> Job:
    """Job returned by a successful close, keeping the opened identifier.

    The close has already been accepted at this point, so a close body that
    does not fit the ``Job`` model never turns the submission into a failure.
    """
    closed = {k: v for k, v in (closed or {}).items() if v is not None}
    status = closed.get("status")
    if not status or status == JobStatus.OPEN.value:
        status = JobStatus.SUBMITTED.value

    data = job.model_dump(by_alias=True, exclude_none=True)
    data.update(closed)
    data["jobIdentifier"] = job.job_identifier
    data["status"] = status
    try:
        return Job.model_validate(data)
    except pydantic.ValidationError as e:
        logger.warning("Unexpected close response for job %s: %s", job.job_identifier, e)
        return job.model_copy(update={"status": status})
