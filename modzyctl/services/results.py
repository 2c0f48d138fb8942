"""Result service for job results and per-input outputs."""

from __future__ import annotations

from typing import Any

from modzyctl.core.validation import validate_identifier
from modzyctl.models.job import JobResult

from .base import BaseService


class ResultService(BaseService):
    """Service for result retrieval."""

    def get_result(self, job_id: str) -> JobResult:
        """Get the aggregated results of a job."""
        data = self._get(self._build_path("results", validate_identifier(job_id, "job")))
        return JobResult.model_validate(data)

    def get_output_contents(
        self,
        job_id: str,
        input_key: str,
        output_name: str,
        as_json: bool = True,
    ) -> Any:
        """Get one output produced for one input of a job.

        Args:
            job_id: Job identifier
            input_key: Input (slot) key used at submission
            output_name: Output name, e.g. ``results.json``
            as_json: Parse the body as JSON; otherwise return raw bytes

        Returns:
            Parsed JSON or raw bytes
        """
        path = self._build_path(
            "results",
            validate_identifier(job_id, "job"),
            "datasource",
            validate_identifier(input_key, "input key"),
            "output",
            validate_identifier(output_name, "output"),
        )
        resp = self.client.get(path)
        return resp.json() if as_json else resp.content
