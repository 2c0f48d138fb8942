"""Job and result models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from .base import BaseModel


class JobStatus(str, Enum):
    """Job statuses reported by the API.

    OPEN only exists between opening a job and closing it.
    """

    OPEN = "OPEN"
    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    TIMEDOUT = "TIMEDOUT"
    FAILED = "FAILED"


TERMINAL_STATUSES = frozenset(
    {
        JobStatus.COMPLETED.value,
        JobStatus.CANCELED.value,
        JobStatus.TIMEDOUT.value,
        JobStatus.FAILED.value,
    }
)


class ModelReference(BaseModel):
    """Model and version a job runs against."""

    identifier: str
    version: str
    name: str | None = None


class Job(BaseModel):
    """A job tracked by the API."""

    job_identifier: str = Field(..., alias="jobIdentifier")
    # Plain string: the server may report statuses not listed in JobStatus
    status: str = JobStatus.SUBMITTED.value
    model: ModelReference | None = None
    explain: bool = False
    total_inputs: int | None = Field(None, alias="totalInputs")
    submitted_by: str | None = Field(None, alias="submittedBy")
    submitted_at: str | None = Field(None, alias="submittedAt")
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")
    total: int | None = None
    pending: int | None = None
    completed: int | None = None
    failed: int | None = None

    @property
    def is_terminal(self) -> bool:
        """True once the job reached COMPLETED, CANCELED, TIMEDOUT or FAILED."""
        return self.status in TERMINAL_STATUSES

    @classmethod
    def table_columns(cls) -> list[str]:
        return ["job_identifier", "status", "model", "version", "submitted_at"]

    def to_row(self, columns: list[str] | None = None) -> dict[str, Any]:
        cols = columns or self.table_columns()
        data = self.to_dict()
        if self.model:
            data["model"] = self.model.name or self.model.identifier
            data["version"] = self.model.version
        return {col: data.get(col, "") for col in cols}


class JobResult(BaseModel):
    """Aggregated results of a job."""

    job_identifier: str = Field(..., alias="jobIdentifier")
    total: int = 0
    completed: int = 0
    failed: int = 0
    finished: bool = False
    submitted_at: str | None = Field(None, alias="submittedAt")
    elapsed_time: int | None = Field(None, alias="elapsedTime")
    results: dict[str, Any] = Field(default_factory=dict)
    failures: dict[str, Any] = Field(default_factory=dict)
