"""Data models for modzyctl.

Provides Pydantic models for API resources and upload progress tracking.
"""

from __future__ import annotations

from .base import BaseModel
from .job import TERMINAL_STATUSES, Job, JobResult, JobStatus, ModelReference
from .model import Engine, Model, ModelInput, ModelOutput, ModelVersion
from .progress import SubmissionPhase, UploadProgress, UploadSummary

__all__ = [
    # Base
    "BaseModel",
    # Jobs
    "Job",
    "JobResult",
    "JobStatus",
    "ModelReference",
    "TERMINAL_STATUSES",
    # Catalog
    "Model",
    "ModelInput",
    "ModelOutput",
    "ModelVersion",
    "Engine",
    # Progress
    "SubmissionPhase",
    "UploadProgress",
    "UploadSummary",
]
