"""Progress models for tracking file job submissions.

Provides dataclasses for chunk upload progress and submission summaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SubmissionPhase(Enum):
    """Phases of a chunked file job submission."""

    OPENING = "opening"
    UPLOADING = "uploading"
    CLOSING = "closing"
    DONE = "done"
    ABORTING = "aborting"


@dataclass
class UploadProgress:
    """Progress after one chunk of a data item was accepted."""

    job_id: str
    slot: str
    item: str
    chunk_index: int
    chunk_bytes: int
    item_bytes_sent: int
    item_total_bytes: Optional[int] = None
    bytes_sent: int = 0

    @property
    def item_percent(self) -> float:
        """Completion percentage of the current item, 0 when size is unknown."""
        if not self.item_total_bytes:
            return 0.0
        return (self.item_bytes_sent / self.item_total_bytes) * 100

    @property
    def mb_sent(self) -> float:
        """Megabytes sent for the whole job so far."""
        return self.bytes_sent / (1024 * 1024)


@dataclass
class UploadSummary:
    """Summary of all inputs uploaded to one open job."""

    job_id: str
    chunk_size: int
    items: int = 0
    chunks: int = 0
    bytes_sent: int = 0
    duration: float = 0.0
    skipped_items: list[str] = field(default_factory=list)

    @property
    def total_mb(self) -> float:
        return self.bytes_sent / (1024 * 1024)

    @property
    def throughput_mbps(self) -> float:
        """Upload throughput in MB/s."""
        if self.duration == 0:
            return 0.0
        return self.total_mb / self.duration
