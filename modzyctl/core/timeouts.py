"""Timeout defaults shared by the HTTP client, config and uploads."""

from __future__ import annotations

# Per-request timeout for API calls
DEFAULT_HTTP_TIMEOUT_SECONDS = 30

# Per-chunk timeout for input uploads
DEFAULT_UPLOAD_TIMEOUT_SECONDS = 300

# Job polling
DEFAULT_WAIT_TIMEOUT_SECONDS = 3600
DEFAULT_POLL_INTERVAL_SECONDS = 2
