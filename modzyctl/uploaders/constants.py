"""Shared constants for input uploads."""

from modzyctl.core.timeouts import DEFAULT_UPLOAD_TIMEOUT_SECONDS

# Chunk size used when the server does not advertise a usable limit (1 MiB)
DEFAULT_CHUNK_SIZE = 1024 * 1024

# Feature reported by GET /jobs/features
FEATURE_CHUNK_SIZE_KEY = "inputChunkMaximumSize"

# Multipart form field carrying chunk bytes; the file name is the item key
CHUNK_FORM_FIELD = "input"

# HTTP timeout for a single chunk request
DEFAULT_TIMEOUT = DEFAULT_UPLOAD_TIMEOUT_SECONDS

# Content type sent for every chunk
CHUNK_CONTENT_TYPE = "application/octet-stream"
