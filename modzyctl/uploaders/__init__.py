"""Input upload helpers for modzyctl.

These are internal implementation details. Use ``FileJobService`` from
``modzyctl.services.uploads`` as the public API.
"""

from modzyctl.uploaders.chunks import ChunkSource, iter_chunks, is_in_memory, source_name
from modzyctl.uploaders.constants import (
    CHUNK_FORM_FIELD,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    FEATURE_CHUNK_SIZE_KEY,
)

__all__ = [
    # Constants
    "CHUNK_FORM_FIELD",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_TIMEOUT",
    "FEATURE_CHUNK_SIZE_KEY",
    # Chunking
    "ChunkSource",
    "iter_chunks",
    "is_in_memory",
    "source_name",
]
