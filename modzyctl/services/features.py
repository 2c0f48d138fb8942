"""Feature negotiation: server-advertised limits for job submission."""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Any

from modzyctl.core.exceptions import ModzyError
from modzyctl.uploaders.constants import DEFAULT_CHUNK_SIZE, FEATURE_CHUNK_SIZE_KEY

from .base import BaseService

logger = logging.getLogger(__name__)

SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([a-zA-Z]{0,2})$")

# KB/MB/GB/TB are binary multiples, matching the API's behavior
SIZE_UNITS = {
    "": 1,
    "i": 1,
    "K": 1000,
    "M": 1000**2,
    "G": 1000**3,
    "T": 1000**4,
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}


def parse_size(text: str) -> int:
    """Parse a human-readable size such as ``1Mi`` or ``500KB`` into bytes.

    Fractional values are truncated after applying the unit: ``1.5Ki`` is 1536.

    Args:
        text: Size expression ``<digits>[.<digits>][unit]``.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the text does not match, the unit is unknown, or the
            size is not positive.
    """
    match = SIZE_PATTERN.match(text.strip()) if isinstance(text, str) else None
    if match is None:
        raise ValueError(f"Invalid size expression: {text!r}")

    number, unit = match.groups()
    if unit not in SIZE_UNITS:
        raise ValueError(f"Unknown size unit {unit!r} in {text!r}")

    size = int(Decimal(number) * SIZE_UNITS[unit])
    if size <= 0:
        raise ValueError(f"Size must be positive: {text!r}")
    return size


class FeatureService(BaseService):
    """Service for the job features endpoint."""

    def get_features(self) -> dict[str, Any]:
        """Fetch the operational features of the job API.

        Returns:
            Mapping of feature name to value
        """
        data = self._get("/jobs/features")
        return data if isinstance(data, dict) else {}

    def get_upload_chunk_limit(self) -> int:
        """Negotiate the maximum chunk size for input uploads.

        Queries the server on every call. Falls back to
        ``DEFAULT_CHUNK_SIZE`` (1 MiB) when the request fails or the advertised
        value is missing or unparseable; those failures are logged, not raised.

        Returns:
            Maximum chunk size in bytes
        """
        try:
            features = self.get_features()
        except ModzyError as e:
            logger.warning(
                "Could not fetch job features, using %d byte chunks: %s", DEFAULT_CHUNK_SIZE, e
            )
            return DEFAULT_CHUNK_SIZE
        except ValueError as e:
            logger.warning(
                "Job features response is not JSON, using %d byte chunks: %s",
                DEFAULT_CHUNK_SIZE,
                e,
            )
            return DEFAULT_CHUNK_SIZE

        value = features.get(FEATURE_CHUNK_SIZE_KEY)
        if value is None:
            logger.warning(
                "Server did not report %s, using %d byte chunks",
                FEATURE_CHUNK_SIZE_KEY,
                DEFAULT_CHUNK_SIZE,
            )
            return DEFAULT_CHUNK_SIZE

        try:
            chunk_size = parse_size(str(value))
        except ValueError as e:
            logger.warning("%s; using %d byte chunks", e, DEFAULT_CHUNK_SIZE)
            return DEFAULT_CHUNK_SIZE

        logger.debug("Negotiated upload chunk size: %d bytes (%s)", chunk_size, value)
        return chunk_size
