"""Input validation helpers for modzyctl."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

from modzyctl.core.exceptions import (
    InvalidIdentifierError,
    InvalidURLError,
    PathValidationError,
    ValidationError,
)

# Model ids, versions, job ids and input keys end up as URL path segments
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._\-]*$")


def validate_server_url(url: str) -> str:
    """Validate and normalize an API base URL.

    Args:
        url: URL such as ``https://app.modzy.com/api``.

    Returns:
        URL stripped of whitespace and trailing slashes.

    Raises:
        InvalidURLError: If the URL is empty or not http(s).
    """
    if not url or not url.strip():
        raise InvalidURLError(url or "", "URL is empty")

    url = url.strip().rstrip("/")
    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, "scheme must be http or https")
    if not parsed.netloc:
        raise InvalidURLError(url, "missing host")

    return url


def validate_identifier(value: str, identifier_type: str = "identifier") -> str:
    """Validate an identifier used as a URL path segment.

    Raises:
        InvalidIdentifierError: If empty or containing unsafe characters.
    """
    if not value or not value.strip():
        raise InvalidIdentifierError(identifier_type, value or "", "must not be empty")
    value = value.strip()
    if not IDENTIFIER_PATTERN.match(value):
        raise InvalidIdentifierError(
            identifier_type,
            value,
            "only letters, digits, '.', '_' and '-' are allowed",
        )
    return value


def validate_input_key(value: str) -> str:
    """Validate a slot or data item key (e.g. ``input.txt`` or ``my image.jpg``).

    Keys are caller-chosen names and are percent-encoded when placed in a
    URL, so only values that cannot form a single path segment are rejected.

    Raises:
        InvalidIdentifierError: If empty, ``.``/``..``, or containing ``/``.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidIdentifierError("input key", str(value or ""), "must not be empty")
    if "/" in value or value in (".", ".."):
        raise InvalidIdentifierError("input key", value, "must be a single path segment")
    return value


def validate_chunk_size(value: int) -> int:
    """Validate a maximum chunk size in bytes.

    Raises:
        ValidationError: If not a positive integer.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            "Chunk size must be a positive integer",
            field="max_chunk_size",
            value=value,
        )
    return value


def validate_timeout(value: float) -> float:
    """Validate a timeout in seconds."""
    if value <= 0:
        raise ValidationError("Timeout must be positive", field="timeout", value=value)
    return value


def validate_path_exists(path: str | Path, *, must_be_file: bool = False) -> Path:
    """Validate that a path exists.

    Raises:
        PathValidationError: If missing, or not a file when required.
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise PathValidationError(str(path), "does not exist")
    if must_be_file and not p.is_file():
        raise PathValidationError(str(path), "not a file")
    return p
