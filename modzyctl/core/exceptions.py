"""Exception hierarchy for modzyctl.

Provides typed exceptions for different failure modes with clear error messages.
"""

from __future__ import annotations

from typing import Any


class ModzyError(Exception):
    """Base exception for all modzyctl errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ModzyError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(ModzyError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidURLError(ValidationError):
    """Invalid URL format."""

    def __init__(self, url: str, reason: str = ""):
        msg = f"Invalid URL: {url}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="url", value=url)
        self.url = url
        self.reason = reason


class InvalidIdentifierError(ValidationError):
    """Invalid identifier (model, version, job, input key)."""

    def __init__(self, identifier_type: str, value: str, reason: str = ""):
        msg = f"Invalid {identifier_type}: {value}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field=identifier_type, value=value)
        self.identifier_type = identifier_type
        self.reason = reason


class PathValidationError(ValidationError):
    """Path validation failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Connection Errors
# =============================================================================


class ConnectionError(ModzyError):
    """Base class for connection-related errors."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url


class NetworkError(ConnectionError):
    """Network-level error (DNS, TCP, TLS, timeouts)."""

    def __init__(self, url: str, cause: str | None = None):
        msg = f"Network error connecting to {url}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, url)
        self.cause = cause


class ServerUnreachableError(ConnectionError):
    """Server is not reachable."""

    def __init__(self, url: str):
        super().__init__(f"Server unreachable: {url}", url)


class RetryExhaustedError(ConnectionError):
    """All retry attempts failed."""

    def __init__(self, operation: str, attempts: int, last_error: Exception | None = None):
        msg = f"Operation '{operation}' failed after {attempts} attempts"
        if last_error:
            msg = f"{msg}: {last_error}"
        super().__init__(msg)
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error


# =============================================================================
# API Errors
# =============================================================================


class ApiError(ModzyError):
    """The API rejected a request with an error status code."""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        url: str | None = None,
        method: str | None = None,
    ):
        msg = f"HTTP {status_code}"
        if message:
            msg = f"{msg}: {message}"
        details: dict[str, Any] = {"status_code": status_code}
        if method:
            details["method"] = method
        if url:
            details["url"] = url
        super().__init__(msg, details)
        self.status_code = status_code
        self.url = url
        self.method = method
        self.reason = message


class AuthenticationError(ApiError):
    """API key missing, invalid or expired."""

    def __init__(
        self,
        url: str | None = None,
        reason: str = "",
        method: str | None = None,
        status_code: int = 401,
    ):
        super().__init__(
            status_code,
            f"Authentication failed: {reason}" if reason else "Authentication failed",
            url,
            method,
        )


class PermissionDeniedError(AuthenticationError):
    """API key lacks permission for the requested operation."""

    def __init__(self, url: str | None = None, method: str | None = None):
        super().__init__(url, "permission denied", method, status_code=403)


class ResourceNotFoundError(ApiError):
    """Requested resource does not exist."""

    def __init__(self, resource_type: str, resource_id: str, url: str | None = None):
        super().__init__(404, f"{resource_type} not found: {resource_id}", url)
        self.resource_type = resource_type
        self.resource_id = resource_id


# =============================================================================
# Operation Errors
# =============================================================================


class OperationError(ModzyError):
    """Error during an operation."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        full_details = {"operation": operation}
        if details:
            full_details.update(details)
        super().__init__(message, full_details)
        self.operation = operation


class UploadError(OperationError):
    """Error during an input upload."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        full_details = details or {}
        if file_path:
            full_details["file"] = file_path
        super().__init__("upload", message, full_details)
        self.file_path = file_path


class ChunkReadError(UploadError):
    """Reading the next chunk from an input source failed."""

    def __init__(self, source: str, offset: int, cause: str = ""):
        msg = f"Failed to read chunk at offset {offset}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, file_path=source, details={"offset": offset})
        self.offset = offset


class JobTimeoutError(OperationError):
    """Job did not reach a terminal status in time."""

    def __init__(self, job_id: str, timeout: float, last_status: str | None = None):
        details: dict[str, Any] = {"job": job_id}
        if last_status:
            details["status"] = last_status
        super().__init__("job_wait", f"Job {job_id} timed out after {timeout}s", details)
        self.job_id = job_id
        self.timeout = timeout
        self.last_status = last_status
