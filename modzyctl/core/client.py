"""HTTP client for the Modzy REST API.

Provides API key authentication, retry logic for idempotent requests and
mapping of error responses onto typed exceptions.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from modzyctl.core.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    NetworkError,
    PermissionDeniedError,
    ResourceNotFoundError,
    RetryExhaustedError,
    ServerUnreachableError,
)
from modzyctl.core.timeouts import DEFAULT_HTTP_TIMEOUT_SECONDS
from modzyctl.core.validation import validate_server_url

# =============================================================================
# Constants
# =============================================================================

DEFAULT_TIMEOUT = DEFAULT_HTTP_TIMEOUT_SECONDS
DEFAULT_MAX_RETRIES = 3
RETRY_BACKOFF_BASE = 2
RETRYABLE_STATUS_CODES = {502, 503, 504}
# Job submission and chunk appends are not idempotent and are sent once
RETRYABLE_METHODS = {"GET", "HEAD", "DELETE"}


# =============================================================================
# ModzyClient
# =============================================================================


@dataclass
class ModzyClient:
    """HTTP client for the Modzy REST API with retry and error mapping."""

    base_url: str
    api_key: str | None = None
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    verify_ssl: bool = True
    _client: httpx.Client | None = field(init=False, default=None, repr=False)
    _lock: threading.Lock = field(init=False, default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        """Validate URL and API key."""
        self.base_url = validate_server_url(self.base_url)
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "API key is required. Set MODZY_API_KEY or store one in a profile.",
                field="api_key",
            )

    # =========================================================================
    # Client Management
    # =========================================================================

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {"Authorization": f"ApiKey {self.api_key}"}

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client.

        Safe to call from several threads sharing this client; exactly one
        ``httpx.Client`` is built.
        """
        client = self._client
        if client is not None:
            return client
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(
                    base_url=self.base_url,
                    headers=self.headers,
                    timeout=self.timeout,
                    verify=self.verify_ssl,
                    follow_redirects=True,
                )
            return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> ModzyClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _raise_for_status(self, resp: httpx.Response, method: str, path: str) -> None:
        """Map an error response onto the exception hierarchy."""
        status = resp.status_code
        if status < 400:
            return

        url = self._url(path)
        if status == 401:
            raise AuthenticationError(url, "invalid or expired API key", method)
        if status == 403:
            raise PermissionDeniedError(url, method)
        if status == 404:
            raise ResourceNotFoundError("resource", path, url)
        raise ApiError(status, _error_message(resp), url, method)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        data: Any | None = None,
        files: Any | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Execute HTTP request, retrying idempotent methods.

        Args:
            method: HTTP method.
            path: API path relative to the base URL.
            params: Query parameters.
            json: JSON body.
            data: Form data or raw body.
            files: Multipart files.
            headers: Additional headers.
            timeout: Request timeout override.

        Returns:
            HTTP response with a status code below 400.

        Raises:
            ApiError: If the server answers with an error status.
            NetworkError: If a single-shot request times out.
            ServerUnreachableError: If a single-shot request cannot connect.
            RetryExhaustedError: If all retries of an idempotent request fail.
        """
        client = self._get_client()
        method = method.upper()
        request_timeout = timeout or self.timeout
        attempts = self.max_retries + 1 if method in RETRYABLE_METHODS else 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                resp = client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    data=data,
                    files=files,
                    headers=headers,
                    timeout=request_timeout,
                )
            except httpx.ConnectError as e:
                last_error = ServerUnreachableError(self.base_url)
                last_error.__cause__ = e
            except httpx.TimeoutException as e:
                last_error = NetworkError(self.base_url, f"Timeout after {request_timeout}s")
                last_error.__cause__ = e
            except httpx.TransportError as e:
                last_error = NetworkError(self.base_url, str(e))
                last_error.__cause__ = e
            else:
                if resp.status_code in RETRYABLE_STATUS_CODES and attempt < attempts - 1:
                    last_error = ApiError(
                        resp.status_code, _error_message(resp), self._url(path), method
                    )
                else:
                    self._raise_for_status(resp, method, path)
                    return resp

            # Retry with backoff
            if attempt < attempts - 1:
                time.sleep(RETRY_BACKOFF_BASE ** (attempt + 1))

        if attempts == 1 and last_error is not None:
            raise last_error
        raise RetryExhaustedError(f"{method} {path}", attempts, last_error)

    def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """GET request."""
        return self._request("GET", path, params=params, headers=headers, timeout=timeout)

    def post(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        data: Any | None = None,
        files: Any | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """POST request."""
        return self._request(
            "POST",
            path,
            params=params,
            json=json,
            data=data,
            files=files,
            headers=headers,
            timeout=timeout,
        )

    def delete(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """DELETE request."""
        return self._request("DELETE", path, params=params, headers=headers, timeout=timeout)


def _error_message(resp: httpx.Response) -> str:
    """Extract the server's error message from a response body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip()[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "")
    return ""
