"""Base service with common methods for all API services."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from modzyctl.core.client import ModzyClient


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, client: "ModzyClient") -> None:
        """Initialize service with an API client.

        Args:
            client: Configured ModzyClient instance
        """
        self.client = client

    def _get(self, path: str, **kwargs: Any) -> Any:
        """Execute GET request and return JSON data.

        Args:
            path: API endpoint path
            **kwargs: Additional request parameters

        Returns:
            Parsed JSON response data
        """
        resp = self.client.get(path, **kwargs)
        return resp.json()

    def _post(self, path: str, **kwargs: Any) -> Any:
        """Execute POST request and return response.

        Args:
            path: API endpoint path
            **kwargs: Additional request parameters

        Returns:
            Parsed JSON response or response text
        """
        resp = self.client.post(path, **kwargs)
        if resp.headers.get("content-type", "").startswith("application/json"):
            return resp.json()
        return resp.text

    def _delete(self, path: str, **kwargs: Any) -> Any:
        """Execute DELETE request.

        Args:
            path: API endpoint path
            **kwargs: Additional request parameters

        Returns:
            Parsed JSON response, or None for an empty body
        """
        resp = self.client.delete(path, **kwargs)
        if resp.headers.get("content-type", "").startswith("application/json"):
            return resp.json()
        return None

    def _build_path(self, *parts: str) -> str:
        """Build API path from parts.

        Args:
            *parts: Path segments

        Returns:
            Joined path string
        """
        return "/" + "/".join(p.strip("/") for p in parts if p)

    @staticmethod
    def _drop_none(params: dict[str, Any]) -> dict[str, Any]:
        """Remove unset query parameters."""
        return {k: v for k, v in params.items() if v is not None}
