"""Model catalog service: models, versions, samples and tags."""

from __future__ import annotations

from typing import Any, Optional

from modzyctl.core.exceptions import ResourceNotFoundError
from modzyctl.core.validation import validate_identifier
from modzyctl.models.model import Model, ModelVersion

from .base import BaseService


class ModelService(BaseService):
    """Service for model catalog operations."""

    def list_models(
        self,
        model_id: Optional[str] = None,
        author: Optional[str] = None,
        created_by_email: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        is_expired: Optional[bool] = None,
        is_recommended: Optional[bool] = None,
        last_active_date_time: Optional[str] = None,
        expiration_date_time: Optional[str] = None,
        page: Optional[int] = None,
        per_page: int = 500,
        direction: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Search models by the given filters.

        Returns:
            List of model summaries (``modelId``, ``latestVersion``, ``versions``)
        """
        params = self._drop_none(
            {
                "modelId": model_id,
                "author": author,
                "createdByEmail": created_by_email,
                "name": name,
                "description": description,
                "isActive": is_active,
                "isExpired": is_expired,
                "isRecommended": is_recommended,
                "lastActiveDateTime": last_active_date_time,
                "expirationDateTime": expiration_date_time,
                "sort-by": sort_by,
                "direction": direction,
                "page": page,
                "per-page": per_page,
            }
        )
        # httpx would send booleans as "True"/"False"
        for key, value in params.items():
            if isinstance(value, bool):
                params[key] = str(value).lower()

        data = self._get("/models", params=params)
        return data if isinstance(data, list) else []

    def list_active_models(self) -> list[dict[str, Any]]:
        """List active models with their latest details."""
        data = self._get("/models/latest")
        return data if isinstance(data, list) else []

    def get_model(self, model_id: str) -> Model:
        """Get a model by identifier.

        Raises:
            ResourceNotFoundError: If the model does not exist
        """
        data = self._get(self._build_path("models", validate_identifier(model_id, "model")))
        return Model.model_validate(data)

    def get_model_by_name(self, name: str) -> Model:
        """Get the first model matching a name search.

        Raises:
            ResourceNotFoundError: If no model matches
        """
        models = self.list_models(name=name, sort_by="name", per_page=20)
        if not models:
            raise ResourceNotFoundError("model", name)
        return self.get_model(models[0]["modelId"])

    def get_related_models(self, model_id: str) -> list[dict[str, Any]]:
        """List models the API considers related to a model."""
        path = self._build_path("models", validate_identifier(model_id, "model"), "related-models")
        data = self._get(path)
        return data if isinstance(data, list) else []

    def list_versions(self, model_id: str) -> list[str]:
        """List the version strings of a model."""
        path = self._build_path("models", validate_identifier(model_id, "model"), "versions")
        data = self._get(path)
        return [v["version"] if isinstance(v, dict) else str(v) for v in data or []]

    def get_version(self, model_id: str, version: str) -> ModelVersion:
        """Get details (inputs, outputs, status) of a model version."""
        path = self._build_path(
            "models",
            validate_identifier(model_id, "model"),
            "versions",
            validate_identifier(version, "version"),
        )
        return ModelVersion.model_validate(self._get(path))

    def get_input_sample(self, model_id: str, version: str) -> Any:
        """Get the sample job request body for a model version."""
        return self._get(self._version_path(model_id, version, "sample-input"))

    def get_output_sample(self, model_id: str, version: str) -> Any:
        """Get a sample result for a model version."""
        return self._get(self._version_path(model_id, version, "sample-output"))

    def list_tags(self) -> list[dict[str, Any]]:
        """List all model tags."""
        data = self._get("/models/tags")
        return data if isinstance(data, list) else []

    def get_tags_and_models(self, *tag_ids: str) -> dict[str, Any]:
        """Get tags and the models carrying them.

        Returns:
            Dict with ``tags`` and ``models`` lists
        """
        ids = ",".join(validate_identifier(t, "tag") for t in tag_ids)
        data = self._get(self._build_path("models", "tags", ids))
        return data if isinstance(data, dict) else {"tags": [], "models": []}

    def _version_path(self, model_id: str, version: str, leaf: str) -> str:
        return self._build_path(
            "models",
            validate_identifier(model_id, "model"),
            "versions",
            validate_identifier(version, "version"),
            leaf,
        )
