"""Model catalog resources (models, versions, engines)."""

from __future__ import annotations

from pydantic import Field

from .base import BaseModel


class Model(BaseModel):
    """A model in the catalog."""

    model_id: str = Field(..., alias="modelId")
    name: str | None = None
    author: str | None = None
    description: str | None = None
    latest_version: str | None = Field(None, alias="latestVersion")
    latest_active_version: str | None = Field(None, alias="latestActiveVersion")
    versions: list[str] = Field(default_factory=list)
    is_active: bool | None = Field(None, alias="isActive")

    @classmethod
    def table_columns(cls) -> list[str]:
        return ["model_id", "name", "author", "latest_version"]


class ModelInput(BaseModel):
    """Named input declared by a model version."""

    name: str
    accepted_media_types: str | None = Field(None, alias="acceptedMediaTypes")
    maximum_size: int | None = Field(None, alias="maximumSize")
    description: str | None = None


class ModelOutput(BaseModel):
    """Named output produced by a model version."""

    name: str
    media_type: str | None = Field(None, alias="mediaType")
    maximum_size: int | None = Field(None, alias="maximumSize")
    description: str | None = None


class ModelVersion(BaseModel):
    """Details of one version of a model."""

    version: str
    status: str | None = None
    created_by: str | None = Field(None, alias="createdBy")
    created_at: str | None = Field(None, alias="createdAt")
    is_active: bool | None = Field(None, alias="isActive")
    is_available: bool | None = Field(None, alias="isAvailable")
    inputs: list[ModelInput] = Field(default_factory=list)
    outputs: list[ModelOutput] = Field(default_factory=list)


class Engine(BaseModel):
    """Processing engine status for a model version."""

    identifier: str
    version: str
    failed: int = 0
    queued: int = 0
    spinning_up: int = Field(0, alias="spinningUp")
    spinning_down: int = Field(0, alias="spinningDown")
    running: int = 0
    ready: int = 0

    @classmethod
    def table_columns(cls) -> list[str]:
        return ["identifier", "version", "ready", "running", "queued", "failed"]
