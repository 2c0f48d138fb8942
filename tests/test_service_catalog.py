"""Unit tests for ModelService and ResultService."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from modzyctl.core.exceptions import InvalidIdentifierError, ResourceNotFoundError
from modzyctl.services.catalog import ModelService
from modzyctl.services.results import ResultService


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock ModzyClient."""
    client = MagicMock()
    client.base_url = "https://app.modzy.com/api"
    return client


@pytest.fixture
def models(mock_client: MagicMock) -> ModelService:
    return ModelService(mock_client)


@pytest.fixture
def results(mock_client: MagicMock) -> ResultService:
    return ResultService(mock_client)


def _resp(json_data: object, content_type: str = "application/json") -> MagicMock:
    """Build a mock httpx.Response."""
    resp = MagicMock(spec=httpx.Response)
    resp.json.return_value = json_data
    resp.text = str(json_data)
    resp.headers = {"content-type": content_type}
    return resp


class TestListModels:
    """Tests for ModelService.list_models."""

    def test_filters_sent_as_params(self, models, mock_client):
        mock_client.get.return_value = _resp([{"modelId": "m1", "latestVersion": "1.0"}])

        result = models.list_models(name="sentiment", is_active=True)

        assert result[0]["modelId"] == "m1"
        assert mock_client.get.call_args[0][0] == "/models"
        params = mock_client.get.call_args.kwargs["params"]
        assert params == {"name": "sentiment", "isActive": "true", "per-page": 500}

    def test_non_list_body(self, models, mock_client):
        mock_client.get.return_value = _resp({"unexpected": True})
        assert models.list_models() == []

    def test_list_active_models(self, models, mock_client):
        mock_client.get.return_value = _resp([{"modelId": "m1"}])

        assert models.list_active_models() == [{"modelId": "m1"}]
        assert mock_client.get.call_args[0][0] == "/models/latest"


class TestGetModel:
    """Tests for model lookups."""

    def test_get_model(self, models, mock_client):
        mock_client.get.return_value = _resp(
            {"modelId": "m1", "name": "Sentiment", "latestVersion": "1.0.1", "versions": ["1.0.1"]}
        )

        model = models.get_model("m1")

        assert model.model_id == "m1"
        assert model.latest_version == "1.0.1"
        assert mock_client.get.call_args[0][0] == "/models/m1"

    def test_get_model_invalid_id(self, models, mock_client):
        with pytest.raises(InvalidIdentifierError):
            models.get_model("../jobs")
        mock_client.get.assert_not_called()

    def test_get_model_by_name(self, models, mock_client):
        mock_client.get.side_effect = [
            _resp([{"modelId": "m1"}, {"modelId": "m2"}]),
            _resp({"modelId": "m1", "name": "Sentiment"}),
        ]

        model = models.get_model_by_name("Sentiment")

        assert model.model_id == "m1"
        assert mock_client.get.call_args_list[0].kwargs["params"]["name"] == "Sentiment"

    def test_get_model_by_name_not_found(self, models, mock_client):
        mock_client.get.return_value = _resp([])

        with pytest.raises(ResourceNotFoundError):
            models.get_model_by_name("nothing")


class TestRelatedModels:
    """Tests for ModelService.get_related_models."""

    def test_related_models(self, models, mock_client):
        mock_client.get.return_value = _resp([{"modelId": "m2"}, {"modelId": "m3"}])

        related = models.get_related_models("m1")

        assert [m["modelId"] for m in related] == ["m2", "m3"]
        assert mock_client.get.call_args[0][0] == "/models/m1/related-models"

    def test_related_models_non_list_body(self, models, mock_client):
        mock_client.get.return_value = _resp({})
        assert models.get_related_models("m1") == []


class TestVersions:
    """Tests for versions and samples."""

    def test_list_versions(self, models, mock_client):
        mock_client.get.return_value = _resp([{"version": "0.0.1"}, {"version": "1.0.0"}])

        assert models.list_versions("m1") == ["0.0.1", "1.0.0"]
        assert mock_client.get.call_args[0][0] == "/models/m1/versions"

    def test_get_version(self, models, mock_client):
        mock_client.get.return_value = _resp(
            {
                "version": "1.0.1",
                "status": "active",
                "inputs": [{"name": "input.txt", "acceptedMediaTypes": "text/plain"}],
                "outputs": [{"name": "results.json", "mediaType": "application/json"}],
            }
        )

        version = models.get_version("m1", "1.0.1")

        assert version.inputs[0].name == "input.txt"
        assert version.outputs[0].media_type == "application/json"
        assert mock_client.get.call_args[0][0] == "/models/m1/versions/1.0.1"

    def test_samples(self, models, mock_client):
        mock_client.get.return_value = _resp({"model": {"identifier": "m1"}})

        models.get_input_sample("m1", "1.0.1")
        assert mock_client.get.call_args[0][0] == "/models/m1/versions/1.0.1/sample-input"

        models.get_output_sample("m1", "1.0.1")
        assert mock_client.get.call_args[0][0] == "/models/m1/versions/1.0.1/sample-output"


class TestTags:
    """Tests for tag lookups."""

    def test_list_tags(self, models, mock_client):
        mock_client.get.return_value = _resp([{"identifier": "cv", "name": "Computer Vision"}])

        assert models.list_tags()[0]["identifier"] == "cv"
        assert mock_client.get.call_args[0][0] == "/models/tags"

    def test_tags_and_models(self, models, mock_client):
        mock_client.get.return_value = _resp({"tags": [], "models": []})

        models.get_tags_and_models("cv", "nlp")

        assert mock_client.get.call_args[0][0] == "/models/tags/cv,nlp"


class TestResults:
    """Tests for ResultService."""

    def test_get_result(self, results, mock_client):
        mock_client.get.return_value = _resp(
            {
                "jobIdentifier": "j-1",
                "total": 2,
                "completed": 1,
                "failed": 1,
                "finished": True,
                "results": {"a.txt": {"results.json": {"label": "positive"}}},
                "failures": {"b.txt": {"error": "bad input"}},
            }
        )

        res = results.get_result("j-1")

        assert res.finished is True
        assert res.results["a.txt"]["results.json"]["label"] == "positive"
        assert "b.txt" in res.failures
        assert mock_client.get.call_args[0][0] == "/results/j-1"

    def test_output_contents_json(self, results, mock_client):
        mock_client.get.return_value = _resp({"label": "positive"})

        data = results.get_output_contents("j-1", "input", "results.json")

        assert data == {"label": "positive"}
        assert mock_client.get.call_args[0][0] == "/results/j-1/datasource/input/output/results.json"

    def test_output_contents_raw(self, results, mock_client):
        resp = _resp(None, content_type="image/png")
        resp.content = b"\x89PNG"
        mock_client.get.return_value = resp

        assert results.get_output_contents("j-1", "input", "mask.png", as_json=False) == b"\x89PNG"
