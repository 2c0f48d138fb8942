"""Tests for modzyctl package imports and exports."""

from __future__ import annotations


class TestPackageImports:
    """Tests for package imports."""

    def test_import_modzyctl(self):
        import modzyctl

        assert hasattr(modzyctl, "__version__")
        assert modzyctl.FileJobService is not None

    def test_import_core_modules(self):
        from modzyctl.core import client, config, exceptions, logging, output, timeouts, validation

        assert client is not None
        assert config is not None
        assert exceptions is not None
        assert logging is not None
        assert output is not None
        assert timeouts is not None
        assert validation is not None

    def test_import_models(self):
        from modzyctl.models import base, job, model, progress

        assert base is not None
        assert job is not None
        assert model is not None
        assert progress is not None

    def test_import_services(self):
        from modzyctl.services import base, catalog, features, jobs, results, uploads

        assert base is not None
        assert catalog is not None
        assert features is not None
        assert jobs is not None
        assert results is not None
        assert uploads is not None

    def test_import_cli(self):
        from modzyctl.cli import common, config_cmd, job, main, model, result

        assert main is not None
        assert common is not None
        assert config_cmd is not None
        assert model is not None
        assert job is not None
        assert result is not None


class TestExceptionHierarchy:
    """Tests for exception hierarchy."""

    def test_modzy_error_base(self):
        from modzyctl.core.exceptions import ModzyError

        exc = ModzyError("test error", {"job": "j1"})
        assert str(exc) == "test error (job=j1)"
        assert isinstance(exc, Exception)

    def test_api_error(self):
        from modzyctl.core.exceptions import ApiError

        exc = ApiError(500, "boom", "https://app.modzy.com/api/jobs", "POST")
        assert exc.status_code == 500
        assert "HTTP 500: boom" in str(exc)
        assert "POST" in str(exc)

    def test_auth_errors_are_api_errors(self):
        from modzyctl.core.exceptions import ApiError, AuthenticationError, PermissionDeniedError

        assert isinstance(AuthenticationError("https://x"), ApiError)
        denied = PermissionDeniedError("https://x", "GET")
        assert isinstance(denied, AuthenticationError)
        assert denied.status_code == 403

    def test_not_found(self):
        from modzyctl.core.exceptions import ResourceNotFoundError

        exc = ResourceNotFoundError("model", "abc")
        assert exc.status_code == 404
        assert "model not found: abc" in str(exc)

    def test_network_error(self):
        from modzyctl.core.exceptions import ConnectionError, NetworkError

        exc = NetworkError("https://app.modzy.com/api", "connection failed")
        assert isinstance(exc, ConnectionError)
        assert "app.modzy.com" in str(exc)

    def test_chunk_read_error(self):
        from modzyctl.core.exceptions import ChunkReadError, UploadError

        exc = ChunkReadError("/data/a.bin", 2048, "I/O error")
        assert isinstance(exc, UploadError)
        assert exc.offset == 2048
        assert "/data/a.bin" in str(exc)

    def test_job_timeout_error(self):
        from modzyctl.core.exceptions import JobTimeoutError, OperationError

        exc = JobTimeoutError("j1", 60, "IN_PROGRESS")
        assert isinstance(exc, OperationError)
        assert exc.last_status == "IN_PROGRESS"
        assert "j1" in str(exc)
