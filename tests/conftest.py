"""Pytest configuration and fixtures for modzyctl tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's MODZY_* variables out of tests."""
    for name in (
        "MODZY_BASE_URL",
        "MODZY_API_KEY",
        "MODZY_PROFILE",
        "MODZY_VERIFY_SSL",
        "MODZY_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    url: https://modzy-test.example.com/api
    api_key: test.key123
    verify_ssl: false
    timeout: 30

  production:
    url: https://app.modzy.com/api
    verify_ssl: true
    timeout: 60
"""
