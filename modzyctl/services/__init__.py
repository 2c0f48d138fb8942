"""Service layer for Modzy API operations.

Provides service classes that encapsulate REST API operations.
"""

from __future__ import annotations

from .base import BaseService
from .catalog import ModelService
from .features import FeatureService, parse_size
from .jobs import JobService, encode_data_url, path_to_data_url
from .results import ResultService
from .uploads import FileJobService

__all__ = [
    "BaseService",
    "ModelService",
    "FeatureService",
    "JobService",
    "ResultService",
    "FileJobService",
    "parse_size",
    "encode_data_url",
    "path_to_data_url",
]
