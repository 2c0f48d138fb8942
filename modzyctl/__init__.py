"""modzyctl - A client library and CLI for the Modzy inference API.

This package wraps the Modzy REST API:
- Search models and inspect versions, inputs and outputs
- Submit jobs with text, embedded, AWS S3, JDBC or chunk-uploaded file inputs
- Track, wait for and cancel jobs
- Fetch results and individual outputs
"""

__version__ = "0.1.0"

from modzyctl.core.client import ModzyClient
from modzyctl.core.config import Config, Profile
from modzyctl.core.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    ModzyError,
    NetworkError,
    ResourceNotFoundError,
    UploadError,
    ValidationError,
)
from modzyctl.services import (
    FeatureService,
    FileJobService,
    JobService,
    ModelService,
    ResultService,
)

__all__ = [
    "__version__",
    "ModzyClient",
    "Config",
    "Profile",
    "ModzyError",
    "ApiError",
    "AuthenticationError",
    "ConfigurationError",
    "ConnectionError",
    "NetworkError",
    "ResourceNotFoundError",
    "UploadError",
    "ValidationError",
    "ModelService",
    "JobService",
    "FileJobService",
    "FeatureService",
    "ResultService",
]
