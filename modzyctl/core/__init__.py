"""Core modules for modzyctl."""

from modzyctl.core.client import ModzyClient
from modzyctl.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile, get_api_key
from modzyctl.core.exceptions import (
    ApiError,
    AuthenticationError,
    ChunkReadError,
    ConfigurationError,
    ConnectionError,
    JobTimeoutError,
    ModzyError,
    NetworkError,
    OperationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    RetryExhaustedError,
    UploadError,
    ValidationError,
)
from modzyctl.core.logging import LogContext, get_logger, setup_logging
from modzyctl.core.output import (
    OutputFormat,
    console,
    print_error,
    print_json,
    print_output,
    print_success,
    print_table,
    print_warning,
)
from modzyctl.core.validation import (
    validate_chunk_size,
    validate_identifier,
    validate_input_key,
    validate_path_exists,
    validate_server_url,
    validate_timeout,
)

__all__ = [
    # Exceptions
    "ModzyError",
    "ApiError",
    "AuthenticationError",
    "PermissionDeniedError",
    "ResourceNotFoundError",
    "ConfigurationError",
    "ConnectionError",
    "NetworkError",
    "RetryExhaustedError",
    "ValidationError",
    "OperationError",
    "UploadError",
    "ChunkReadError",
    "JobTimeoutError",
    # Validation
    "validate_server_url",
    "validate_identifier",
    "validate_input_key",
    "validate_chunk_size",
    "validate_timeout",
    "validate_path_exists",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    "get_api_key",
    # Client
    "ModzyClient",
    # Output
    "OutputFormat",
    "print_output",
    "print_table",
    "print_json",
    "print_error",
    "print_warning",
    "print_success",
    "console",
    # Logging
    "get_logger",
    "setup_logging",
    "LogContext",
]
