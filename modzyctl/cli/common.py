"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from modzyctl.core.client import ModzyClient
from modzyctl.core.config import Config, get_api_key
from modzyctl.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ModzyError,
    ProfileNotFoundError,
)
from modzyctl.core.logging import setup_logging
from modzyctl.core.output import OutputFormat, print_error

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2


# =============================================================================
# Client Construction
# =============================================================================


def get_client(profile_name: Optional[str] = None) -> ModzyClient:
    """Build an API client from the selected profile.

    Raises:
        ConfigurationError: If the profile or API key is missing.
    """
    config = Config.load()
    try:
        profile = config.get_profile(profile_name)
    except ProfileNotFoundError as e:
        raise ConfigurationError(
            f"Profile '{profile_name or config.default_profile}' not found. "
            "Run 'modzyctl config init' or set MODZY_BASE_URL and MODZY_API_KEY."
        ) from e

    return ModzyClient(
        base_url=profile.url,
        api_key=get_api_key(profile),
        timeout=profile.timeout,
        verify_ssl=profile.verify_ssl,
    )


# =============================================================================
# Shared Options
# =============================================================================


def common_options(f: F) -> F:
    """Add --profile, --output and --verbose to a command.

    The wrapped command receives ``profile_name`` and ``output_format``.
    """

    @click.option("--profile", "-p", "profile_name", envvar="MODZY_PROFILE", help="Config profile to use")
    @click.option(
        "--output",
        "-o",
        "output",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
    @wraps(f)
    def wrapper(*args: Any, output: str, verbose: bool, **kwargs: Any) -> Any:
        setup_logging(verbose=verbose)
        kwargs["output_format"] = OutputFormat.from_string(output)
        return f(*args, **kwargs)

    return wrapper  # type: ignore


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Print library errors and exit with a consistent code."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except AuthenticationError as e:
            print_error(f"Authentication failed: {e}")
            sys.exit(ExitCode.AUTH_ERROR)
        except ModzyError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except click.ClickException:
            raise

    return wrapper  # type: ignore


# =============================================================================
# Input Parsing
# =============================================================================


def parse_input_spec(spec: str) -> tuple[str, str, str]:
    """Parse ``INPUT:ITEM=VALUE`` into its three parts.

    Example:
        ``my-input:input.txt=./text.txt`` -> ("my-input", "input.txt", "./text.txt")

    Raises:
        click.BadParameter: If the spec is malformed.
    """
    key, sep, value = spec.partition("=")
    slot, colon, item = key.partition(":")
    if not sep or not colon or not slot or not item:
        raise click.BadParameter(f"Expected INPUT:ITEM=VALUE, got '{spec}'")
    return slot, item, value


def group_inputs(specs: tuple[str, ...]) -> dict[str, dict[str, str]]:
    """Group ``INPUT:ITEM=VALUE`` specs into a nested sources mapping.

    Insertion order follows the order of the specs.
    """
    sources: dict[str, dict[str, str]] = {}
    for spec in specs:
        slot, item, value = parse_input_spec(spec)
        sources.setdefault(slot, {})[item] = value
    return sources
