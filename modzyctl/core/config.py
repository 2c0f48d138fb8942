"""Configuration management for modzyctl.

Supports YAML profiles and environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from modzyctl.core.exceptions import ConfigurationError, ProfileNotFoundError
from modzyctl.core.timeouts import DEFAULT_HTTP_TIMEOUT_SECONDS

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "modzyctl"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_URL = "https://app.modzy.com/api"

# Environment variable names
ENV_URL = "MODZY_BASE_URL"
ENV_API_KEY = "MODZY_API_KEY"
ENV_PROFILE = "MODZY_PROFILE"
ENV_VERIFY_SSL = "MODZY_VERIFY_SSL"
ENV_TIMEOUT = "MODZY_TIMEOUT"


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Configuration profile for an API endpoint."""

    url: str = DEFAULT_URL
    api_key: Optional[str] = None
    verify_ssl: bool = True
    timeout: int = DEFAULT_HTTP_TIMEOUT_SECONDS
    # Set when api_key came from the environment; never persisted
    api_key_from_env: bool = field(default=False, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "url": self.url,
            "verify_ssl": self.verify_ssl,
            "timeout": self.timeout,
        }
        if self.api_key and not self.api_key_from_env:
            data["api_key"] = self.api_key
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            url=data.get("url", DEFAULT_URL),
            api_key=data.get("api_key"),
            verify_ssl=data.get("verify_ssl", True),
            timeout=data.get("timeout", DEFAULT_HTTP_TIMEOUT_SECONDS),
        )


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration."""

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.

        Raises:
            ConfigurationError: If the file exists but cannot be parsed.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

                config.default_profile = data.get("default_profile", "default")
                config.output_format = data.get("output_format", "table")

                for name, pdata in (data.get("profiles") or {}).items():
                    config.profiles[name] = Profile.from_dict(pdata or {})
            except (OSError, yaml.YAMLError, AttributeError, TypeError) as e:
                raise ConfigurationError(f"Failed to load config: {e}") from e

        if profile := os.getenv(ENV_PROFILE):
            config.default_profile = profile

        # Environment variable overrides
        url = os.getenv(ENV_URL)
        api_key = os.getenv(ENV_API_KEY)
        if url or api_key:
            base = config.profiles.get(config.default_profile) or Profile()
            try:
                timeout = int(os.getenv(ENV_TIMEOUT, str(base.timeout)))
            except ValueError as e:
                raise ConfigurationError(
                    "Timeout must be an integer", field=ENV_TIMEOUT, value=os.getenv(ENV_TIMEOUT)
                ) from e
            verify_env = os.getenv(ENV_VERIFY_SSL)
            verify_ssl = (
                verify_env.lower() in ("true", "1", "yes") if verify_env else base.verify_ssl
            )

            config.profiles[config.default_profile] = Profile(
                url=url or base.url,
                api_key=api_key or base.api_key,
                verify_ssl=verify_ssl,
                timeout=timeout,
                api_key_from_env=bool(api_key),
            )

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file (environment-provided keys are skipped).

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: p.to_dict() for name, p in self.profiles.items()},
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        try:
            os.chmod(path, 0o600)
        except OSError:
            pass  # May fail on some systems

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        name = name or self.default_profile
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        return self.profiles[name]

    def has_profile(self, name: str) -> bool:
        return name in self.profiles

    def add_profile(
        self,
        name: str,
        url: str = DEFAULT_URL,
        api_key: Optional[str] = None,
        verify_ssl: bool = True,
        timeout: int = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ) -> Profile:
        """Add or update a profile.

        Args:
            name: Profile name.
            url: API base URL.
            api_key: API key stored with the profile.
            verify_ssl: Whether to verify SSL certificates.
            timeout: Request timeout in seconds.

        Returns:
            Created profile.
        """
        profile = Profile(
            url=url,
            api_key=api_key,
            verify_ssl=verify_ssl,
            timeout=timeout,
        )
        self.profiles[name] = profile
        return profile

    def remove_profile(self, name: str) -> bool:
        """Remove a profile.

        Returns:
            True if removed, False if didn't exist.
        """
        if name in self.profiles:
            del self.profiles[name]
            return True
        return False

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name


def get_api_key(profile: Optional[Profile] = None) -> Optional[str]:
    """Get the API key from the environment, falling back to the profile.

    Args:
        profile: Optional profile holding a stored key.

    Returns:
        API key if one is configured.
    """
    if api_key := os.getenv(ENV_API_KEY):
        return api_key
    if profile is not None:
        return profile.api_key
    return None
