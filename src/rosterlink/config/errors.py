"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a configured value cannot be used, e.g. a non-numeric company id."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required settings such as the 7shifts credentials are absent or blank."""
