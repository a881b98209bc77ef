"""Errors raised while assembling sync configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, e.g. a non-positive page size."""


class MissingConfigurationError(ConfigurationError):
    """A required environment variable such as ``PURE_API_KEY`` is unset or blank."""
