"""Configuration exceptions.

This module contains exceptions for target-app catalog loading
and settings validation.
"""

from .base_exceptions import FareprobeException


class ConfigurationError(FareprobeException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid."""

    def __init__(self, config_key: str, reason: str, **kwargs) -> None:
        """Initialize with config details."""
        super().__init__(
            f"Invalid configuration for '{config_key}': {reason}",
            error_code="INVALID_CONFIG",
            context={"config_key": config_key, "reason": reason, **kwargs},
        )


class UnknownTargetAppError(ConfigurationError):
    """Raised when an app id is not present in the target-app catalog."""

    def __init__(self, app_id: str, **kwargs) -> None:
        """Initialize with the unknown app id."""
        super().__init__(
            f"Target app '{app_id}' is not configured",
            error_code="UNKNOWN_TARGET_APP",
            context={"app_id": app_id, **kwargs},
        )
