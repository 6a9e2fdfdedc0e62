"""Exception hierarchy for fareprobe.

This module re-exports all exceptions from domain-specific modules
for convenience.
"""

from .base_exceptions import FareprobeException
from .config_exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    UnknownTargetAppError,
)
from .device_exceptions import DeviceCommandError, DeviceException
from .session_exceptions import (
    SessionConflictError,
    SessionException,
    SessionNotFoundError,
    TerminalStateError,
)

__all__ = [
    "FareprobeException",
    "ConfigurationError",
    "InvalidConfigurationError",
    "UnknownTargetAppError",
    "DeviceException",
    "DeviceCommandError",
    "SessionException",
    "SessionConflictError",
    "SessionNotFoundError",
    "TerminalStateError",
]
