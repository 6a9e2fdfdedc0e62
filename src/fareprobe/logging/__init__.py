"""Logging module for fareprobe."""

from .logger import (
    ActionLogger,
    PerformanceLogger,
    StateLogger,
    get_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "ActionLogger",
    "StateLogger",
    "PerformanceLogger",
]
