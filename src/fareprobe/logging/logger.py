"""Structured logging configuration for fareprobe using structlog.

Logs go to stderr (and optionally a file) so that stdout stays free for
CLI output such as ``fareprobe quote --json``.
"""

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings

DISABLE_ENV_VAR = "FAREPROBE_DISABLE_CONSOLE_LOGGING"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = False,
    colorize: bool = True,
) -> None:
    """Configure structured logging for fareprobe.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output (overridden by FAREPROBE_DISABLE_CONSOLE_LOGGING)
        add_timestamp: Add timestamps to logs
        add_caller_info: Add caller information
        colorize: Colorize console output (only for non-structured)
    """
    if os.getenv(DISABLE_ENV_VAR) == "1":
        console = False
        log_file = None

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())
        level = "CRITICAL"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )


_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Initialize logging from settings on first use, not at import time."""
    global _logging_initialized

    if _logging_initialized:
        return

    if os.getenv(DISABLE_ENV_VAR) == "1":
        logging.disable(logging.CRITICAL)
        _logging_initialized = True
        return

    try:
        settings = get_settings()
        log_file = None
        if settings.log_path is not None:
            log_file = settings.log_path / f"fareprobe_{datetime.now().strftime('%Y%m%d')}.log"
        setup_logging(
            level="DEBUG" if settings.debug_mode else settings.log_level,
            log_file=log_file,
            structured=settings.structured_logs,
            colorize=settings.debug_mode,
        )
    except (AttributeError, OSError, ValueError):
        # Broken settings or an unwritable log path fall back to plain console logs
        setup_logging(level="INFO", structured=False)

    _logging_initialized = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.BoundLogger, structlog.get_logger(name))


class ActionLogger:
    """Specialized logger for UI actuation (clicks, taps, text entry)."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        self.logger = base_logger or get_logger(__name__)

    def log_action_start(self, action_type: str, target: Any, **kwargs) -> dict[str, Any]:
        """Log action start.

        Args:
            action_type: Type of action (e.g. ``click``, ``tap``, ``set_text``)
            target: Action target
            **kwargs: Additional context

        Returns:
            Action context dict
        """
        context = {
            "action_type": action_type,
            "target": str(target),
            "start_time": datetime.now(timezone.utc).isoformat(),
            **kwargs,
        }
        self.logger.debug("action_started", **context)
        return context

    def log_action_end(
        self,
        context: dict[str, Any],
        success: bool,
        error: Exception | None = None,
    ) -> None:
        """Log action end.

        Args:
            context: Action context from log_action_start
            success: Whether the target reported success
            error: Optional error
        """
        end_time = datetime.now(timezone.utc)
        start_time = datetime.fromisoformat(context["start_time"])

        log_data = {
            **context,
            "end_time": end_time.isoformat(),
            "duration": (end_time - start_time).total_seconds(),
            "success": success,
        }

        if error:
            log_data["error"] = str(error)
            log_data["error_type"] = type(error).__name__

        if success:
            self.logger.info("action_completed", **log_data)
        else:
            # Unreliable actuation is routine; the next fallback step follows
            self.logger.debug("action_failed", **log_data)


class StateLogger:
    """Specialized logger for automation state transitions."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        self.logger = base_logger or get_logger(__name__)

    def log_transition(
        self,
        from_state: str,
        to_state: str,
        trigger: str | None = None,
        success: bool = True,
        **kwargs,
    ) -> None:
        """Log state transition.

        Args:
            from_state: Source state
            to_state: Target state
            trigger: What caused the transition
            success: Whether the transition moves the flow forward
            **kwargs: Additional context
        """
        log_data = {
            "from_state": from_state,
            "to_state": to_state,
            "success": success,
            **kwargs,
        }

        if trigger:
            log_data["trigger"] = trigger

        if success:
            self.logger.info("state_transition", **log_data)
        else:
            self.logger.warning("state_transition_failed", **log_data)


class PerformanceLogger:
    """Logger for tick and scan timings."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        self.logger = base_logger or get_logger(__name__)
        self.metrics: dict[str, list[float]] = {}

    def log_timing(self, operation: str, duration: float, **kwargs) -> None:
        """Log operation timing.

        Args:
            operation: Operation name
            duration: Duration in seconds
            **kwargs: Additional context
        """
        self.metrics.setdefault(operation, []).append(duration)
        self.logger.debug("performance_timing", operation=operation, duration=duration, **kwargs)

    def get_stats(self, operation: str | None = None) -> dict[str, Any]:
        """Get timing statistics.

        Args:
            operation: Optional specific operation

        Returns:
            Statistics dict
        """
        if operation:
            values = self.metrics.get(operation)
            return self._summarize(values) if values else {}
        return {op: self._summarize(values) for op, values in self.metrics.items() if values}

    @staticmethod
    def _summarize(values: list[float]) -> dict[str, Any]:
        return {
            "count": len(values),
            "mean": sum(values) / len(values),
            "min": min(values),
            "max": max(values),
            "total": sum(values),
        }
