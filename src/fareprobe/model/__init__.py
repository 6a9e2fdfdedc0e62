"""Data model for the automation core."""

from .enums import ActuationStep, AutomationState, LocatorIntent, SelectionPolicy
from .price import PriceCandidate, PriceResult
from .session import (
    AWAIT_TIMEOUT,
    PRICE_TIMEOUT,
    RETRY_EXHAUSTED,
    SESSION_TIMEOUT,
    AutomationSession,
    FailureReason,
    TripParams,
)

__all__ = [
    "ActuationStep",
    "AutomationState",
    "LocatorIntent",
    "SelectionPolicy",
    "PriceCandidate",
    "PriceResult",
    "AutomationSession",
    "FailureReason",
    "TripParams",
    "RETRY_EXHAUSTED",
    "PRICE_TIMEOUT",
    "SESSION_TIMEOUT",
    "AWAIT_TIMEOUT",
]
