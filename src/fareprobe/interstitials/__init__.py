"""Detection and dismissal of unplanned intermediate screens."""

from .handlers import InterstitialHandler
from .registry import InterstitialRegistry

__all__ = ["InterstitialHandler", "InterstitialRegistry"]
