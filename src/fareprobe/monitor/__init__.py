"""Passive fare monitoring of the foreground app."""

from .price_monitor import PriceMonitor

__all__ = ["PriceMonitor"]
