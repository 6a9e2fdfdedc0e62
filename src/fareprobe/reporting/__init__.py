"""Listener notifications for session outcomes and price updates."""

from .events import Event, EventCallback, EventCollector, EventRegistry, EventType

__all__ = ["Event", "EventCallback", "EventCollector", "EventRegistry", "EventType"]
