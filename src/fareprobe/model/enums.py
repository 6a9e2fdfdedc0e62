"""Enumerations shared across the automation core."""

from __future__ import annotations

from enum import Enum


class AutomationState(str, Enum):
    """State of one automation session.

    ``UNKNOWN`` is never held by a session; it is what status queries
    report for ids the orchestrator does not know.
    """

    IDLE = "idle"
    WAITING_FOR_APP = "waiting_for_app"
    LOCATING_FIELD = "locating_field"
    ENTERING_DESTINATION = "entering_destination"
    WAITING_FOR_SUGGESTIONS = "waiting_for_suggestions"
    SELECTING_SUGGESTION = "selecting_suggestion"
    WAITING_FOR_PRICE = "waiting_for_price"
    CAPTURED = "captured"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        """Whether the state ends a session."""
        return self in (AutomationState.CAPTURED, AutomationState.FAILED)


class LocatorIntent(str, Enum):
    """Semantic role of an element the locator is asked to find."""

    DESTINATION_FIELD = "destination_field"
    SUGGESTION_ITEM = "suggestion_item"
    CONFIRM_BUTTON = "confirm_button"


class ActuationStep(str, Enum):
    """One rung of the layered click fallback."""

    NODE = "node"
    """Accessibility click on the matched node."""

    PARENT = "parent"
    """Accessibility click on the parent."""

    GRANDPARENT = "grandparent"
    """Accessibility click on the grandparent."""

    GESTURE = "gesture"
    """Synthetic tap at the centre of the node's bounds."""

    ANCESTOR_GESTURE = "ancestor_gesture"
    """Synthetic tap at the centre of the nearest ancestor with non-empty bounds."""

    SCREEN_REGION = "screen_region"
    """Synthetic tap at the app's configured fallback region."""


class SelectionPolicy(str, Enum):
    """Rule used to pick one fare out of several candidates."""

    LOWEST = "lowest"
    HIGHEST_TIER = "highest-tier"
    FASTEST_ARRIVAL = "fastest-arrival"

    @classmethod
    def parse(cls, value: str | SelectionPolicy) -> SelectionPolicy:
        """Parse a policy name, accepting the consumer app's preference names.

        Args:
            value: Policy value such as ``"lowest"`` or ``"best_service"``

        Returns:
            Matching SelectionPolicy

        Raises:
            ValueError: If the name is not recognised
        """
        if isinstance(value, SelectionPolicy):
            return value
        normalized = value.strip().lower()
        aliases = {
            "lowest_price": cls.LOWEST,
            "best_service": cls.HIGHEST_TIER,
            "fastest_arrival": cls.FASTEST_ARRIVAL,
            "highest_tier": cls.HIGHEST_TIER,
        }
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)
