"""Price candidates and captured results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .enums import SelectionPolicy


@dataclass(frozen=True)
class PriceCandidate:
    """A monetary value recognised in one piece of on-screen text."""

    value: float
    """Parsed numeric value."""

    source_text: str
    """Text the value was read from."""

    strategy: str
    """Name of the pattern or scan strategy that produced the value."""


@dataclass(frozen=True)
class PriceResult:
    """The fare selected for one target app, with everything considered."""

    app_id: str
    app_name: str
    price: float
    currency: str
    candidates: tuple[PriceCandidate, ...] = ()
    service_type: str = ""
    eta_minutes: int | None = None
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    strategy: str = "combined_scan"
    policy: SelectionPolicy = SelectionPolicy.LOWEST

    @property
    def all_prices(self) -> list[float]:
        """Values of every candidate, in the order they were seen."""
        return [candidate.value for candidate in self.candidates]

    def to_payload(self) -> dict[str, Any]:
        """Build the push-notification body delivered to listeners.

        Returns:
            JSON-serialisable dictionary with camelCase keys
        """
        return {
            "appId": self.app_id,
            "appName": self.app_name,
            "price": self.price,
            "currency": self.currency,
            "serviceType": self.service_type,
            "etaMinutes": self.eta_minutes,
            "timestamp": int(self.captured_at.timestamp() * 1000),
            "allCandidates": self.all_prices,
            "strategy": self.strategy,
            "policy": self.policy.value,
        }
