"""Automation session records.

A session is owned by the orchestrator and written only by the polling
loop that drives it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..session_exceptions import TerminalStateError
from .enums import AutomationState
from .price import PriceResult

RETRY_EXHAUSTED = "retry-exhausted"
PRICE_TIMEOUT = "price-timeout"
SESSION_TIMEOUT = "session-timeout"
AWAIT_TIMEOUT = "await-timeout"


@dataclass(frozen=True)
class TripParams:
    """Trip supplied by the caller for one quote."""

    destination: str
    pickup: str = ""
    pickup_coordinates: tuple[float, float] | None = None
    destination_coordinates: tuple[float, float] | None = None


@dataclass(frozen=True)
class FailureReason:
    """Why a session ended in ``FAILED`` (or why a wait gave up)."""

    reason: str
    state: AutomationState
    retry_count: int = 0
    message: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Build the failure notification body."""
        return {
            "reason": self.reason,
            "state": self.state.value,
            "retryCount": self.retry_count,
            "message": self.message,
        }


@dataclass
class AutomationSession:
    """One quote attempt against one target app."""

    app_id: str
    trip: TripParams
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: AutomationState = AutomationState.IDLE
    retry_count: int = 0
    """Failed attempts across all states; never decreases."""

    step_count: int = 0
    """Ticks evaluated while the target app was in the foreground; never decreases."""

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    outcome: PriceResult | FailureReason | None = None
    suggestion_skipped: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def result(self) -> PriceResult | None:
        return self.outcome if isinstance(self.outcome, PriceResult) else None

    @property
    def failure(self) -> FailureReason | None:
        return self.outcome if isinstance(self.outcome, FailureReason) else None

    def transition_to(self, state: AutomationState) -> AutomationState:
        """Move to a non-terminal state and return the previous one."""
        self._ensure_not_terminal(state)
        previous = self.state
        self.state = state
        return previous

    def record_retry(self) -> None:
        self.retry_count += 1

    def record_step(self) -> None:
        self.step_count += 1

    def capture(self, result: PriceResult) -> None:
        """Finish the session with a captured price."""
        self._ensure_not_terminal(AutomationState.CAPTURED)
        self.state = AutomationState.CAPTURED
        self.outcome = result

    def fail(self, reason: FailureReason) -> None:
        """Finish the session with a failure."""
        self._ensure_not_terminal(AutomationState.FAILED)
        self.state = AutomationState.FAILED
        self.outcome = reason

    def _ensure_not_terminal(self, attempted: AutomationState) -> None:
        if self.state.is_terminal:
            raise TerminalStateError(self.session_id, self.state.value, attempted.value)
