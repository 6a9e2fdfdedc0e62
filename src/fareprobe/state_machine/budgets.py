"""Budgets bounding how long an automation session may try.

Each budget has an explicit unit:
- RetryBudget counts failed attempts
- TickBudget counts polling ticks
- WallClockBudget counts seconds

Per-state budgets are created fresh each time a state is entered.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..config.settings import FareprobeSettings
from ..config.target_apps import AutomationBudgets


@dataclass
class RetryBudget:
    """Failed attempts tolerated before giving up.

    With ``bound`` N the budget is exceeded on the (N+1)-th failure, so
    N+1 attempts are made in total.
    """

    bound: int
    """Failures tolerated (attempts made = bound + 1)."""

    failures: int = 0

    def record_failure(self) -> bool:
        """Record one failed attempt.

        Returns:
            True once the bound is exceeded
        """
        self.failures += 1
        return self.exceeded

    @property
    def exceeded(self) -> bool:
        return self.failures > self.bound

    @property
    def remaining(self) -> int:
        return max(0, self.bound + 1 - self.failures)


@dataclass
class TickBudget:
    """Ticks to spend in a state before moving on (or failing)."""

    bound: int
    """Ticks tolerated; exceeded on tick bound + 1."""

    ticks: int = 0

    def consume(self) -> bool:
        """Spend one tick.

        Returns:
            True once the bound is exceeded
        """
        self.ticks += 1
        return self.exceeded

    @property
    def exceeded(self) -> bool:
        return self.ticks > self.bound


@dataclass
class WallClockBudget:
    """Seconds a whole session may run."""

    seconds: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    started_at: float | None = None

    def start(self) -> None:
        self.started_at = self.clock()

    @property
    def elapsed(self) -> float:
        if self.started_at is None:
            return 0.0
        return self.clock() - self.started_at

    @property
    def exceeded(self) -> bool:
        return self.started_at is not None and self.elapsed > self.seconds


@dataclass(frozen=True)
class BudgetPlan:
    """Resolved bounds for one session: settings overlaid with app overrides."""

    locate_retry_bound: int = 10
    entry_retry_bound: int = 3
    selection_retry_bound: int = 10
    suggestion_settle_ticks: int = 3
    price_wait_ticks: int = 10
    session_timeout: float = 60.0

    @classmethod
    def resolve(
        cls, settings: FareprobeSettings, overrides: AutomationBudgets | None = None
    ) -> BudgetPlan:
        """Combine settings with per-app overrides (set values win).

        Args:
            settings: Runtime settings
            overrides: Per-app budgets from the catalog

        Returns:
            BudgetPlan
        """
        values = {
            "locate_retry_bound": settings.locate_retry_bound,
            "entry_retry_bound": settings.entry_retry_bound,
            "selection_retry_bound": settings.selection_retry_bound,
            "suggestion_settle_ticks": settings.suggestion_settle_ticks,
            "price_wait_ticks": settings.price_wait_ticks,
            "session_timeout": settings.session_timeout,
        }
        if overrides is not None:
            values.update(overrides.model_dump(exclude_none=True))
        return cls(**values)

    def locate_budget(self) -> RetryBudget:
        return RetryBudget(self.locate_retry_bound)

    def entry_budget(self) -> RetryBudget:
        return RetryBudget(self.entry_retry_bound)

    def selection_budget(self) -> RetryBudget:
        return RetryBudget(self.selection_retry_bound)

    def settle_budget(self) -> TickBudget:
        return TickBudget(self.suggestion_settle_ticks)

    def price_budget(self) -> TickBudget:
        return TickBudget(self.price_wait_ticks)

    def session_budget(self, clock: Callable[[], float] = time.monotonic) -> WallClockBudget:
        return WallClockBudget(self.session_timeout, clock=clock)
