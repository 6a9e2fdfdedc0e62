"""Per-app automation state machine.

One tick is one evaluation of the session's current state against a
fresh UI snapshot:

    WAITING_FOR_APP -> LOCATING_FIELD -> ENTERING_DESTINATION
        -> WAITING_FOR_SUGGESTIONS -> SELECTING_SUGGESTION
        -> WAITING_FOR_PRICE -> CAPTURED | FAILED

The machine holds no thread of its own; the orchestrator decides when to
tick. Nothing raised while evaluating a tick escapes :meth:`tick`.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from ..config.target_apps import TargetApp
from ..extraction.price_extractor import PriceExtractor
from ..hal.interfaces.snapshot_provider import ISnapshotProvider
from ..interstitials.registry import InterstitialRegistry
from ..locators.actuation import TextInjector
from ..locators.element_locator import ElementLocator
from ..logging import PerformanceLogger, StateLogger, get_logger
from ..model.enums import AutomationState, LocatorIntent, SelectionPolicy
from ..model.session import (
    PRICE_TIMEOUT,
    RETRY_EXHAUSTED,
    SESSION_TIMEOUT,
    AutomationSession,
    FailureReason,
)
from ..tree.node import UiNode
from ..tree.traversal import collect_texts
from .budgets import BudgetPlan, RetryBudget, TickBudget, WallClockBudget

logger = get_logger(__name__)


@dataclass(frozen=True)
class TickOutcome:
    """What one tick did."""

    previous: AutomationState
    state: AutomationState
    evaluated: bool = True
    """False when the tick was a no-op (no snapshot, app not in foreground, terminal)."""

    interstitial: str | None = None
    """Name of the interstitial handled on this tick, if any."""

    error: str | None = None

    @property
    def changed(self) -> bool:
        return self.previous is not self.state


class AutomationStateMachine:
    """Drives one session through the quote flow for one target app.

    Example:
        >>> machine = AutomationStateMachine(session, app, provider, locator, ...)
        >>> machine.start()
        >>> while not session.is_terminal:
        ...     machine.tick()
    """

    def __init__(
        self,
        session: AutomationSession,
        app: TargetApp,
        provider: ISnapshotProvider,
        locator: ElementLocator,
        injector: TextInjector,
        extractor: PriceExtractor,
        interstitials: InterstitialRegistry,
        plan: BudgetPlan,
        policy: Callable[[], SelectionPolicy] = lambda: SelectionPolicy.LOWEST,
        clock: Callable[[], float] = time.monotonic,
        state_logger: StateLogger | None = None,
        performance_logger: PerformanceLogger | None = None,
    ) -> None:
        """Initialize the machine.

        Args:
            session: Session record written by this machine
            app: Target app configuration
            provider: Source of UI snapshots
            locator: Element locator
            injector: Text injector for the destination
            extractor: Price extractor bound to ``app``
            interstitials: Interstitial handlers for ``app``
            plan: Resolved budgets
            policy: Returns the selection policy current at capture time
            clock: Monotonic clock for the session budget
            state_logger: Logger for transitions
            performance_logger: Logger for tick timings
        """
        self.session = session
        self.app = app
        self.provider = provider
        self.locator = locator
        self.injector = injector
        self.extractor = extractor
        self.interstitials = interstitials
        self.plan = plan
        self.policy = policy
        self.state_logger = state_logger or StateLogger(logger)
        self.performance_logger = performance_logger or PerformanceLogger(logger)
        self.session_budget: WallClockBudget = plan.session_budget(clock)
        self._retry_budget: RetryBudget | None = None
        self._tick_budget: TickBudget | None = None

    @property
    def state(self) -> AutomationState:
        return self.session.state

    def start(self) -> None:
        """Begin the session: ``IDLE -> WAITING_FOR_APP`` and start the session clock."""
        if self.session.state is not AutomationState.IDLE:
            return
        self.session_budget.start()
        self._enter(AutomationState.WAITING_FOR_APP, trigger="start")

    def tick(self) -> TickOutcome:
        """Evaluate the current state once.

        Returns:
            TickOutcome describing what happened
        """
        previous = self.session.state
        if self.session.is_terminal:
            return TickOutcome(previous, previous, evaluated=False)
        if previous is AutomationState.IDLE:
            self.start()
            return TickOutcome(previous, self.session.state)

        start = time.perf_counter()
        try:
            return self._tick(previous)
        finally:
            self.performance_logger.log_timing(
                "automation_tick",
                time.perf_counter() - start,
                app_id=self.app.app_id,
                state=previous.value,
            )

    def _tick(self, previous: AutomationState) -> TickOutcome:
        if self.session_budget.exceeded:
            self._fail(
                SESSION_TIMEOUT,
                self.session.retry_count,
                f"Session exceeded {self.plan.session_timeout:.0f}s",
            )
            return TickOutcome(previous, self.session.state)

        try:
            root = self.provider.snapshot()
        except Exception as e:
            logger.warning("snapshot_failed", app_id=self.app.app_id, error=str(e), exc_info=True)
            self._no_result_tick()
            return TickOutcome(previous, self.session.state, evaluated=False, error=str(e))

        if root is None:
            logger.debug("snapshot_unavailable", app_id=self.app.app_id)
            self._no_result_tick()
            return TickOutcome(previous, self.session.state, evaluated=False)

        if root.app_id != self.app.app_id:
            logger.debug(
                "target_not_foreground", app_id=self.app.app_id, foreground=root.app_id
            )
            return TickOutcome(previous, previous, evaluated=False)

        self.session.record_step()

        if previous in self.app.interstitial_states:
            try:
                if self.interstitials.handle(root):
                    return TickOutcome(
                        previous, self.session.state, interstitial=self.interstitials.last_handled
                    )
            except Exception as e:
                logger.warning(
                    "interstitial_check_failed", app_id=self.app.app_id, error=str(e), exc_info=True
                )

        try:
            self._evaluate(previous, root)
        except Exception as e:
            logger.error(
                "tick_failed",
                app_id=self.app.app_id,
                state=previous.value,
                error=str(e),
                exc_info=True,
            )
            self._no_result_tick()
            return TickOutcome(previous, self.session.state, error=str(e))

        return TickOutcome(previous, self.session.state)

    def _evaluate(self, state: AutomationState, root: UiNode) -> None:
        if state is AutomationState.WAITING_FOR_APP:
            self._enter(AutomationState.LOCATING_FIELD, trigger="app_foreground")
        elif state is AutomationState.LOCATING_FIELD:
            self._locate_field(root)
        elif state is AutomationState.ENTERING_DESTINATION:
            self._enter_destination(root)
        elif state is AutomationState.WAITING_FOR_SUGGESTIONS:
            if self._tick_budget is not None and self._tick_budget.consume():
                self._enter(AutomationState.SELECTING_SUGGESTION, trigger="suggestions_settled")
        elif state is AutomationState.SELECTING_SUGGESTION:
            self._select_suggestion(root)
        elif state is AutomationState.WAITING_FOR_PRICE:
            self._wait_for_price(root)

    def _locate_field(self, root: UiNode) -> None:
        result = self.locator.locate(root, LocatorIntent.DESTINATION_FIELD, self.app)
        logger.debug(
            "locate_attempt",
            app_id=self.app.app_id,
            intent=LocatorIntent.DESTINATION_FIELD.value,
            found=result.found,
            strategy=result.strategy,
        )
        if result.found:
            self._enter(AutomationState.ENTERING_DESTINATION, trigger=f"located:{result.strategy}")
            return
        if self._record_failure():
            self._fail(
                RETRY_EXHAUSTED,
                self._retry_budget.failures if self._retry_budget else 0,
                "Destination field not found",
            )

    def _enter_destination(self, root: UiNode) -> None:
        if self.injector.inject(root, self.session.trip.destination):
            self._enter(AutomationState.WAITING_FOR_SUGGESTIONS, trigger="destination_entered")
            return
        if self._record_failure():
            logger.warning("destination_entry_unconfirmed", app_id=self.app.app_id)
            self._enter(AutomationState.WAITING_FOR_SUGGESTIONS, trigger="entry_retries_exhausted")

    def _select_suggestion(self, root: UiNode) -> None:
        result = self.locator.locate(root, LocatorIntent.SUGGESTION_ITEM, self.app)
        if result.found:
            self._enter(AutomationState.WAITING_FOR_PRICE, trigger=f"selected:{result.strategy}")
            return
        if self._record_failure():
            self.session.suggestion_skipped = True
            logger.warning("suggestion_skipped", app_id=self.app.app_id)
            self._enter(AutomationState.WAITING_FOR_PRICE, trigger="selection_retries_exhausted")

    def _wait_for_price(self, root: UiNode) -> None:
        result = self.extractor.capture(root, self.policy())
        if result is None:
            self._no_result_tick()
            return
        previous = self.session.state
        self.session.capture(result)
        self.state_logger.log_transition(
            previous.value,
            AutomationState.CAPTURED.value,
            trigger="price_captured",
            session_id=self.session.session_id,
            app_id=self.app.app_id,
            price=result.price,
            candidates=len(result.candidates),
        )

    def _no_result_tick(self) -> None:
        """Count a tick without a price; only meaningful while waiting for one."""
        if self.session.state is not AutomationState.WAITING_FOR_PRICE:
            return
        if self._tick_budget is not None and self._tick_budget.consume():
            self._fail(
                PRICE_TIMEOUT,
                self._tick_budget.ticks,
                f"No price after {self.plan.price_wait_ticks} ticks",
            )

    def _record_failure(self) -> bool:
        self.session.record_retry()
        return self._retry_budget is not None and self._retry_budget.record_failure()

    def _enter(self, state: AutomationState, trigger: str) -> None:
        previous = self.session.transition_to(state)
        self._retry_budget = None
        self._tick_budget = None
        if state is AutomationState.LOCATING_FIELD:
            self._retry_budget = self.plan.locate_budget()
        elif state is AutomationState.ENTERING_DESTINATION:
            self._retry_budget = self.plan.entry_budget()
        elif state is AutomationState.WAITING_FOR_SUGGESTIONS:
            self._tick_budget = self.plan.settle_budget()
        elif state is AutomationState.SELECTING_SUGGESTION:
            self._retry_budget = self.plan.selection_budget()
        elif state is AutomationState.WAITING_FOR_PRICE:
            self._tick_budget = self.plan.price_budget()

        self.state_logger.log_transition(
            previous.value,
            state.value,
            trigger=trigger,
            session_id=self.session.session_id,
            app_id=self.app.app_id,
        )

    def _fail(self, reason: str, retry_count: int, message: str) -> None:
        state = self.session.state
        self.session.fail(
            FailureReason(reason=reason, state=state, retry_count=retry_count, message=message)
        )
        self.state_logger.log_transition(
            state.value,
            AutomationState.FAILED.value,
            trigger=reason,
            success=False,
            session_id=self.session.session_id,
            app_id=self.app.app_id,
            retry_count=retry_count,
        )
