"""Automation orchestrator - session lifecycle and caller-facing API.

The orchestrator owns every AutomationSession. It starts at most one
active session per target app, drives each session from its own polling
thread (or from explicit :meth:`AutomationOrchestrator.tick` calls when
background polling is disabled) and reports outcomes to listeners.

Example:
    orchestrator = AutomationOrchestrator(provider, device)
    session_id = orchestrator.start_session("com.ubercab", TripParams("Cairo Festival City"))
    outcome = orchestrator.await_result(session_id, max_wait_ms=60_000)
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..config.settings import FareprobeSettings, get_settings
from ..config.target_apps import TargetApp, TargetAppCatalog, load_catalog
from ..extraction.price_extractor import PriceExtractor
from ..hal.interfaces.device_controller import IDeviceController
from ..hal.interfaces.snapshot_provider import ISnapshotProvider
from ..interstitials.registry import InterstitialRegistry
from ..locators.actuation import Actuator, TextInjector
from ..locators.element_locator import ElementLocator
from ..logging import get_logger
from ..model.enums import AutomationState, SelectionPolicy
from ..model.price import PriceResult
from ..model.session import AWAIT_TIMEOUT, AutomationSession, FailureReason, TripParams
from ..reporting.events import Event, EventCallback, EventRegistry, EventType
from ..session_exceptions import SessionConflictError, SessionNotFoundError
from ..state_machine.automation_machine import AutomationStateMachine, TickOutcome
from ..state_machine.budgets import BudgetPlan
from .polling import PollingLoop

logger = get_logger(__name__)

AWAIT_POLL_INTERVAL = 0.05


@dataclass
class _SessionEntry:
    session: AutomationSession
    machine: AutomationStateMachine
    loop: PollingLoop | None = None
    tick_lock: threading.Lock = field(default_factory=threading.Lock)
    cancelled: threading.Event = field(default_factory=threading.Event)


class AutomationOrchestrator:
    """Starts, drives, cancels and collects automation sessions."""

    def __init__(
        self,
        provider: ISnapshotProvider,
        device: IDeviceController | None = None,
        catalog: TargetAppCatalog | None = None,
        settings: FareprobeSettings | None = None,
        events: EventRegistry | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            provider: Snapshot provider (injected, never a global)
            device: Device controller for launching apps, gestures and prompts
            catalog: Target-app catalog (default: loaded per settings)
            settings: Runtime settings (default: ``get_settings()``)
            events: Event registry for listeners
            clock: Monotonic clock for session budgets and prompts
        """
        self.settings = settings or get_settings()
        self.catalog = catalog or load_catalog(self.settings.target_apps_path)
        self.provider = provider
        self.device = device
        self.events = events or EventRegistry()
        self._clock = clock
        self._policy = self.settings.selection_policy
        self._sessions: dict[str, _SessionEntry] = {}
        self._lock = threading.RLock()
        self.locator = ElementLocator(Actuator(device))
        self.injector = TextInjector()

    # -- selection preference ---------------------------------------------

    @property
    def selection_preference(self) -> SelectionPolicy:
        return self._policy

    def set_selection_preference(self, policy: SelectionPolicy | str) -> None:
        """Set the policy applied when the next price is captured.

        Args:
            policy: SelectionPolicy or a name such as ``"best_service"``

        Raises:
            ValueError: If the name is not recognised
        """
        self._policy = SelectionPolicy.parse(policy)
        logger.info("selection_preference_set", policy=self._policy.value)

    # -- listeners -----------------------------------------------------------

    def add_listener(self, callback: EventCallback, event_type: EventType | None = None) -> None:
        self.events.register(event_type, callback)

    def remove_listener(
        self, callback: EventCallback, event_type: EventType | None = None
    ) -> bool:
        return self.events.unregister(event_type, callback)

    # -- session lifecycle ---------------------------------------------------

    def start_session(self, app_id: str, trip: TripParams | str) -> str:
        """Start automating ``app_id`` for ``trip``.

        Args:
            app_id: Target app id from the catalog
            trip: Trip parameters, or just the destination label

        Returns:
            New session id

        Raises:
            UnknownTargetAppError: If the app is not in the catalog
            SessionConflictError: If the app already has an active session
        """
        app = self.catalog.get(app_id)
        if isinstance(trip, str):
            trip = TripParams(destination=trip)

        with self._lock:
            for session_id, entry in list(self._sessions.items()):
                if entry.session.app_id != app_id:
                    continue
                if not entry.session.is_terminal:
                    raise SessionConflictError(app_id, entry.session.session_id)
                # An uncollected terminal record is replaced by the new session
                del self._sessions[session_id]

            session = AutomationSession(app_id=app_id, trip=trip)
            entry = _SessionEntry(session=session, machine=self._build_machine(session, app))
            entry.machine.start()
            self._sessions[session.session_id] = entry

        if self.device is not None and not self.device.launch_app(app_id):
            logger.warning("launch_failed", app_id=app_id, session_id=session.session_id)

        logger.info(
            "session_started",
            session_id=session.session_id,
            app_id=app_id,
            destination=trip.destination,
        )
        self._emit(
            EventType.SESSION_STARTED,
            session,
            {"appId": app_id, "destination": trip.destination},
        )

        if self.settings.run_in_background:
            entry.loop = PollingLoop(
                name=f"fareprobe-{app_id}",
                tick=lambda: self._run_tick(entry),
                interval=self.settings.automation_tick_interval,
                initial_delay=self.settings.initial_delay,
            )
            entry.loop.start()

        return session.session_id

    def cancel_session(self, session_id: str) -> bool:
        """Stop and discard a session. UI interactions already made are not undone.

        Returns:
            True if the session existed
        """
        with self._lock:
            entry = self._sessions.pop(session_id, None)
        if entry is None:
            return False

        entry.cancelled.set()
        if entry.loop is not None:
            entry.loop.stop()
        logger.info(
            "session_cancelled",
            session_id=session_id,
            app_id=entry.session.app_id,
            state=entry.session.state.value,
        )
        self._emit(EventType.SESSION_CANCELLED, entry.session, {"appId": entry.session.app_id})
        return True

    def get_session_state(self, session_id: str) -> AutomationState:
        """Current state, or ``UNKNOWN`` for ids that are not (or no longer) held."""
        entry = self._sessions.get(session_id)
        return entry.session.state if entry is not None else AutomationState.UNKNOWN

    def is_complete(self, session_id: str) -> bool:
        entry = self._sessions.get(session_id)
        return entry is not None and entry.session.is_terminal

    def get_session(self, session_id: str) -> AutomationSession | None:
        entry = self._sessions.get(session_id)
        return entry.session if entry is not None else None

    def active_sessions(self) -> list[str]:
        with self._lock:
            return [sid for sid, entry in self._sessions.items() if not entry.session.is_terminal]

    def tick(self, session_id: str) -> AutomationState:
        """Drive one tick synchronously (for ``run_in_background=False``).

        Raises:
            SessionNotFoundError: If the session is unknown
        """
        entry = self._entry(session_id)
        self._run_tick(entry)
        return entry.session.state

    def await_result(self, session_id: str, max_wait_ms: int) -> PriceResult | FailureReason:
        """Wait for a session to finish and collect its outcome.

        Collecting a terminal outcome discards the session. Without
        background polling the wait drives the ticks itself.

        Args:
            session_id: Session to wait for
            max_wait_ms: Wait budget in milliseconds

        Returns:
            PriceResult, the session's FailureReason, or a FailureReason with
            ``await-timeout`` when the budget elapses (the session keeps running)

        Raises:
            SessionNotFoundError: If the session is unknown or cancelled meanwhile
        """
        deadline = self._clock() + max_wait_ms / 1000.0
        manual = not self.settings.run_in_background
        poll = self.settings.automation_tick_interval if manual else AWAIT_POLL_INTERVAL

        while True:
            entry = self._entry(session_id)
            if entry.session.is_terminal:
                with self._lock:
                    if self._sessions.get(session_id) is entry:
                        del self._sessions[session_id]
                return entry.session.outcome

            remaining = deadline - self._clock()
            if remaining <= 0:
                session = entry.session
                logger.info("await_timeout", session_id=session_id, state=session.state.value)
                return FailureReason(
                    reason=AWAIT_TIMEOUT,
                    state=session.state,
                    retry_count=session.retry_count,
                    message=f"No outcome within {max_wait_ms}ms",
                )

            if manual:
                self._run_tick(entry)
                if entry.session.is_terminal:
                    continue
            entry.cancelled.wait(min(poll, remaining))

    def shutdown(self) -> None:
        """Cancel every session and wait briefly for polling threads to exit."""
        with self._lock:
            session_ids = list(self._sessions)
            loops = [entry.loop for entry in self._sessions.values() if entry.loop is not None]
        for session_id in session_ids:
            self.cancel_session(session_id)
        for loop in loops:
            loop.join(timeout=self.settings.automation_tick_interval * 2)

    # -- internals -----------------------------------------------------------

    def _entry(self, session_id: str) -> _SessionEntry:
        entry = self._sessions.get(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)
        return entry

    def _build_machine(self, session: AutomationSession, app: TargetApp) -> AutomationStateMachine:
        return AutomationStateMachine(
            session=session,
            app=app,
            provider=self.provider,
            locator=self.locator,
            injector=self.injector,
            extractor=PriceExtractor(app, self.settings.identifier_markers),
            interstitials=InterstitialRegistry.for_app(
                app, self.locator, self.device, self.settings.prompt_interval, self._clock
            ),
            plan=BudgetPlan.resolve(self.settings, app.budgets),
            policy=lambda: self._policy,
            clock=self._clock,
        )

    def _run_tick(self, entry: _SessionEntry) -> bool:
        """Run one tick for ``entry``; returns whether polling should continue."""
        with entry.tick_lock:
            if entry.cancelled.is_set():
                return False
            outcome = entry.machine.tick()
            if entry.cancelled.is_set():
                # Cancelled while the tick ran: drop its results silently
                return False
            self._report(entry.session, outcome)
            return not entry.session.is_terminal

    def _report(self, session: AutomationSession, outcome: TickOutcome) -> None:
        if outcome.interstitial:
            self._emit(
                EventType.INTERSTITIAL_HANDLED,
                session,
                {"appId": session.app_id, "interstitial": outcome.interstitial},
            )
        if not outcome.changed:
            return

        self._emit(
            EventType.SESSION_STATE_CHANGED,
            session,
            {"appId": session.app_id, "from": outcome.previous.value, "to": outcome.state.value},
        )
        if session.result is not None:
            logger.info(
                "price_captured",
                session_id=session.session_id,
                app_id=session.app_id,
                price=session.result.price,
            )
            self._emit(EventType.PRICE_CAPTURED, session, session.result.to_payload())
        elif session.failure is not None:
            logger.warning(
                "session_failed",
                session_id=session.session_id,
                app_id=session.app_id,
                reason=session.failure.reason,
            )
            self._emit(
                EventType.SESSION_FAILED,
                session,
                {"appId": session.app_id, **session.failure.to_payload()},
            )

    def _emit(self, event_type: EventType, session: AutomationSession, data: dict) -> None:
        self.events.emit(Event(type=event_type, data=data, session_id=session.session_id))
