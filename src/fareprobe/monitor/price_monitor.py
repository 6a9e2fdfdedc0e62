"""Passive price monitor.

Scans whichever supported app is in the foreground at a short interval
and keeps the latest captured fare per app in memory. Unlike an
automation session it never touches the target app's UI.

Example:
    monitor = PriceMonitor(provider, events=registry)
    monitor.start()                 # any supported app
    ...
    monitor.latest_prices()         # {"com.ubercab": PriceResult(...)}
    monitor.stop()
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from ..config.settings import FareprobeSettings, get_settings
from ..config.target_apps import TargetAppCatalog, load_catalog
from ..extraction.price_extractor import PriceExtractor
from ..hal.interfaces.snapshot_provider import ISnapshotProvider
from ..logging import PerformanceLogger, get_logger
from ..model.enums import SelectionPolicy
from ..model.price import PriceResult
from ..orchestration.polling import PollingLoop
from ..reporting.events import Event, EventRegistry, EventType

logger = get_logger(__name__)


class PriceMonitor:
    """Short-interval fare scanning of the foreground app."""

    def __init__(
        self,
        provider: ISnapshotProvider,
        catalog: TargetAppCatalog | None = None,
        settings: FareprobeSettings | None = None,
        events: EventRegistry | None = None,
        policy: Callable[[], SelectionPolicy] | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            provider: Snapshot provider
            catalog: Supported apps (default: loaded per settings)
            settings: Runtime settings (default: ``get_settings()``)
            events: Registry receiving ``PRICE_UPDATED`` events
            policy: Returns the selection policy to apply (default: settings' policy)
        """
        self.settings = settings or get_settings()
        self.catalog = catalog or load_catalog(self.settings.target_apps_path)
        self.provider = provider
        self.events = events or EventRegistry()
        self._policy = policy or (lambda: self.settings.selection_policy)
        self._extractors = {
            app.app_id: PriceExtractor(app, self.settings.identifier_markers)
            for app in self.catalog
        }
        self._prices: dict[str, PriceResult] = {}
        self._lock = threading.Lock()
        self._loop: PollingLoop | None = None
        self._target: str | None = None
        self.performance_logger = PerformanceLogger(logger)

    @property
    def is_running(self) -> bool:
        return self._loop is not None and self._loop.is_running

    def start(self, app_id: str | None = None) -> None:
        """Start polling.

        Args:
            app_id: Only scan this app (must be in the catalog); None scans any supported app
        """
        if app_id is not None:
            self.catalog.get(app_id)
        self.stop()
        self._target = app_id
        self._loop = PollingLoop(
            name="fareprobe-monitor",
            tick=self._tick,
            interval=self.settings.monitor_tick_interval,
        )
        self._loop.start()
        logger.info("monitor_started", target=app_id or "any")

    def stop(self) -> None:
        if self._loop is not None:
            self._loop.stop()
            self._loop = None
            logger.info("monitor_stopped")

    def scan_current_app(self, app_id: str | None = None) -> PriceResult | None:
        """Scan the foreground app once.

        Args:
            app_id: Only scan if this app is in the foreground

        Returns:
            Captured result, or None when no supported app shows a fare
        """
        root = self.provider.snapshot()
        if root is None:
            return None
        foreground = root.app_id
        if app_id is not None and foreground != app_id:
            return None
        extractor = self._extractors.get(foreground)
        if extractor is None:
            return None

        result = extractor.capture(root, self._policy())
        if result is None:
            logger.debug("monitor_no_price", app_id=foreground)
            return None

        with self._lock:
            previous = self._prices.get(foreground)
            self._prices[foreground] = result
        if previous is None or (previous.price, previous.service_type) != (
            result.price,
            result.service_type,
        ):
            logger.info("price_updated", app_id=foreground, price=result.price)
            self.events.emit(Event(type=EventType.PRICE_UPDATED, data=result.to_payload()))
        return result

    def latest_prices(self) -> dict[str, PriceResult]:
        with self._lock:
            return dict(self._prices)

    def price_for(self, app_id: str) -> float | None:
        with self._lock:
            result = self._prices.get(app_id)
        return result.price if result is not None else None

    def clear_prices(self) -> None:
        with self._lock:
            self._prices.clear()
        logger.debug("prices_cleared")

    def _tick(self) -> bool:
        start = time.perf_counter()
        self.scan_current_app(self._target)
        self.performance_logger.log_timing("monitor_scan", time.perf_counter() - start)
        return True
