"""Tests for the passive price monitor."""

import threading

import pytest

from fareprobe.config import TestSettings
from fareprobe.config_exceptions import UnknownTargetAppError
from fareprobe.mock import ScriptedSnapshotProvider, texts_screen
from fareprobe.model import SelectionPolicy
from fareprobe.monitor import PriceMonitor
from fareprobe.reporting import EventCollector, EventType

UBER = "com.ubercab"
CAREEM = "com.careem.acma"


@pytest.fixture
def provider():
    return ScriptedSnapshotProvider()


@pytest.fixture
def monitor(provider, catalog, settings):
    monitor = PriceMonitor(provider, catalog, settings)
    yield monitor
    monitor.stop()


class TestScanCurrentApp:
    """Test single scans."""

    def test_captures_foreground_fare(self, monitor, provider):
        provider.set_tree(texts_screen(UBER, ["UberX", "EGP 65", "EGP 95"]))

        result = monitor.scan_current_app()

        assert result.price == 65.0
        assert result.strategy == "combined_scan"
        assert monitor.latest_prices() == {UBER: result}
        assert monitor.price_for(UBER) == 65.0

    def test_emits_only_on_change(self, monitor, provider):
        with EventCollector(monitor.events, [EventType.PRICE_UPDATED]) as collector:
            provider.set_tree(texts_screen(UBER, ["EGP 65"]))
            monitor.scan_current_app()
            monitor.scan_current_app()
            provider.set_tree(texts_screen(UBER, ["EGP 70"]))
            monitor.scan_current_app()

        prices = [event.data["price"] for event in collector.get_events()]
        assert prices == [65.0, 70.0]

    def test_unsupported_foreground(self, monitor, provider):
        provider.set_tree(texts_screen("com.whatsapp", ["EGP 65"]))
        assert monitor.scan_current_app() is None
        assert monitor.latest_prices() == {}

    def test_app_filter(self, monitor, provider):
        provider.set_tree(texts_screen(UBER, ["EGP 65"]))

        assert monitor.scan_current_app(CAREEM) is None
        assert monitor.scan_current_app(UBER).price == 65.0

    def test_no_tree(self, monitor, provider):
        provider.set_tree(None)
        assert monitor.scan_current_app() is None

    def test_no_fare_keeps_previous(self, monitor, provider):
        provider.set_tree(texts_screen(UBER, ["EGP 65"]))
        monitor.scan_current_app()
        provider.set_tree(texts_screen(UBER, ["Searching for drivers"]))

        assert monitor.scan_current_app() is None
        assert monitor.price_for(UBER) == 65.0

    def test_policy_supplier(self, provider, catalog, settings):
        policy = lambda: SelectionPolicy.HIGHEST_TIER  # noqa: E731
        monitor = PriceMonitor(provider, catalog, settings, policy=policy)
        provider.set_tree(texts_screen(UBER, ["EGP 65", "EGP 95"]))

        assert monitor.scan_current_app().price == 95.0

    def test_clear_prices(self, monitor, provider):
        provider.set_tree(texts_screen(UBER, ["EGP 65"]))
        monitor.scan_current_app()

        monitor.clear_prices()

        assert monitor.price_for(UBER) is None


class TestMonitorLoop:
    """Test background polling."""

    def test_start_unknown_app(self, monitor):
        with pytest.raises(UnknownTargetAppError):
            monitor.start("com.example.taxi")
        assert not monitor.is_running

    def test_background_scanning(self, provider, catalog):
        provider.set_tree(texts_screen(CAREEM, ["Go", "EGP 80"]))
        monitor = PriceMonitor(provider, catalog, TestSettings())
        updated = threading.Event()
        monitor.events.register(EventType.PRICE_UPDATED, lambda event: updated.set())

        monitor.start(CAREEM)
        try:
            assert updated.wait(2.0)
            assert monitor.is_running
        finally:
            monitor.stop()

        assert not monitor.is_running
        assert monitor.price_for(CAREEM) == 80.0
