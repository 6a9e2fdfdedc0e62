"""Pytest configuration and fixtures."""

import os

# Must be set before fareprobe configures logging or settings
os.environ["FAREPROBE_ENV"] = "test"
os.environ["FAREPROBE_DISABLE_CONSOLE_LOGGING"] = "1"

import pytest

from fareprobe.config import TestSettings, load_catalog, reset_settings
from fareprobe.extraction import PriceExtractor
from fareprobe.interstitials import InterstitialRegistry
from fareprobe.locators import Actuator, ElementLocator, TextInjector
from fareprobe.mock import FakeDeviceController, FakeNode, ScriptedSnapshotProvider
from fareprobe.model import AutomationSession, TripParams
from fareprobe.state_machine import AutomationStateMachine, BudgetPlan

UBER = "com.ubercab"
INDRIVER = "sinet.startup.inDriver"


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def home_screen(app_id: str = UBER, *extra: FakeNode) -> FakeNode:
    """A home screen with a destination entry and a focused input."""
    return FakeNode(
        app_id=app_id,
        kind="android.widget.FrameLayout",
        children=[
            FakeNode(text="Where to?", clickable=True),
            FakeNode(kind="android.widget.EditText", editable=True, focused=True),
            *extra,
        ],
    )


def quote_screen(
    app_id: str = UBER,
    prices: tuple[str, ...] = ("EGP 65", "EGP 95"),
    extra: tuple[str, ...] = ("UberX", "3 min"),
) -> FakeNode:
    """One screen carrying every step of the quote flow.

    It has the destination entry, a focused input, a suggestion list and
    the fare panel, so a session can run start to finish on it.
    """
    suggestions = FakeNode(
        kind="androidx.recyclerview.widget.RecyclerView",
        children=[
            FakeNode(text="Cairo Festival City Mall", clickable=True),
            FakeNode(text="Cairo International Airport", clickable=True),
        ],
    )
    labels = [FakeNode(text=text) for text in (*extra, *prices)]
    return home_screen(app_id, suggestions, *labels)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Give each test its own settings singleton."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    return TestSettings()


@pytest.fixture(scope="session")
def catalog():
    return load_catalog()


@pytest.fixture
def uber(catalog):
    return catalog.get(UBER)


@pytest.fixture
def indriver(catalog):
    return catalog.get(INDRIVER)


@pytest.fixture
def device():
    return FakeDeviceController()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def locator(device):
    return ElementLocator(Actuator(device))


@pytest.fixture
def build_machine(settings, device, locator, clock):
    """Factory for a started state machine over a scripted provider."""

    def _build(app, screens, plan=None, policy=None, destination="Cairo Festival City"):
        provider = (
            screens
            if isinstance(screens, ScriptedSnapshotProvider)
            else ScriptedSnapshotProvider(screens)
        )
        session = AutomationSession(app_id=app.app_id, trip=TripParams(destination))
        kwargs = {"policy": policy} if policy is not None else {}
        machine = AutomationStateMachine(
            session=session,
            app=app,
            provider=provider,
            locator=locator,
            injector=TextInjector(),
            extractor=PriceExtractor(app),
            interstitials=InterstitialRegistry.for_app(app, locator, device, 0.0, clock),
            plan=plan or BudgetPlan.resolve(settings, app.budgets),
            clock=clock,
            **kwargs,
        )
        machine.start()
        return machine

    return _build


@pytest.fixture
def make_quote_screen():
    return quote_screen


@pytest.fixture
def make_home_screen():
    return home_screen


@pytest.fixture
def fake_clock():
    """Factory for independent clocks."""
    return FakeClock
