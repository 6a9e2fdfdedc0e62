"""fareprobe - fare quotes from ride-hailing apps through their UI trees.

Drives third-party ride-hailing apps through a per-app state machine
(locate the destination field, type the destination, pick a suggestion,
wait for the fare), reads fares out of noisy on-screen text and reports
them to listeners.

Example:
    from fareprobe import AutomationOrchestrator, TripParams

    orchestrator = AutomationOrchestrator(provider, device)
    session_id = orchestrator.start_session("com.ubercab", TripParams("Cairo Festival City"))
    outcome = orchestrator.await_result(session_id, max_wait_ms=60_000)
"""

__version__ = "0.1.0"

from .config import FareprobeSettings, TargetApp, TargetAppCatalog, get_settings, load_catalog
from .exceptions import (
    ConfigurationError,
    DeviceCommandError,
    FareprobeException,
    InvalidConfigurationError,
    SessionConflictError,
    SessionNotFoundError,
    UnknownTargetAppError,
)
from .extraction import PriceExtractor
from .hal import IDeviceController, ISnapshotProvider
from .model import (
    AutomationState,
    FailureReason,
    PriceCandidate,
    PriceResult,
    SelectionPolicy,
    TripParams,
)
from .monitor import PriceMonitor
from .orchestration import AutomationOrchestrator
from .reporting import Event, EventRegistry, EventType

__all__ = [
    "__version__",
    # Configuration
    "FareprobeSettings",
    "TargetApp",
    "TargetAppCatalog",
    "get_settings",
    "load_catalog",
    # Errors
    "FareprobeException",
    "ConfigurationError",
    "InvalidConfigurationError",
    "UnknownTargetAppError",
    "SessionConflictError",
    "SessionNotFoundError",
    "DeviceCommandError",
    # Core
    "AutomationOrchestrator",
    "PriceMonitor",
    "PriceExtractor",
    "IDeviceController",
    "ISnapshotProvider",
    # Model
    "AutomationState",
    "FailureReason",
    "PriceCandidate",
    "PriceResult",
    "SelectionPolicy",
    "TripParams",
    # Events
    "Event",
    "EventRegistry",
    "EventType",
]
