"""Session orchestration: lifecycle, polling threads and the caller API."""

from .orchestrator import AutomationOrchestrator
from .polling import PollingLoop

__all__ = ["AutomationOrchestrator", "PollingLoop"]
