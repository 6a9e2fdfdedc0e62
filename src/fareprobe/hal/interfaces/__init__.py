"""HAL interface definitions.

These interfaces define the contracts that every device adapter follows.
"""

from .device_controller import IDeviceController
from .snapshot_provider import ISnapshotProvider

__all__ = ["IDeviceController", "ISnapshotProvider"]
