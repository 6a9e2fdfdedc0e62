"""Hardware abstraction layer: snapshot and device contracts plus adapters."""

from .interfaces import IDeviceController, ISnapshotProvider

__all__ = ["IDeviceController", "ISnapshotProvider"]
