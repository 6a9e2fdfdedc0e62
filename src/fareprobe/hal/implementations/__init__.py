"""Device adapter implementations."""

from .adb_uiautomator import (
    AdbBridge,
    AdbDeviceController,
    AdbSnapshotProvider,
    AdbUiNode,
    parse_dump,
)

__all__ = [
    "AdbBridge",
    "AdbDeviceController",
    "AdbSnapshotProvider",
    "AdbUiNode",
    "parse_dump",
]
