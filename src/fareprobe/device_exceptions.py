"""Device exceptions.

This module contains exceptions raised by snapshot providers and
device controllers talking to a real device.
"""

from .base_exceptions import FareprobeException


class DeviceException(FareprobeException):
    """Base exception for device-level errors."""

    pass


class DeviceCommandError(DeviceException):
    """Raised when a device command exits unsuccessfully."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "", **kwargs) -> None:
        """Initialize with command details."""
        super().__init__(
            f"Device command failed ({returncode}): {' '.join(command)}",
            error_code="DEVICE_COMMAND_FAILED",
            context={"command": command, "returncode": returncode, "stderr": stderr, **kwargs},
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
