"""Device controller interface definition."""

from abc import ABC, abstractmethod


class IDeviceController(ABC):
    """Interface for device-level actions that are not tied to a node.

    Covers foregrounding the target app, position-based synthetic taps
    used when node actions are ignored, and the user-facing prompt shown
    when a step has to be completed by hand.
    """

    @abstractmethod
    def launch_app(self, app_id: str) -> bool:
        """Bring the target app to the foreground.

        Args:
            app_id: Package name

        Returns:
            True if the launch request was accepted
        """
        ...

    @abstractmethod
    def tap(self, x: int, y: int) -> bool:
        """Dispatch a synthetic tap at screen coordinates.

        Returns:
            True if the gesture was dispatched
        """
        ...

    @abstractmethod
    def screen_size(self) -> tuple[int, int]:
        """Get the screen size as (width, height) in pixels."""
        ...

    @abstractmethod
    def notify_user(self, message: str) -> None:
        """Show a short message asking the user to act."""
        ...
