"""Per-app ordered registry of interstitial handlers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from ..config.target_apps import TargetApp
from ..hal.interfaces.device_controller import IDeviceController
from ..locators.element_locator import ElementLocator
from ..tree.node import UiNode
from ..tree.traversal import collect_texts
from .handlers import InterstitialHandler

logger = logging.getLogger(__name__)


class InterstitialRegistry:
    """Tries an app's interstitial handlers in catalog order.

    Handling an interstitial never advances the automation state; the
    caller decides what a handled tick means.
    """

    def __init__(self, handlers: Sequence[InterstitialHandler] = ()) -> None:
        self.handlers: list[InterstitialHandler] = list(handlers)
        self.last_handled: str | None = None

    @classmethod
    def for_app(
        cls,
        app: TargetApp,
        locator: ElementLocator,
        device: IDeviceController | None = None,
        prompt_interval: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> InterstitialRegistry:
        """Build the registry from the app's interstitial specs."""
        return cls(
            [
                InterstitialHandler(spec, app, locator, device, prompt_interval, clock)
                for spec in app.interstitials
            ]
        )

    def register(self, handler: InterstitialHandler) -> None:
        self.handlers.append(handler)

    def handle(self, root: UiNode, texts: Sequence[str] | None = None) -> bool:
        """Handle the first interstitial found on screen.

        Args:
            root: Root of the current snapshot
            texts: Flattened visible text (computed from ``root`` if omitted)

        Returns:
            True if a handler handled the screen
        """
        self.last_handled = None
        if not self.handlers:
            return False
        if texts is None:
            texts = collect_texts(root)
        for handler in self.handlers:
            if handler.handle(root, texts):
                self.last_handled = handler.name
                return True
        return False

    def __len__(self) -> int:
        return len(self.handlers)
