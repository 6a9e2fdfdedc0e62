"""Interstitial handlers built from catalog data.

An interstitial is an unplanned screen (promo, permission request, surge
notice, map confirmation) that has to be dismissed or confirmed before
the flow can continue. Each handler pairs a detector (visible-text
phrases) with a responder (phrases of the control to actuate).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from ..config.target_apps import IntentLocator, InterstitialSpec, TargetApp
from ..hal.interfaces.device_controller import IDeviceController
from ..locators.element_locator import ElementLocator
from ..model.enums import LocatorIntent
from ..tree.node import UiNode
from ..tree.traversal import normalize

logger = logging.getLogger(__name__)

RESPONSE_STRATEGIES = ("exact_phrase", "contains_phrase")


class InterstitialHandler:
    """Detects and dismisses one kind of interstitial screen.

    Example:
        >>> handler = InterstitialHandler(spec, app, locator, device)
        >>> if handler.detect(texts):
        ...     handler.handle(root, texts)
    """

    def __init__(
        self,
        spec: InterstitialSpec,
        app: TargetApp,
        locator: ElementLocator,
        device: IDeviceController | None = None,
        prompt_interval: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the handler.

        Args:
            spec: Detector and responder phrases
            app: Target app (fallback region, default actuation)
            locator: Locator used to actuate the response control
            device: Device controller for the manual prompt and gestures
            prompt_interval: Minimum seconds between two prompts
            clock: Monotonic clock, replaceable in tests
        """
        self.spec = spec
        self.app = app
        self.locator = locator
        self.device = device
        self.prompt_interval = prompt_interval
        self._clock = clock
        self._last_prompt: float | None = None
        self._detect_any = tuple(normalize(phrase) for phrase in spec.detect_any if phrase.strip())
        self._detect_exact = frozenset(
            normalize(phrase) for phrase in spec.detect_exact if phrase.strip()
        )
        self._response = IntentLocator(phrases=spec.respond, strategies=RESPONSE_STRATEGIES)

    @property
    def name(self) -> str:
        return self.spec.name

    def detect(self, texts: Sequence[str]) -> bool:
        """Check the flattened visible text for the detector phrases."""
        for text in texts:
            value = normalize(text)
            if value in self._detect_exact:
                return True
            if any(phrase in value for phrase in self._detect_any):
                return True
        return False

    def respond(self, root: UiNode) -> bool:
        """Actuate the response control. Exact phrase matches are tried first."""
        if not self.spec.respond:
            return False
        result = self.locator.locate(
            root,
            LocatorIntent.CONFIRM_BUTTON,
            self.app,
            locator=self._response,
            actuation=self.spec.actuation,
        )
        return result.found

    def handle(self, root: UiNode, texts: Sequence[str]) -> bool:
        """Handle the screen if this handler's interstitial is showing.

        Returns:
            True when the interstitial was detected and actuated, or detected
            with ``always_handled`` set
        """
        if not self.detect(texts):
            return False

        logger.info(f"Detected interstitial '{self.name}' in {self.app.app_id}")
        self._maybe_prompt()

        actuated = self.respond(root)
        if actuated:
            logger.info(f"Dismissed interstitial '{self.name}'")
            return True
        if self.spec.always_handled:
            logger.info(f"Interstitial '{self.name}' not actuated, re-checking next tick")
            return True
        logger.debug(f"Interstitial '{self.name}' detected but no response control responded")
        return False

    def _maybe_prompt(self) -> None:
        if not self.spec.manual_prompt or self.device is None:
            return
        now = self._clock()
        if self._last_prompt is not None and now - self._last_prompt < self.prompt_interval:
            return
        self._last_prompt = now
        self.device.notify_user(self.spec.manual_prompt)
