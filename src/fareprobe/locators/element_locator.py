"""Element locator that tries the configured strategies in sequence.

For each strategy the locator walks the candidates it yields and actuates
them with the app's fallback order. The first candidate that reports
success ends the search. Not finding anything is a normal outcome and is
reported through ``LocateResult.found``; it never raises.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..config.target_apps import IntentLocator, TargetApp
from ..model.enums import ActuationStep, LocatorIntent
from ..tree.node import UiNode
from .actuation import Actuator
from .strategies import STRATEGIES, LocateTarget, LocatorStrategy

logger = logging.getLogger(__name__)


@dataclass
class LocatorAttempt:
    """Record of one strategy attempt.

    Attributes:
        strategy_name: Name of strategy that was tried
        success: Whether a candidate was actuated
        candidates: Number of candidates tried
        duration: Time taken by strategy
        error: Error message if the strategy raised
    """

    strategy_name: str
    success: bool = False
    candidates: int = 0
    duration: float = 0.0
    error: str | None = None


@dataclass
class LocateResult:
    """Outcome of one locate call. The actuated node is not retained."""

    intent: LocatorIntent
    found: bool = False
    strategy: str | None = None
    attempts: list[LocatorAttempt] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.found


class ElementLocator:
    """Finds and actuates semantically-named elements.

    Example:
        >>> locator = ElementLocator(Actuator(device))
        >>> result = locator.locate(root, LocatorIntent.DESTINATION_FIELD, app)
        >>> if result.found:
        ...     print(f"Clicked via {result.strategy}")
    """

    def __init__(
        self,
        actuator: Actuator | None = None,
        strategies: dict[str, LocatorStrategy] | None = None,
    ) -> None:
        """Initialize the locator.

        Args:
            actuator: Actuator used on candidates
            strategies: Strategy instances by name (default: all built-in strategies)
        """
        self.actuator = actuator or Actuator()
        self.strategies = strategies or {name: cls() for name, cls in STRATEGIES.items()}

    def unknown_strategies(self, app: TargetApp) -> list[str]:
        """Strategy names configured for ``app`` that this locator does not know."""
        names = [name for locator in app.locators.values() for name in locator.strategies]
        return sorted({name for name in names if name not in self.strategies})

    def locate(
        self,
        root: UiNode,
        intent: LocatorIntent,
        app: TargetApp,
        locator: IntentLocator | None = None,
        actuation: Sequence[ActuationStep] | None = None,
    ) -> LocateResult:
        """Locate and actuate the element for ``intent``.

        Args:
            root: Root of the current snapshot
            intent: Semantic role of the element
            app: Target app supplying phrases and actuation order
            locator: Phrase tables overriding the app's tables for the intent
            actuation: Actuation order overriding the app's order

        Returns:
            LocateResult; ``found`` is False when nothing could be actuated
        """
        locator = locator or app.locator_for(intent)
        order = actuation or locator.actuation or app.actuation_for(intent)
        target = LocateTarget.from_locator(intent, locator)
        result = LocateResult(intent=intent)
        tried: set[int] = set()

        for name in locator.strategies:
            strategy = self.strategies.get(name)
            if strategy is None:
                logger.warning(f"Unknown locator strategy '{name}' configured for {app.app_id}")
                continue
            if not strategy.can_handle(target):
                continue

            attempt = LocatorAttempt(strategy_name=name)
            start = time.monotonic()
            try:
                for node in strategy.candidates(root, target):
                    if id(node) in tried:
                        continue
                    tried.add(id(node))
                    attempt.candidates += 1
                    if self.actuator.actuate(node, order, app.fallback_region):
                        attempt.success = True
                        break
            except Exception as e:
                attempt.error = str(e)
                logger.error(f"Strategy {name} error: {e}", exc_info=True)
            attempt.duration = time.monotonic() - start
            result.attempts.append(attempt)

            if attempt.success:
                result.found = True
                result.strategy = name
                logger.info(
                    f"Located {intent.value} in {app.app_id} via {name} "
                    f"({attempt.candidates} candidates, {attempt.duration:.3f}s)"
                )
                return result

        logger.debug(
            f"Could not locate {intent.value} in {app.app_id} "
            f"after {len(result.attempts)} strategies"
        )
        return result
