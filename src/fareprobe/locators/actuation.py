"""Layered actuation and text injection.

Some target apps report success for actions that do nothing, and some
ignore accessibility actions entirely. Actuation therefore walks an
ordered fallback list (node, parent, grandparent, synthetic gesture at
the node, synthetic gesture at an ancestor, fixed screen region) and
stops at the first step that reports success.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..config.target_apps import ScreenRegion
from ..hal.interfaces.device_controller import IDeviceController
from ..logging import ActionLogger
from ..model.enums import ActuationStep
from ..tree.node import UiNode
from ..tree.traversal import ancestors, find_focused_input, is_input_kind, walk

logger = logging.getLogger(__name__)


def _describe(node: UiNode) -> str:
    kind = (node.kind or "").rsplit(".", 1)[-1]
    label = node.text or node.description or node.resource_id
    return f"[{kind}] {label!r}"


class Actuator:
    """Clicks a located node using a configurable fallback order.

    Example:
        >>> actuator = Actuator(device)
        >>> actuator.actuate(node, [ActuationStep.NODE, ActuationStep.GESTURE])
        True
    """

    def __init__(
        self,
        device: IDeviceController | None = None,
        action_logger: ActionLogger | None = None,
    ) -> None:
        """Initialize the actuator.

        Args:
            device: Device controller for gesture steps; without one they are skipped
            action_logger: Logger for action start/end records
        """
        self.device = device
        self.action_logger = action_logger or ActionLogger()

    def actuate(
        self,
        node: UiNode,
        order: Sequence[ActuationStep],
        region: ScreenRegion | None = None,
    ) -> bool:
        """Run the fallback steps in order until one reports success.

        Args:
            node: Located node
            order: Steps to try
            region: Fallback region for ``SCREEN_REGION``

        Returns:
            True if any step reported success
        """
        for step in order:
            context = self.action_logger.log_action_start(step.value, _describe(node))
            try:
                success = self._run_step(step, node, region)
            except Exception as e:
                logger.warning(f"Actuation step {step.value} raised: {e}", exc_info=True)
                self.action_logger.log_action_end(context, success=False, error=e)
                continue
            self.action_logger.log_action_end(context, success=success)
            if success:
                return True
        return False

    def _run_step(self, step: ActuationStep, node: UiNode, region: ScreenRegion | None) -> bool:
        if step is ActuationStep.NODE:
            return self.click_node(node)
        if step is ActuationStep.PARENT:
            return self._click_ancestor(node, 1)
        if step is ActuationStep.GRANDPARENT:
            return self._click_ancestor(node, 2)
        if step is ActuationStep.GESTURE:
            return self._tap_bounds(node)
        if step is ActuationStep.ANCESTOR_GESTURE:
            for ancestor in ancestors(node):
                if not ancestor.bounds.is_empty:
                    return self._tap_bounds(ancestor)
            return False
        if step is ActuationStep.SCREEN_REGION:
            return self._tap_region(region or ScreenRegion())
        raise ValueError(f"Unknown actuation step: {step}")

    @staticmethod
    def click_node(node: UiNode) -> bool:
        """Click a clickable node; focus then click a focusable one."""
        if node.clickable:
            return node.click()
        if node.focusable:
            node.focus()
            return node.click()
        return False

    def _click_ancestor(self, node: UiNode, level: int) -> bool:
        target: UiNode | None = node
        for _ in range(level):
            target = target.parent if target is not None else None
        if target is None or not target.clickable:
            return False
        return target.click()

    def _tap_bounds(self, node: UiNode) -> bool:
        if self.device is None or node.bounds.is_empty:
            return False
        x, y = node.bounds.center
        return self.device.tap(x, y)

    def _tap_region(self, region: ScreenRegion) -> bool:
        if self.device is None:
            return False
        width, height = self.device.screen_size()
        return self.device.tap(int(width * region.x_ratio), int(height * region.y_ratio))


class TextInjector:
    """Types the destination into the target app's input field."""

    def __init__(self, action_logger: ActionLogger | None = None) -> None:
        self.action_logger = action_logger or ActionLogger()

    def inject(self, root: UiNode, text: str) -> bool:
        """Set ``text`` on the focused input, falling back to any editable node.

        Args:
            root: Root of the current snapshot
            text: Text to enter

        Returns:
            True if a node reported that the text was set
        """
        focused = find_focused_input(root)
        if focused is not None:
            if self._set_text(focused, text, focus_first=False):
                return True
            logger.debug("set_text on the focused input failed, trying other inputs")

        for node in walk(root):
            if node is focused or not (node.editable or is_input_kind(node)):
                continue
            if self._set_text(node, text, focus_first=True):
                return True

        logger.debug("No input accepted the text")
        return False

    def _set_text(self, node: UiNode, text: str, focus_first: bool) -> bool:
        context = self.action_logger.log_action_start("set_text", _describe(node), text=text)
        if focus_first:
            node.focus()
        success = node.set_text(text)
        self.action_logger.log_action_end(context, success=success)
        return success
