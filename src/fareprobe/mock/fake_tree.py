"""Scripted UI trees for testing without a device.

Provides:
- FakeNode: an in-memory UiNode with configurable action results
- ScriptedSnapshotProvider: returns a scripted sequence of trees
- FakeDeviceController: records launches, taps and prompts

Example:
    root = FakeNode(
        app_id="com.ubercab",
        children=[FakeNode(text="Where to?", clickable=True)],
    )
    provider = ScriptedSnapshotProvider([root])
    provider.snapshot().children[0].click()  # True, recorded in .clicks
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..hal.interfaces.device_controller import IDeviceController
from ..hal.interfaces.snapshot_provider import ISnapshotProvider
from ..tree.node import Bounds

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class FakeNode:
    """In-memory UI node.

    Children get their parent set on construction and inherit the
    parent's ``app_id`` when they have none. ``click_result``,
    ``set_text_result`` and ``focus_result`` are what the actions report;
    a successful ``set_text`` also updates ``text``.
    """

    text: str = ""
    description: str = ""
    hint: str = ""
    kind: str = "android.view.View"
    resource_id: str = ""
    app_id: str = ""
    clickable: bool = False
    focusable: bool = False
    editable: bool = False
    focused: bool = False
    enabled: bool = True
    scrollable: bool = False
    bounds: Bounds = field(default_factory=lambda: Bounds(0, 0, 100, 50))
    children: list[FakeNode] = field(default_factory=list)
    click_result: bool = True
    set_text_result: bool = True
    focus_result: bool = True

    clicks: int = field(default=0, init=False)
    focus_calls: int = field(default=0, init=False)
    texts_set: list[str] = field(default_factory=list, init=False)
    parent: FakeNode | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        for child in self.children:
            self.adopt(child)

    def adopt(self, child: FakeNode) -> FakeNode:
        """Attach a child (used for children added after construction)."""
        if child not in self.children:
            self.children.append(child)
        child.parent = self
        if not child.app_id:
            child._inherit_app_id(self.app_id)
        return child

    def _inherit_app_id(self, app_id: str) -> None:
        self.app_id = app_id
        for child in self.children:
            if not child.app_id:
                child._inherit_app_id(app_id)

    def click(self) -> bool:
        self.clicks += 1
        return self.click_result

    def focus(self) -> bool:
        self.focus_calls += 1
        if self.focus_result:
            self.focused = True
        return self.focus_result

    def set_text(self, text: str) -> bool:
        self.texts_set.append(text)
        if self.set_text_result:
            self.text = text
        return self.set_text_result


class ScriptedSnapshotProvider(ISnapshotProvider):
    """Returns scripted trees in order, then keeps returning the last one.

    A scripted item may be ``None`` (tree unavailable) or an exception
    instance, which is raised from :meth:`snapshot`.
    """

    def __init__(self, trees: Iterable[FakeNode | BaseException | None] = ()):
        self._script: list[FakeNode | BaseException | None] = list(trees)
        self._last: FakeNode | BaseException | None = None
        self.calls = 0

    def push(self, *trees: FakeNode | BaseException | None) -> None:
        """Queue more trees."""
        self._script.extend(trees)

    def set_tree(self, tree: FakeNode | None) -> None:
        """Replace the script with a single tree returned from now on."""
        self._script = [tree]

    def snapshot(self) -> FakeNode | None:
        self.calls += 1
        if self._script:
            self._last = self._script.pop(0)
        if isinstance(self._last, BaseException):
            raise self._last
        return self._last


class FakeDeviceController(IDeviceController):
    """Device controller that records every call."""

    def __init__(self, size: tuple[int, int] = (1080, 2400), tap_result: bool = True):
        self.size = size
        self.tap_result = tap_result
        self.launched: list[str] = []
        self.taps: list[tuple[int, int]] = []
        self.notifications: list[str] = []

    def launch_app(self, app_id: str) -> bool:
        self.launched.append(app_id)
        return True

    def tap(self, x: int, y: int) -> bool:
        self.taps.append((x, y))
        return self.tap_result

    def screen_size(self) -> tuple[int, int]:
        return self.size

    def notify_user(self, message: str) -> None:
        logger.debug(f"Prompt: {message}")
        self.notifications.append(message)


def texts_screen(app_id: str, texts: Sequence[str]) -> FakeNode:
    """Build a flat screen showing ``texts`` as plain labels."""
    return FakeNode(app_id=app_id, children=[FakeNode(text=text) for text in texts])
