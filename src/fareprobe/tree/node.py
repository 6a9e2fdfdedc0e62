"""UI element node contract.

A node is a read-only view of one element of the foregrounded app's UI
tree plus the three actions the automation core invokes on it. Nodes are
owned by the snapshot that produced them and must not be kept across
ticks.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Bounds:
    """Screen rectangle of a node, in pixels."""

    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0

    @property
    def width(self) -> int:
        return max(0, self.right - self.left)

    @property
    def height(self) -> int:
        return max(0, self.bottom - self.top)

    @property
    def center(self) -> tuple[int, int]:
        return ((self.left + self.right) // 2, (self.top + self.bottom) // 2)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


@runtime_checkable
class UiNode(Protocol):
    """One element of a UI tree snapshot."""

    text: str
    description: str
    hint: str
    kind: str
    """Widget class name, e.g. ``android.widget.EditText``."""

    resource_id: str
    app_id: str
    clickable: bool
    focusable: bool
    editable: bool
    focused: bool
    enabled: bool
    scrollable: bool
    bounds: Bounds

    @property
    def parent(self) -> UiNode | None: ...

    @property
    def children(self) -> Sequence[UiNode]: ...

    def click(self) -> bool:
        """Invoke the element's click action. Success may not mean a visible effect."""
        ...

    def set_text(self, text: str) -> bool:
        """Replace the element's text."""
        ...

    def focus(self) -> bool:
        """Move input focus to the element."""
        ...
