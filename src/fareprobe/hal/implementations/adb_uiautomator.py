"""ADB / uiautomator device adapter.

This module reads the UI tree of a connected Android device through
``adb shell uiautomator dump`` and actuates it with ``adb shell input``:
- AdbBridge: runs adb commands against one device
- AdbUiNode: a node parsed from the uiautomator XML dump
- AdbSnapshotProvider: ISnapshotProvider over the dump
- AdbDeviceController: IDeviceController over ``monkey``, ``input``, ``wm``
  and ``cmd notification``

Node actions are position-based here (uiautomator exposes no
accessibility actions), so a click is a tap at the centre of the node's
bounds. ``input text`` only types ASCII on stock Android builds.
"""

import logging
import re
import shlex
import subprocess
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass, field

from ...device_exceptions import DeviceCommandError
from ...tree.node import Bounds
from ..interfaces.device_controller import IDeviceController
from ..interfaces.snapshot_provider import ISnapshotProvider

logger = logging.getLogger(__name__)

DUMP_PATH = "/sdcard/window_dump.xml"

_BOUNDS_RE = re.compile(r"\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]")
_SIZE_RE = re.compile(r"(\d+)x(\d+)")


class AdbBridge:
    """Runs adb commands against one device."""

    def __init__(self, serial: str | None = None, adb_path: str = "adb", timeout: float = 15.0):
        """Initialize the bridge.

        Args:
            serial: Device serial (``adb -s``); None uses the only attached device
            adb_path: adb executable
            timeout: Seconds before a command is abandoned
        """
        self.serial = serial
        self.adb_path = adb_path
        self.timeout = timeout

    def run(self, *args: str) -> str:
        """Run an adb command and return its stdout.

        Raises:
            DeviceCommandError: If adb is missing, times out or exits non-zero
        """
        command = [self.adb_path]
        if self.serial:
            command += ["-s", self.serial]
        command += list(args)

        try:
            result = subprocess.run(
                command, capture_output=True, text=True, timeout=self.timeout, check=False
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise DeviceCommandError(command, -1, str(e)) from e

        if result.returncode != 0:
            raise DeviceCommandError(command, result.returncode, result.stderr.strip())
        return result.stdout

    def shell(self, *args: str) -> str:
        return self.run("shell", *args)

    def tap(self, x: int, y: int) -> bool:
        try:
            self.shell("input", "tap", str(x), str(y))
        except DeviceCommandError as e:
            logger.warning(f"Tap at ({x}, {y}) failed: {e}")
            return False
        return True

    def type_text(self, text: str) -> bool:
        # input text takes %s for spaces
        escaped = shlex.quote(text.replace(" ", "%s"))
        try:
            self.shell("input", "text", escaped)
        except DeviceCommandError as e:
            logger.warning(f"Text input failed: {e}")
            return False
        return True


@dataclass(eq=False)
class AdbUiNode:
    """A node parsed from a uiautomator dump."""

    text: str = ""
    description: str = ""
    hint: str = ""
    kind: str = ""
    resource_id: str = ""
    app_id: str = ""
    clickable: bool = False
    focusable: bool = False
    editable: bool = False
    focused: bool = False
    enabled: bool = True
    scrollable: bool = False
    bounds: Bounds = field(default_factory=Bounds)
    bridge: AdbBridge | None = field(default=None, repr=False)
    _parent: "AdbUiNode | None" = field(default=None, repr=False)
    _children: list["AdbUiNode"] = field(default_factory=list, repr=False)

    @property
    def parent(self) -> "AdbUiNode | None":
        return self._parent

    @property
    def children(self) -> Sequence["AdbUiNode"]:
        return self._children

    def click(self) -> bool:
        if self.bridge is None or self.bounds.is_empty:
            return False
        x, y = self.bounds.center
        return self.bridge.tap(x, y)

    def focus(self) -> bool:
        return self.click()

    def set_text(self, text: str) -> bool:
        if self.bridge is None or not self.click():
            return False
        return self.bridge.type_text(text)


def _flag(element: ET.Element, name: str) -> bool:
    return element.get(name, "false") == "true"


def parse_bounds(value: str) -> Bounds:
    """Parse uiautomator bounds such as ``[0,84][1080,210]``."""
    match = _BOUNDS_RE.match(value or "")
    if not match:
        return Bounds()
    left, top, right, bottom = (int(group) for group in match.groups())
    return Bounds(left, top, right, bottom)


def _build_node(
    element: ET.Element, parent: AdbUiNode | None, bridge: AdbBridge | None
) -> AdbUiNode:
    kind = element.get("class", "")
    node = AdbUiNode(
        text=element.get("text", ""),
        description=element.get("content-desc", ""),
        hint=element.get("hint", ""),
        kind=kind,
        resource_id=element.get("resource-id", ""),
        app_id=element.get("package", ""),
        clickable=_flag(element, "clickable"),
        focusable=_flag(element, "focusable"),
        editable="EditText" in kind,
        focused=_flag(element, "focused"),
        enabled=element.get("enabled", "true") == "true",
        scrollable=_flag(element, "scrollable"),
        bounds=parse_bounds(element.get("bounds", "")),
        bridge=bridge,
        _parent=parent,
    )
    node._children = [_build_node(child, node, bridge) for child in element.findall("node")]
    return node


def parse_dump(xml_content: str, bridge: AdbBridge | None = None) -> AdbUiNode | None:
    """Parse a uiautomator XML dump into a node tree.

    The ``<hierarchy>`` element becomes a synthetic root whose ``app_id``
    is the package of its first window.

    Args:
        xml_content: Dump content
        bridge: Bridge used by node actions

    Returns:
        Root node, or None for an empty hierarchy

    Raises:
        ET.ParseError: If the content is not XML
    """
    hierarchy = ET.fromstring(xml_content)
    windows = hierarchy.findall("node")
    if not windows:
        return None

    root = AdbUiNode(kind="hierarchy", app_id=windows[0].get("package", ""), bridge=bridge)
    root._children = [_build_node(window, root, bridge) for window in windows]
    return root


class AdbSnapshotProvider(ISnapshotProvider):
    """Snapshot provider backed by ``uiautomator dump``."""

    def __init__(self, bridge: AdbBridge, dump_path: str = DUMP_PATH):
        self.bridge = bridge
        self.dump_path = dump_path

    def snapshot(self) -> AdbUiNode | None:
        try:
            self.bridge.shell("uiautomator", "dump", self.dump_path)
            content = self.bridge.run("exec-out", "cat", self.dump_path)
        except DeviceCommandError as e:
            logger.warning(f"UI dump failed: {e}")
            return None

        start = content.find("<?xml")
        if start == -1:
            start = content.find("<hierarchy")
        if start == -1:
            logger.warning("UI dump returned no hierarchy")
            return None

        try:
            return parse_dump(content[start:], self.bridge)
        except ET.ParseError as e:
            logger.warning(f"Could not parse UI dump: {e}")
            return None


class AdbDeviceController(IDeviceController):
    """Device controller backed by adb shell commands."""

    def __init__(self, bridge: AdbBridge, notification_tag: str = "fareprobe"):
        self.bridge = bridge
        self.notification_tag = notification_tag
        self._screen_size: tuple[int, int] | None = None

    def launch_app(self, app_id: str) -> bool:
        try:
            self.bridge.shell(
                "monkey", "-p", app_id, "-c", "android.intent.category.LAUNCHER", "1"
            )
        except DeviceCommandError as e:
            logger.error(f"Could not launch {app_id}: {e}")
            return False
        return True

    def tap(self, x: int, y: int) -> bool:
        return self.bridge.tap(x, y)

    def screen_size(self) -> tuple[int, int]:
        """Read ``wm size``; an override size wins over the physical size."""
        if self._screen_size is None:
            output = self.bridge.shell("wm", "size")
            sizes = _SIZE_RE.findall(output)
            if not sizes:
                raise DeviceCommandError(["wm", "size"], 0, f"unexpected output: {output!r}")
            width, height = sizes[-1]
            self._screen_size = (int(width), int(height))
        return self._screen_size

    def notify_user(self, message: str) -> None:
        try:
            self.bridge.shell(
                "cmd",
                "notification",
                "post",
                "-S",
                "bigtext",
                "-t",
                shlex.quote(self.notification_tag),
                shlex.quote(self.notification_tag),
                shlex.quote(message),
            )
        except DeviceCommandError as e:
            logger.warning(f"Could not post notification: {e}")
