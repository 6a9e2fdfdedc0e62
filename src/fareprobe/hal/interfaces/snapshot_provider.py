"""UI tree snapshot provider interface definition."""

from abc import ABC, abstractmethod

from ...tree.node import UiNode


class ISnapshotProvider(ABC):
    """Interface for reading the foregrounded application's UI tree.

    Every call to :meth:`snapshot` is a fresh read; nothing is cached
    between calls. The root node's ``app_id`` identifies the foreground
    application.

    Example:
        >>> provider = AdbSnapshotProvider(AdbBridge(serial="emulator-5554"))
        >>> root = provider.snapshot()
        >>> root.app_id if root else None
        'com.ubercab'
    """

    @abstractmethod
    def snapshot(self) -> UiNode | None:
        """Read the current UI tree.

        Returns:
            Root node, or None when no tree is available
        """
        ...
