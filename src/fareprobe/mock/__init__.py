"""Test doubles for running the automation core without a device."""

from .fake_tree import FakeDeviceController, FakeNode, ScriptedSnapshotProvider, texts_screen

__all__ = ["FakeDeviceController", "FakeNode", "ScriptedSnapshotProvider", "texts_screen"]
