"""UI tree node contract and traversal helpers."""

from .node import Bounds, UiNode
from .traversal import (
    ancestors,
    collect_texts,
    combined_label,
    find_by_text,
    find_focused_input,
    is_input_kind,
    is_list_kind,
    is_non_target_kind,
    node_strings,
    normalize,
    walk,
)

__all__ = [
    "Bounds",
    "UiNode",
    "ancestors",
    "collect_texts",
    "combined_label",
    "find_by_text",
    "find_focused_input",
    "is_input_kind",
    "is_list_kind",
    "is_non_target_kind",
    "node_strings",
    "normalize",
    "walk",
]
