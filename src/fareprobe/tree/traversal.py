"""Traversal and classification helpers over UI node trees."""

from __future__ import annotations

from collections.abc import Iterator

from .node import UiNode

INPUT_KINDS = ("EditText", "AutoComplete", "SearchView", "TextInputLayout")
LIST_KINDS = ("RecyclerView", "ListView")
NON_TARGET_KINDS = ("Button", "Image")


def walk(root: UiNode | None) -> Iterator[UiNode]:
    """Yield every node of the tree in depth-first pre-order."""
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def normalize(text: str) -> str:
    """Casefold and collapse whitespace for phrase comparison."""
    return " ".join(text.split()).casefold()


def node_strings(node: UiNode) -> list[str]:
    """Non-empty trimmed text and description of one node."""
    strings = []
    for value in (node.text, node.description):
        value = (value or "").strip()
        if value:
            strings.append(value)
    return strings


def collect_texts(root: UiNode | None) -> list[str]:
    """Flatten every visible text and description in tree order."""
    texts: list[str] = []
    for node in walk(root):
        texts.extend(node_strings(node))
    return texts


def combined_label(node: UiNode) -> str:
    """Normalized text, description and hint of a node joined by spaces."""
    return normalize(" ".join(part for part in (node.text, node.description, node.hint) if part))


def ancestors(node: UiNode, limit: int | None = None) -> Iterator[UiNode]:
    """Yield parent, grandparent and so on, up to ``limit`` levels."""
    current = node.parent
    depth = 0
    while current is not None and (limit is None or depth < limit):
        yield current
        current = current.parent
        depth += 1


def _short_kind(node: UiNode) -> str:
    return (node.kind or "").rsplit(".", 1)[-1]


def is_input_kind(node: UiNode) -> bool:
    kind = _short_kind(node)
    return any(marker in kind for marker in INPUT_KINDS)


def is_list_kind(node: UiNode) -> bool:
    kind = _short_kind(node)
    return any(marker in kind for marker in LIST_KINDS)


def is_non_target_kind(node: UiNode) -> bool:
    """Buttons and images are never the destination field."""
    kind = _short_kind(node)
    return any(marker in kind for marker in NON_TARGET_KINDS)


def find_focused_input(root: UiNode | None) -> UiNode | None:
    """Return the focused editable node, if any."""
    for node in walk(root):
        if node.focused and (node.editable or is_input_kind(node)):
            return node
    return None


def find_by_text(root: UiNode | None, phrase: str, exact: bool = True) -> Iterator[UiNode]:
    """Yield nodes whose text or description matches ``phrase``.

    Args:
        root: Tree root
        phrase: Phrase to look for
        exact: Whole-string equality when True, substring otherwise
    """
    wanted = normalize(phrase)
    if not wanted:
        return
    for node in walk(root):
        for value in node_strings(node):
            value = normalize(value)
            if (value == wanted) if exact else (wanted in value):
                yield node
                break
