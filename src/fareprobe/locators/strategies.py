"""Locator strategies for finding UI elements without stable identifiers.

Each strategy yields candidate nodes lazily, best first. The locator
actuates candidates in order and stops at the first one that reports
success, so a strategy never needs to decide whether a candidate "works".

- ExactPhraseStrategy: text or description equals a localized phrase
- ContainsPhraseStrategy: text or description contains a localized phrase
- KeywordStrategy: combined text/description/hint contains a keyword
- StructuralInputStrategy: input-kind node whose own or nearby text has a keyword
- FirstClickableTextStrategy: first clickable non-button node with text
- SuggestionListStrategy: first items of the first list-kind node
- LabelledClickableStrategy: first clickable node with a real label
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass

from ..config.target_apps import IntentLocator
from ..model.enums import LocatorIntent
from ..tree.node import UiNode
from ..tree.traversal import (
    combined_label,
    find_by_text,
    is_input_kind,
    is_list_kind,
    is_non_target_kind,
    normalize,
    walk,
)

SUGGESTION_LIST_ITEMS = 3
MIN_FIELD_TEXT = 3
MIN_SUGGESTION_LABEL = 5


@dataclass(frozen=True)
class LocateTarget:
    """What to look for: the intent and its phrase tables, pre-normalized."""

    intent: LocatorIntent
    phrases: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @classmethod
    def from_locator(cls, intent: LocatorIntent, locator: IntentLocator) -> LocateTarget:
        return cls(
            intent=intent,
            phrases=tuple(phrase for phrase in locator.phrases if phrase.strip()),
            keywords=tuple(normalize(word) for word in locator.keywords if word.strip()),
            exclude=tuple(normalize(word) for word in locator.exclude if word.strip()),
        )

    def is_excluded(self, label: str) -> bool:
        return any(word in label for word in self.exclude)

    def has_keyword(self, label: str) -> bool:
        return any(word in label for word in self.keywords)


class LocatorStrategy(ABC):
    """Base class for locator strategies.

    Strategies are tried in the order configured for the app and intent.
    """

    name: str = ""

    @abstractmethod
    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        """Yield candidate nodes, best first.

        Args:
            root: Root of the current snapshot
            target: Intent and phrase tables

        Returns:
            Iterator over candidate nodes (possibly empty)
        """

    def get_name(self) -> str:
        return self.name

    def can_handle(self, target: LocateTarget) -> bool:
        """Check whether the target carries what this strategy needs."""
        return True


class ExactPhraseStrategy(LocatorStrategy):
    """Text or description equals one of the phrases (casefolded, whitespace-normalized)."""

    name = "exact_phrase"

    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        for phrase in target.phrases:
            yield from find_by_text(root, phrase, exact=True)

    def can_handle(self, target: LocateTarget) -> bool:
        return bool(target.phrases)


class ContainsPhraseStrategy(LocatorStrategy):
    """Text or description contains one of the phrases."""

    name = "contains_phrase"

    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        for phrase in target.phrases:
            yield from find_by_text(root, phrase, exact=False)

    def can_handle(self, target: LocateTarget) -> bool:
        return bool(target.phrases)


class KeywordStrategy(LocatorStrategy):
    """Combined text, description and hint contains one of the keywords."""

    name = "keyword"

    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        for node in walk(root):
            label = combined_label(node)
            if label and target.has_keyword(label) and not target.is_excluded(label):
                yield node

    def can_handle(self, target: LocateTarget) -> bool:
        return bool(target.keywords)


class StructuralInputStrategy(LocatorStrategy):
    """Editable or input-kind node identified by its hint, own text or neighbours."""

    name = "structural_input"

    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        for node in walk(root):
            if not node.enabled or not (node.editable or is_input_kind(node)):
                continue
            if target.has_keyword(combined_label(node)) or target.has_keyword(
                self._nearby_label(node)
            ):
                yield node

    def can_handle(self, target: LocateTarget) -> bool:
        return bool(target.keywords)

    @staticmethod
    def _nearby_label(node: UiNode) -> str:
        parent = node.parent
        if parent is None:
            return ""
        labels = [combined_label(parent)]
        labels.extend(combined_label(sibling) for sibling in parent.children if sibling is not node)
        return " ".join(label for label in labels if label)


class FirstClickableTextStrategy(LocatorStrategy):
    """First clickable, non-button, non-image node with some text. Last resort."""

    name = "first_clickable_text"

    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        for node in walk(root):
            text = (node.text or "").strip()
            if node.clickable and not is_non_target_kind(node) and len(text) > MIN_FIELD_TEXT:
                if not target.is_excluded(normalize(text)):
                    yield node
                    return


class SuggestionListStrategy(LocatorStrategy):
    """First items of the first list-kind node (an item, or its clickable child)."""

    name = "suggestion_list"

    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        list_node = next((node for node in walk(root) if is_list_kind(node)), None)
        if list_node is None:
            return
        for item in list(list_node.children)[:SUGGESTION_LIST_ITEMS]:
            if item.clickable:
                yield item
                continue
            inner = next((child for child in item.children if child.clickable), None)
            if inner is not None:
                yield inner


class LabelledClickableStrategy(LocatorStrategy):
    """First clickable node with a label that is not one of the exclusions."""

    name = "labelled_clickable"

    def candidates(self, root: UiNode, target: LocateTarget) -> Iterator[UiNode]:
        for node in walk(root):
            if not node.clickable:
                continue
            label = normalize(f"{node.text or ''} {node.description or ''}")
            if len(label) > MIN_SUGGESTION_LABEL and not target.is_excluded(label):
                yield node


STRATEGIES: dict[str, type[LocatorStrategy]] = {
    strategy.name: strategy
    for strategy in (
        ExactPhraseStrategy,
        ContainsPhraseStrategy,
        KeywordStrategy,
        StructuralInputStrategy,
        FirstClickableTextStrategy,
        SuggestionListStrategy,
        LabelledClickableStrategy,
    )
}
