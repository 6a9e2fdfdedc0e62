"""Element location and actuation.

Finds semantically-named elements (destination field, suggestion item,
confirm button) in UI trees that carry no stable identifiers, and
actuates them through a layered fallback.
"""

from .actuation import Actuator, TextInjector
from .element_locator import ElementLocator, LocateResult, LocatorAttempt
from .strategies import (
    STRATEGIES,
    ContainsPhraseStrategy,
    ExactPhraseStrategy,
    FirstClickableTextStrategy,
    KeywordStrategy,
    LabelledClickableStrategy,
    LocateTarget,
    LocatorStrategy,
    StructuralInputStrategy,
    SuggestionListStrategy,
)

__all__ = [
    "Actuator",
    "TextInjector",
    "ElementLocator",
    "LocateResult",
    "LocatorAttempt",
    "STRATEGIES",
    "LocateTarget",
    "LocatorStrategy",
    "ExactPhraseStrategy",
    "ContainsPhraseStrategy",
    "KeywordStrategy",
    "StructuralInputStrategy",
    "FirstClickableTextStrategy",
    "SuggestionListStrategy",
    "LabelledClickableStrategy",
]
