"""Tests for the individual locator strategies."""

from fareprobe.config import IntentLocator
from fareprobe.locators import (
    ContainsPhraseStrategy,
    ExactPhraseStrategy,
    FirstClickableTextStrategy,
    KeywordStrategy,
    LabelledClickableStrategy,
    LocateTarget,
    StructuralInputStrategy,
    SuggestionListStrategy,
)
from fareprobe.mock import FakeNode
from fareprobe.model import LocatorIntent


def target(**tables):
    return LocateTarget.from_locator(LocatorIntent.DESTINATION_FIELD, IntentLocator(**tables))


class TestLocateTarget:
    """Test LocateTarget normalization."""

    def test_keywords_normalized(self):
        t = target(keywords=("  Where ", "", "DESTINATION"), exclude=("Search",))
        assert t.keywords == ("where", "destination")
        assert t.exclude == ("search",)
        assert t.has_keyword("where to?")
        assert t.is_excluded("search here")


class TestPhraseStrategies:
    """Test exact and contains phrase matching."""

    def setup_method(self):
        self.exact = FakeNode(text="Where to?")
        self.longer = FakeNode(text="Where to go today")
        self.described = FakeNode(description="where   TO?")
        self.root = FakeNode(children=[self.exact, self.longer, self.described])

    def test_exact_phrase_normalizes(self):
        found = list(ExactPhraseStrategy().candidates(self.root, target(phrases=(" WHERE to? ",))))
        assert found == [self.exact, self.described]

    def test_contains_phrase(self):
        found = list(ContainsPhraseStrategy().candidates(self.root, target(phrases=("where to",))))
        assert found == [self.exact, self.longer, self.described]

    def test_needs_phrases(self):
        assert not ExactPhraseStrategy().can_handle(target())
        assert not ContainsPhraseStrategy().can_handle(target())
        assert ExactPhraseStrategy().can_handle(target(phrases=("Where to?",)))


class TestKeywordStrategy:
    """Test KeywordStrategy."""

    def test_matches_hint(self):
        field = FakeNode(kind="android.widget.EditText", hint="Search destination")
        root = FakeNode(children=[FakeNode(text="Home"), field])

        found = list(KeywordStrategy().candidates(root, target(keywords=("destination",))))

        assert found == [field]

    def test_exclusions(self):
        label = FakeNode(text="Search history")
        field = FakeNode(text="Search destination")
        root = FakeNode(children=[label, field])

        found = list(
            KeywordStrategy().candidates(root, target(keywords=("search",), exclude=("history",)))
        )

        assert found == [field]


class TestStructuralInputStrategy:
    """Test StructuralInputStrategy."""

    def test_label_from_sibling(self):
        field = FakeNode(kind="android.widget.EditText", editable=True)
        row = FakeNode(children=[FakeNode(text="Where to?"), field])
        root = FakeNode(children=[row])

        found = list(StructuralInputStrategy().candidates(root, target(keywords=("where",))))

        assert found == [field]

    def test_disabled_input_skipped(self):
        field = FakeNode(kind="android.widget.EditText", hint="Where to?", enabled=False)
        root = FakeNode(children=[field])

        assert list(StructuralInputStrategy().candidates(root, target(keywords=("where",)))) == []


class TestFirstClickableTextStrategy:
    """Test FirstClickableTextStrategy."""

    def test_skips_buttons_and_short_text(self):
        button = FakeNode(kind="android.widget.Button", text="Ride now", clickable=True)
        short = FakeNode(text="Go", clickable=True)
        first = FakeNode(text="Enter pickup", clickable=True)
        second = FakeNode(text="Enter destination", clickable=True)
        root = FakeNode(children=[button, short, first, second])

        assert list(FirstClickableTextStrategy().candidates(root, target())) == [first]


class TestSuggestionListStrategy:
    """Test SuggestionListStrategy."""

    def test_first_three_items(self):
        inner = FakeNode(text="Cairo Airport", clickable=True)
        items = [
            FakeNode(text="City Stars Mall", clickable=True),
            FakeNode(children=[FakeNode(text="Terminal 3"), inner]),
            FakeNode(text="Maadi", clickable=True),
            FakeNode(text="Zamalek", clickable=True),
        ]
        root = FakeNode(
            children=[FakeNode(kind="androidx.recyclerview.widget.RecyclerView", children=items)]
        )

        found = list(SuggestionListStrategy().candidates(root, target()))

        assert found == [items[0], inner, items[2]]

    def test_no_list(self):
        root = FakeNode(children=[FakeNode(text="Maadi", clickable=True)])
        assert list(SuggestionListStrategy().candidates(root, target())) == []


class TestLabelledClickableStrategy:
    """Test LabelledClickableStrategy."""

    def test_excluded_labels_skipped(self):
        prompt = FakeNode(text="Where to?", clickable=True)
        suggestion = FakeNode(text="Cairo Festival City", clickable=True)
        root = FakeNode(children=[prompt, FakeNode(text="Short", clickable=True), suggestion])

        found = list(LabelledClickableStrategy().candidates(root, target(exclude=("where",))))

        assert found == [suggestion]
