"""Tests for UI tree traversal helpers."""

from fareprobe.mock import FakeNode
from fareprobe.tree import (
    Bounds,
    UiNode,
    ancestors,
    collect_texts,
    combined_label,
    find_by_text,
    find_focused_input,
    is_input_kind,
    is_list_kind,
    is_non_target_kind,
    normalize,
    walk,
)


def sample_tree():
    return FakeNode(
        app_id="com.ubercab",
        children=[
            FakeNode(text="Where to?", children=[FakeNode(description="Search")]),
            FakeNode(text="  "),
            FakeNode(text="UberX", description="Economy ride"),
        ],
    )


class TestBounds:
    """Test Bounds geometry."""

    def test_center(self):
        assert Bounds(100, 200, 300, 260).center == (200, 230)

    def test_empty(self):
        assert Bounds().is_empty
        assert Bounds(10, 10, 10, 50).is_empty
        assert not Bounds(0, 0, 1, 1).is_empty

    def test_inverted_has_no_size(self):
        assert Bounds(50, 50, 10, 10).width == 0


class TestWalk:
    """Test walk and text collection."""

    def test_pre_order(self):
        root = sample_tree()
        texts = [node.text or node.description for node in walk(root)]
        assert texts == ["", "Where to?", "Search", "  ", "UberX"]

    def test_none_root(self):
        assert list(walk(None)) == []
        assert collect_texts(None) == []

    def test_collect_texts_skips_blank(self):
        assert collect_texts(sample_tree()) == ["Where to?", "Search", "UberX", "Economy ride"]

    def test_fake_node_is_a_ui_node(self):
        assert isinstance(sample_tree(), UiNode)

    def test_children_inherit_app_id(self):
        root = sample_tree()
        assert root.children[0].children[0].app_id == "com.ubercab"


class TestMatching:
    """Test normalization and phrase lookup."""

    def test_normalize(self):
        assert normalize("  Where   TO? ") == "where to?"
        assert normalize("STRASSE") == normalize("straße")

    def test_combined_label(self):
        node = FakeNode(text="Where", description="to", hint="Destination")
        assert combined_label(node) == "where to destination"

    def test_find_exact(self):
        found = list(find_by_text(sample_tree(), "where to?"))
        assert [node.text for node in found] == ["Where to?"]

    def test_find_substring(self):
        found = list(find_by_text(sample_tree(), "economy", exact=False))
        assert [node.text for node in found] == ["UberX"]

    def test_empty_phrase_finds_nothing(self):
        assert list(find_by_text(sample_tree(), "  ")) == []


class TestClassification:
    """Test kind classification and ancestry."""

    def test_kinds(self):
        assert is_input_kind(FakeNode(kind="android.widget.EditText"))
        assert is_input_kind(FakeNode(kind="android.widget.AutoCompleteTextView"))
        assert is_list_kind(FakeNode(kind="androidx.recyclerview.widget.RecyclerView"))
        assert is_non_target_kind(FakeNode(kind="android.widget.ImageButton"))
        assert not is_input_kind(FakeNode(kind="android.widget.TextView"))

    def test_focused_input(self):
        field = FakeNode(kind="android.widget.EditText", focused=True)
        root = FakeNode(children=[FakeNode(text="x", focused=True), field])
        assert find_focused_input(root) is field

    def test_no_focused_input(self):
        root = FakeNode(children=[FakeNode(kind="android.widget.EditText")])
        assert find_focused_input(root) is None

    def test_ancestors(self):
        leaf = FakeNode(text="leaf")
        middle = FakeNode(children=[leaf])
        top = FakeNode(children=[middle])

        assert list(ancestors(leaf)) == [middle, top]
        assert list(ancestors(leaf, limit=1)) == [middle]
