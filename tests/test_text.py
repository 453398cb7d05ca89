import pytest

from markup_extract.errors import MissingContentError
from markup_extract.node import Node
from markup_extract.text import (
    all_text_descendants,
    cell_text,
    first_text_descendant,
    first_text_descendant_matching,
    has_printable_token,
    has_visible_text,
    join_fragments,
)
from markup_extract.utils import collapse_whitespace


@pytest.fixture
def cell():
    return Node.element(
        "td", None,
        Node.text("\n  "),
        Node.element("b", None, Node.text(" Net ")),
        Node.text("\n  "),
        Node.element("i", None, Node.text("Price")),
        Node.text(" "),
    )


class TestFilters:
    """Test suite for the content filters."""

    @pytest.mark.parametrize("fragment,expected", [
        ("a", True),
        (" 1 ", True),
        ("\n\t  ", False),
        ("", False),
        ("日本", False),
        ("\xa0x", True),
        ("€", False),
    ])
    def test_has_printable_token(self, fragment, expected):
        assert has_printable_token(fragment) is expected

    @pytest.mark.parametrize("fragment,expected", [
        ("a", True),
        ("\n\t  ", False),
        ("", False),
        ("日本", True),
    ])
    def test_has_visible_text(self, fragment, expected):
        assert has_visible_text(fragment) is expected


class TestTextDescendants:
    """Test suite for text node lookup."""

    def test_first_text_descendant_includes_whitespace(self, cell):
        assert first_text_descendant(cell).text_content == "\n  "

    def test_first_text_descendant_matching(self, cell):
        assert first_text_descendant_matching(cell, has_printable_token).text_content == " Net "

    def test_text_node_as_start(self):
        text = Node.text("x")

        assert first_text_descendant(text) is text
        assert all_text_descendants(text) == [text]

    def test_all_text_descendants(self, cell):
        assert len(all_text_descendants(cell)) == 5
        assert [n.text_content for n in all_text_descendants(cell, has_printable_token)] == [" Net ", "Price"]

    def test_no_text(self):
        empty = Node.element("td")

        assert first_text_descendant(empty) is None
        assert all_text_descendants(empty) == []
        assert first_text_descendant(None) is None


class TestJoin:
    """Test suite for joining fragments."""

    def test_join_strings(self):
        assert join_fragments(["a", "b", "c"], ", ") == "a, b, c"

    def test_join_single_fragment_has_no_delimiter(self):
        assert join_fragments(["a"], "|") == "a"

    def test_join_nodes_with_normalizer(self, cell):
        nodes = all_text_descendants(cell, has_printable_token)

        assert join_fragments(nodes, "-", str.strip) == "Net-Price"

    def test_join_empty(self):
        with pytest.raises(MissingContentError):
            join_fragments([], ",")


class TestCellText:
    """Test suite for cell_text."""

    def test_single_mode(self, cell):
        assert cell_text(cell) == " Net "
        assert cell_text(cell, collapse_whitespace) == "Net"

    def test_composite_mode(self, cell):
        assert cell_text(cell, collapse_whitespace, allow_composite_text=True, composite_delimiter=" ") == "Net Price"

    def test_empty_cell(self):
        assert cell_text(Node.element("td", None, Node.text("  "))) == ""
        assert cell_text(Node.element("td"), allow_composite_text=True) == ""
