import pytest

from markup_extract.errors import InvalidNodeError
from markup_extract.parser import parse_html
from markup_extract.query import by_tag, first_match
from markup_extract.table import CORNER_LABEL, CellLookup, HtmlTable, Lookup, extract_table
from markup_extract.text import has_visible_text
from markup_extract.utils import strip


GRID = (
    "<table>"
    "<tr><th>Name</th><th>A</th><th>B</th></tr>"
    "<tr><td>r1</td><td>1</td><td>2</td></tr>"
    "<tr><td>r2</td><td>3</td><td>4</td></tr>"
    "</table>"
)


def table_node(markup: str):
    return first_match(parse_html(markup), by_tag("table"))


def parse(markup: str, has_header_row: bool = True, has_index_column: bool = True, **kwargs) -> HtmlTable:
    return extract_table(table_node(markup), has_header_row, has_index_column, **kwargs)


class TestHeaderAndIndexInference:
    """Test suite for header row and index column handling."""

    def test_header_and_index(self):
        table = parse(GRID)

        assert table.headers == ("Name", "A", "B")
        assert table.index == ("Name", "r1", "r2")
        assert table.table_data == (("1", "2"), ("3", "4"))
        assert table.element_by_keys("r1", "B").value == "2"

    def test_no_header_no_index(self):
        table = parse(GRID, has_header_row=False, has_index_column=False)

        assert table.headers == (CORNER_LABEL, "1", "2", "3")
        assert table.index == (CORNER_LABEL, "1", "2", "3")
        assert table.table_data[0] == ("Name", "A", "B")
        assert table.table_data[2] == ("r2", "3", "4")

    def test_header_only(self):
        table = parse(GRID, has_header_row=True, has_index_column=False)

        assert table.headers == (CORNER_LABEL, "Name", "A", "B")
        assert table.index == (CORNER_LABEL, "1", "2")
        assert table.table_data == (("r1", "1", "2"), ("r2", "3", "4"))

    def test_index_only(self):
        table = parse(GRID, has_header_row=False, has_index_column=True)

        assert table.headers == (CORNER_LABEL, "1", "2")
        assert table.index == (CORNER_LABEL, "Name", "r1", "r2")
        assert table.table_data == (("A", "B"), ("1", "2"), ("3", "4"))

    def test_dimensions_match_labels(self):
        for has_header_row in (True, False):
            for has_index_column in (True, False):
                table = parse(GRID, has_header_row, has_index_column)
                assert len(table.table_data) == len(table.index) - 1
                assert all(len(row) == len(table.headers) - 1 for row in table.table_data)

    def test_ragged_rows_are_padded(self):
        markup = (
            "<table>"
            "<tr><th>h1</th><th>h2</th><th>h3</th></tr>"
            "<tr><td>a</td></tr>"
            "<tr><td>b</td><td>c</td></tr>"
            "</table>"
        )
        table = parse(markup, has_header_row=True, has_index_column=False)

        assert table.headers == (CORNER_LABEL, "h1", "h2", "h3")
        assert table.table_data == (("a", "", ""), ("b", "c", ""))

    def test_thead_and_tbody(self):
        markup = (
            "<table>"
            "<thead><tr><th>City</th><th>Population</th></tr></thead>"
            "<tbody><tr><td>Bern</td><td>134591</td></tr></tbody>"
            "</table>"
        )
        table = parse(markup)

        assert table.column_by_key("population").values == ["134591"]
        assert table.row_by_key("Bern").position == 1


class TestLeafCells:
    """Test suite for leaf row and leaf cell detection."""

    def test_nested_table_rows_replace_outer_row(self):
        markup = (
            "<table id='outer'>"
            "<tr><td>a</td><td><table><tr><td>n1</td></tr></table></td></tr>"
            "<tr><td>b</td><td>c</td></tr>"
            "</table>"
        )
        table = parse(markup, has_header_row=False, has_index_column=False)

        assert table.table_data == (("n1", ""), ("b", "c"))

    def test_cell_with_markup_inside(self):
        markup = "<table><tr><td><span><b>bold</b></span></td><td>plain</td></tr></table>"
        table = parse(markup, has_header_row=False, has_index_column=False)

        assert table.table_data == (("bold", "plain"),)

    def test_mixed_th_and_td(self):
        markup = "<table><tr><th>k</th><td>v</td></tr><tr><th>k2</th><td>v2</td></tr></table>"
        table = parse(markup, has_header_row=False, has_index_column=True)

        assert table.index == (CORNER_LABEL, "k", "k2")
        assert table.column_at(1) == ["v", "v2"]


class TestTextContent:
    """Test suite for text extraction inside cells."""

    def test_whitespace_fragments_are_ignored(self):
        markup = """
        <table>
          <tr>
            <th> Key </th>
            <th>
              Value
            </th>
          </tr>
          <tr>
            <td>x</td>
            <td>   </td>
          </tr>
        </table>
        """
        table = parse(markup, has_index_column=False, normalizer=strip)

        assert table.headers == (CORNER_LABEL, "Key", "Value")
        assert table.table_data == (("x", ""),)

    def test_composite_text(self):
        markup = "<table><tr><td><b>Total</b> <i>sum</i></td></tr></table>"

        single = parse(markup, has_header_row=False, has_index_column=False)
        composite = parse(
            markup, has_header_row=False, has_index_column=False,
            allow_composite_text=True, composite_delimiter="|",
        )

        assert single.element_at(1, 1) == "Total"
        assert composite.element_at(1, 1) == "Total|sum"

    def test_composite_headers_and_index_are_normalized(self):
        markup = (
            "<table>"
            "<tr><th> x </th><th><span> Net </span><span> Price </span></th></tr>"
            "<tr><td><em> Item </em> 1 </td><td>9</td></tr>"
            "</table>"
        )
        table = parse(markup, normalizer=strip, allow_composite_text=True, composite_delimiter=" ")

        assert table.headers == ("x", "Net Price")
        assert table.index == ("x", "Item 1")
        assert table.element_by_keys("Item 1", "Net Price").value == "9"

    def test_non_ascii_text_needs_visible_filter(self):
        markup = "<table><tr><td>日本</td><td>x</td></tr></table>"

        literal = parse(markup, has_header_row=False, has_index_column=False)
        visible = parse(markup, has_header_row=False, has_index_column=False, text_filter=has_visible_text)

        assert literal.table_data == (("", "x"),)
        assert visible.table_data == (("日本", "x"),)


class TestDuplicateLabels:
    """Test suite for repeated header and index labels."""

    def test_duplicate_headers(self):
        markup = (
            "<table>"
            "<tr><th>A</th><th>A</th><th>B</th></tr>"
            "<tr><td>1</td><td>2</td><td>3</td></tr>"
            "</table>"
        )
        table = parse(markup, has_index_column=False, postfix="_dup")

        assert table.headers == (CORNER_LABEL, "A", "A_dup_1", "B")
        assert table.column_by_key("A") == Lookup(["1"], 1, True)
        assert table.column_by_key_occurrence("A", 0) == table.column_by_key("A")
        assert table.column_by_key_occurrence("A", 1) == Lookup(["2"], 2, True)
        assert not table.column_by_key_occurrence("A", 2).found

    def test_duplicate_headers_with_index_corner(self):
        markup = (
            "<table>"
            "<tr><th>A</th><th>A</th><th>B</th></tr>"
            "<tr><td>r</td><td>2</td><td>3</td></tr>"
            "</table>"
        )
        table = parse(markup, postfix="_dup")

        assert table.headers == ("A", "A_dup_1", "B")
        assert table.column_by_key_occurrence("A", 1).values == ["2"]

    def test_duplicate_index_labels(self):
        markup = (
            "<table>"
            "<tr><th>k</th><th>v</th></tr>"
            "<tr><td>x</td><td>1</td></tr>"
            "<tr><td>x</td><td>2</td></tr>"
            "<tr><td>x</td><td>3</td></tr>"
            "</table>"
        )
        table = parse(markup, postfix="#")

        assert table.index == ("k", "x", "x#_1", "x#_2")
        assert table.row_by_key_occurrence("x", 2) == Lookup(["3"], 3, True)
        assert table.element_by_keys_occurrence("x", "v", 1, 0) == CellLookup("2", 2, 1, True)


class TestAccessors:
    """Test suite for HtmlTable lookups."""

    @pytest.fixture
    def table(self):
        return parse(GRID)

    def test_row_at(self, table):
        assert table.row_at(0) == ["Name", "A", "B"]
        assert table.row_at(2) == ["3", "4"]
        assert table.row_label(2) == "r2"

    def test_row_at_returns_copy(self, table):
        row = table.row_at(1)
        row[0] = "changed"

        assert table.row_at(1) == ["1", "2"]

    def test_column_at(self, table):
        assert table.column_at(0) == ["Name", "r1", "r2"]
        assert table.column_at(2) == ["2", "4"]
        assert table.column_label(2) == "B"

    def test_lookup_by_key_ignores_case(self, table):
        assert table.row_by_key("R2") == Lookup(["3", "4"], 2, True)
        assert table.column_by_key("a") == Lookup(["1", "3"], 1, True)

    def test_lookup_miss_is_not_an_error(self, table):
        assert table.row_by_key("missing") == Lookup(None, -1, False)
        assert table.column_by_key("missing") == Lookup(None, -1, False)
        assert not table.element_by_keys("r1", "missing").found
        assert not table.element_by_keys("missing", "A").found

    def test_element_at(self, table):
        assert table.element_at(0, 0) == "Name"
        assert table.element_at(0, 2) == "B"
        assert table.element_at(2, 0) == "r2"
        assert table.element_at(2, 1) == "3"

    def test_element_at_out_of_bounds(self, table):
        with pytest.raises(IndexError):
            table.element_at(3, 0)
        with pytest.raises(IndexError):
            table.element_at(0, 3)
        with pytest.raises(IndexError):
            table.element_at(-1, 1)

    def test_element_by_keys_agrees_with_rows_and_columns(self, table):
        for row_key in table.index[1:]:
            for column_key in table.headers[1:]:
                cell = table.element_by_keys(row_key, column_key)
                row = table.row_by_key(row_key)
                column = table.column_by_key(column_key)
                assert cell.found
                assert cell.value == row.values[column.position - 1]
                assert cell.value == column.values[row.position - 1]

    def test_element_by_keys_on_labels(self, table):
        assert table.element_by_keys("r1", "Name").value == "r1"
        assert table.element_by_keys("Name", "B").value == "B"

    def test_to_records(self, table):
        assert table.to_records() == [
            {"Name": "r1", "A": "1", "B": "2"},
            {"Name": "r2", "A": "3", "B": "4"},
        ]

    def test_to_dict(self, table):
        assert table.to_dict() == {
            "headers": ["Name", "A", "B"],
            "index": ["Name", "r1", "r2"],
            "data": [["1", "2"], ["3", "4"]],
        }

    def test_shape(self, table):
        assert table.shape == (3, 3)


class TestInvalidInput:
    """Test suite for invalid and empty tables."""

    def test_none_node(self):
        with pytest.raises(InvalidNodeError):
            extract_table(None, True, True)

    def test_non_table_node(self):
        div = first_match(parse_html("<div><table></table></div>"), by_tag("div"))
        with pytest.raises(InvalidNodeError):
            extract_table(div, True, True)

    def test_table_without_rows(self):
        table = parse("<table></table>")

        assert table.is_empty()
        assert table.shape == (0, 0)
        assert table.to_records() == []

    def test_table_without_cells(self):
        table = parse("<table><tr></tr><tr></tr></table>", postfix="_p")

        assert table.is_empty()
        assert table.postfix == "_p"
