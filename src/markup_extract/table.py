"""
Table extraction module for markup_extract.

Parses a <table> node into an HtmlTable that can be used to look up
headers, index labels and values by position or by label.
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .errors import InvalidNodeError
from .node import Node, NodeType
from .query import all_matches, by_tag, first_match_excluding_start
from .text import Normalizer, TextFilter, cell_text, has_printable_token
from .utils import identity, make_unique, occurrence_key

logger = logging.getLogger(__name__)

CORNER_LABEL = "Index\\Header"


class Lookup(NamedTuple):
    """Result of a row or column lookup by key."""
    values: Optional[List[str]]
    position: int
    found: bool


class CellLookup(NamedTuple):
    """Result of a cell lookup by row and column key."""
    value: str
    row: int
    column: int
    found: bool


_NOT_FOUND = Lookup(None, -1, False)


class HtmlTable:
    """
    Text content of an HTML table.

    The full grid has a header row (position 0) and an index column
    (position 0). There always is a header row and an index column: if none
    was present in the markup they are synthesized as
    ('Index\\Header', '1', '2', ...).

    headers:    labels of row 0, headers[0] is the corner label
    index:      labels of column 0, index[0] is the corner label
    table_data: the values without headers and index
    postfix:    postfix used to rename repeated labels during parsing
    """

    def __init__(
        self,
        headers: Sequence[str] = (),
        index: Sequence[str] = (),
        table_data: Sequence[Sequence[str]] = (),
        postfix: str = "",
    ):
        self._headers: Tuple[str, ...] = tuple(headers)
        self._index: Tuple[str, ...] = tuple(index)
        self._table_data: Tuple[Tuple[str, ...], ...] = tuple(tuple(row) for row in table_data)
        self._postfix = postfix

    @property
    def headers(self) -> Tuple[str, ...]:
        return self._headers

    @property
    def index(self) -> Tuple[str, ...]:
        return self._index

    @property
    def table_data(self) -> Tuple[Tuple[str, ...], ...]:
        return self._table_data

    @property
    def postfix(self) -> str:
        return self._postfix

    @property
    def shape(self) -> Tuple[int, int]:
        """Number of rows and columns of the full grid, header row and index column included."""
        return len(self._index), len(self._headers)

    def is_empty(self) -> bool:
        return not self._headers and not self._index

    def __repr__(self) -> str:
        return f"HtmlTable(shape={self.shape}, headers={list(self._headers)!r})"

    def __eq__(self, other):
        if not isinstance(other, HtmlTable):
            return NotImplemented
        return (self._headers, self._index, self._table_data, self._postfix) == \
            (other._headers, other._index, other._table_data, other._postfix)

    __hash__ = None

    def _row_ref(self, i: int) -> Tuple[str, ...]:
        # no copy, used by the other accessors
        if i == 0:
            return self._headers
        return self._table_data[i - 1]

    def row_at(self, i: int) -> List[str]:
        """
        Return a copy of row i.

        row_at(0) is the header row (corner label included), row_at(i) for i > 0
        is the i-th data row without its index label.

        Raises:
            IndexError: i is outside the grid
        """
        self._check_row(i)
        return list(self._row_ref(i))

    def row_label(self, i: int) -> str:
        self._check_row(i)
        return self._index[i]

    def column_at(self, j: int) -> List[str]:
        """
        Return a copy of column j.

        column_at(0) is the index column (corner label included), column_at(j)
        for j > 0 holds the j-th value of every data row without the header.

        Raises:
            IndexError: j is outside the grid
        """
        self._check_column(j)
        if j == 0:
            return list(self._index)
        return [row[j - 1] for row in self._table_data]

    def column_label(self, j: int) -> str:
        self._check_column(j)
        return self._headers[j]

    def row_by_key(self, key: str) -> Lookup:
        """Return the first row whose index label equals key, ignoring case."""
        position = _find_label(self._index, key)
        if position < 0:
            return _NOT_FOUND
        return Lookup(self.row_at(position), position, True)

    def row_by_key_occurrence(self, key: str, occurrence: int) -> Lookup:
        """Return the row of the given occurrence of a repeated index label (0 = first)."""
        return self.row_by_key(occurrence_key(key, self._postfix, occurrence))

    def column_by_key(self, key: str) -> Lookup:
        """Return the first column whose header equals key, ignoring case."""
        position = _find_label(self._headers, key)
        if position < 0:
            return _NOT_FOUND
        return Lookup(self.column_at(position), position, True)

    def column_by_key_occurrence(self, key: str, occurrence: int) -> Lookup:
        """Return the column of the given occurrence of a repeated header (0 = first)."""
        return self.column_by_key(occurrence_key(key, self._postfix, occurrence))

    def element_at(self, i: int, j: int) -> str:
        """
        Return the value at row i and column j of the full grid.

        Raises:
            IndexError: either position is outside the grid
        """
        self._check_row(i)
        self._check_column(j)
        if j == 0:
            return self._index[i]
        return self._row_ref(i)[j if i == 0 else j - 1]

    def element_by_keys(self, row_key: str, column_key: str) -> CellLookup:
        """
        Return the value in the row labelled row_key and the column labelled column_key.

        Returns a CellLookup with found=False if either key is missing.
        """
        i = _find_label(self._index, row_key)
        j = _find_label(self._headers, column_key)
        if i < 0 or j < 0:
            return CellLookup("", i, j, False)
        return CellLookup(self.element_at(i, j), i, j, True)

    def element_by_keys_occurrence(
        self,
        row_key: str,
        column_key: str,
        row_occurrence: int,
        column_occurrence: int,
    ) -> CellLookup:
        return self.element_by_keys(
            occurrence_key(row_key, self._postfix, row_occurrence),
            occurrence_key(column_key, self._postfix, column_occurrence),
        )

    def to_records(self) -> List[Dict[str, str]]:
        """
        Convert data rows to dictionaries keyed by header.

        The index label of each row is stored under the corner header.
        """
        if self.is_empty():
            return []
        records = []
        for i, row in enumerate(self._table_data, start=1):
            record = {self._headers[0]: self._index[i]}
            record.update(zip(self._headers[1:], row))
            records.append(record)
        return records

    def to_dict(self) -> Dict[str, object]:
        return {
            "headers": list(self._headers),
            "index": list(self._index),
            "data": [list(row) for row in self._table_data],
        }

    def _check_row(self, i: int) -> None:
        if not 0 <= i < len(self._index):
            raise IndexError(f"row {i} out of range for table with {len(self._index)} rows")

    def _check_column(self, j: int) -> None:
        if not 0 <= j < len(self._headers):
            raise IndexError(f"column {j} out of range for table with {len(self._headers)} columns")


def _find_label(labels: Sequence[str], key: str) -> int:
    wanted = key.casefold()
    for position, label in enumerate(labels):
        if label.casefold() == wanted:
            return position
    return -1


def _is_leaf_row(node: Node) -> bool:
    return node.kind is NodeType.ELEMENT and node.tag == "tr" and \
        first_match_excluding_start(node, by_tag("tr")) is None


def _is_leaf_cell(node: Node) -> bool:
    return node.kind is NodeType.ELEMENT and node.tag in ("td", "th") and \
        first_match_excluding_start(node, by_tag(node.tag)) is None


def extract_table(
    table_node: Optional[Node],
    has_header_row: bool,
    has_index_column: bool,
    postfix: str = "",
    normalizer: Optional[Normalizer] = None,
    allow_composite_text: bool = False,
    composite_delimiter: str = "",
    text_filter: TextFilter = has_printable_token,
) -> HtmlTable:
    """
    Parse a <table> node into an HtmlTable.

    Only leaf rows and leaf cells are considered, so nested tables do not
    leak into the outer grid. Repeated header or index labels get
    '{postfix}_{n}' appended, the first occurrence is kept unchanged. Rows
    with fewer cells than the widest row are padded with empty strings.

    Args:
        table_node: Element node with tag 'table'
        has_header_row: Use the first row as headers
        has_index_column: Use the first cell of each row as index label
        postfix: Postfix for repeated labels
        normalizer: Applied to every extracted text (identity if None)
        allow_composite_text: Join all text nodes of a cell instead of using the first
        composite_delimiter: Separator for composite texts
        text_filter: Decides which text fragments count as content

    Returns:
        Parsed table, empty if the table has no rows or cells

    Raises:
        InvalidNodeError: table_node is None or not a <table> element
    """
    if table_node is None:
        raise InvalidNodeError("node is None")
    if not (table_node.kind is NodeType.ELEMENT and table_node.tag == "table"):
        raise InvalidNodeError(f"node is not a table node: <{table_node.tag or table_node.kind.value}>")

    normalizer = normalizer or identity

    def content(cell: Node) -> str:
        return cell_text(cell, normalizer, allow_composite_text, composite_delimiter, text_filter)

    rows = all_matches(table_node, _is_leaf_row)
    if not rows:
        logger.warning("Table has no rows, returning empty table")
        return HtmlTable(postfix=postfix)

    raw_table_data = [all_matches(row, _is_leaf_cell) for row in rows]
    max_rows = len(raw_table_data)
    max_columns = max(len(cells) for cells in raw_table_data)
    if max_columns == 0:
        logger.warning(f"Table has {max_rows} rows but no cells, returning empty table")
        return HtmlTable(postfix=postfix)

    has_header = 1 if has_header_row else 0
    has_index = 1 if has_index_column else 0

    headers = [""] * (max_columns + 1 - has_index)
    if has_header_row:
        if not has_index_column:
            headers[0] = CORNER_LABEL
        for j, cell in enumerate(raw_table_data[0]):
            headers[j + 1 - has_index] = content(cell)
    else:
        headers[0] = CORNER_LABEL
        for j in range(1, len(headers)):
            headers[j] = str(j)

    index = [""] * (max_rows + 1 - has_header)
    if has_index_column:
        if not has_header_row:
            index[0] = CORNER_LABEL
        for i, cells in enumerate(raw_table_data):
            if cells:
                index[i + 1 - has_header] = content(cells[0])
    else:
        index[0] = CORNER_LABEL
        for i in range(1, len(index)):
            index[i] = str(i)

    headers = make_unique(headers, postfix)
    index = make_unique(index, postfix)

    table_data = []
    for i in range(len(index) - 1):
        raw_row = raw_table_data[i + has_header]
        row = [""] * (len(headers) - 1)
        for j in range(len(raw_row) - has_index):
            row[j] = content(raw_row[j + has_index])
        table_data.append(row)

    logger.debug(
        f"Parsed table with {len(table_data)} data rows and {len(headers) - 1} data columns "
        f"(header row: {has_header_row}, index column: {has_index_column})"
    )
    return HtmlTable(headers, index, table_data, postfix)
