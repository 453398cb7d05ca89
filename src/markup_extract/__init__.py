"""
markup_extract - structured data extraction from HTML trees

This package locates nodes in a parsed markup tree by predicate and converts
<table> and <select> subtrees into typed data:
- Predicate-based depth-first tree queries
- Tables with header and index labels, looked up by position or label
- Disambiguation of repeated labels with occurrence suffixes
- Select options with the selected option
- JSON output via a small CLI
"""

__version__ = "1.0.0"

from .errors import (
    ExtractionError,
    InvalidNodeError,
    MissingAttributeError,
    AttributeNotFoundError,
    MissingContentError,
    NodeNotFoundError,
    SourceError,
)
from .node import Node, NodeType
from .parser import parse_html, from_soup
from .query import (
    walk,
    iter_descendants,
    children,
    first_match,
    first_match_excluding_start,
    all_matches,
    all_matches_excluding_start,
    by_tag,
    by_class_name,
    by_attribute,
    by_id,
    all_of,
    any_of,
    negate,
    element_by_tag_name,
    cells_in_rows_matching,
    get_attribute,
    has_attribute,
)
from .text import (
    PRINTABLE_TOKEN_PATTERN,
    has_printable_token,
    has_visible_text,
    first_text_descendant,
    first_text_descendant_matching,
    all_text_descendants,
    join_fragments,
    cell_text,
)
from .utils import make_unique, occurrence_key, get_normalizer
from .table import CORNER_LABEL, HtmlTable, Lookup, CellLookup, extract_table
from .select import SelectResult, extract_select
from .config import TableOptions, SelectorSpec, ExtractionConfig, load_config
from .sources import load_markup, load_document
from .runner import ExtractionRunner, locate, extract_target
from .cli import main

__all__ = [
    "ExtractionError",
    "InvalidNodeError",
    "MissingAttributeError",
    "AttributeNotFoundError",
    "MissingContentError",
    "NodeNotFoundError",
    "SourceError",
    "Node",
    "NodeType",
    "parse_html",
    "from_soup",
    "walk",
    "iter_descendants",
    "children",
    "first_match",
    "first_match_excluding_start",
    "all_matches",
    "all_matches_excluding_start",
    "by_tag",
    "by_class_name",
    "by_attribute",
    "by_id",
    "all_of",
    "any_of",
    "negate",
    "element_by_tag_name",
    "cells_in_rows_matching",
    "get_attribute",
    "has_attribute",
    "PRINTABLE_TOKEN_PATTERN",
    "has_printable_token",
    "has_visible_text",
    "first_text_descendant",
    "first_text_descendant_matching",
    "all_text_descendants",
    "join_fragments",
    "cell_text",
    "make_unique",
    "occurrence_key",
    "get_normalizer",
    "CORNER_LABEL",
    "HtmlTable",
    "Lookup",
    "CellLookup",
    "extract_table",
    "SelectResult",
    "extract_select",
    "TableOptions",
    "SelectorSpec",
    "ExtractionConfig",
    "load_config",
    "load_markup",
    "load_document",
    "ExtractionRunner",
    "locate",
    "extract_target",
    "main",
]
