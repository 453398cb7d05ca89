"""
Parser adapter for markup_extract.

Turns markup text into the Node model using BeautifulSoup. Parsing itself is
delegated entirely to bs4 and the chosen tree builder.
"""

import logging
from typing import Union

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from .node import Node, NodeType

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = "html.parser"


def parse_html(markup: Union[str, bytes], features: str = DEFAULT_FEATURES) -> Node:
    """
    Parse markup into a Node tree rooted at a DOCUMENT node.

    Args:
        markup: HTML text (or bytes, decoded by bs4)
        features: bs4 tree builder, e.g. "html.parser" or "lxml"

    Returns:
        Root document node
    """
    # keep "class" as a raw string so class matching sees the original tokens
    soup = BeautifulSoup(markup, features, multi_valued_attributes=None)
    root = from_soup(soup)
    logger.debug(f"Parsed {len(markup)} characters of markup with {features}")
    return root


def from_soup(element: Union[BeautifulSoup, Tag, NavigableString]) -> Node:
    """
    Convert a bs4 object into a Node subtree.

    Conversion uses an explicit stack, so nesting depth is not bounded by the
    recursion limit.
    """
    root = _convert(element)
    stack = [(element, root)]
    while stack:
        soup_node, node = stack.pop()
        if not isinstance(soup_node, Tag):
            continue
        for child in soup_node.children:
            stack.append((child, node.append_child(_convert(child))))
    return root


def _convert(element: Union[BeautifulSoup, Tag, NavigableString]) -> Node:
    # BeautifulSoup is a Tag subclass, test it first
    if isinstance(element, BeautifulSoup):
        return Node(NodeType.DOCUMENT)
    if isinstance(element, Tag):
        return Node(
            NodeType.ELEMENT,
            tag=element.name,
            attributes=[(key, _attribute_value(value)) for key, value in element.attrs.items()],
        )
    if isinstance(element, Doctype):
        return Node(NodeType.DOCTYPE, text_content=str(element))
    if isinstance(element, (Comment, Declaration, ProcessingInstruction)):
        return Node(NodeType.COMMENT, text_content=str(element))
    return Node(NodeType.TEXT, text_content=str(element))


def _attribute_value(value) -> str:
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return "" if value is None else str(value)
