"""
Text aggregation for markup_extract.

Finds text nodes below a node, filters out fragments without content and
joins several fragments into one normalized string.
"""

import logging
import re
from typing import Callable, List, Optional, Sequence, Union

from .errors import MissingContentError
from .node import Node, NodeType
from .query import all_matches, first_match

logger = logging.getLogger(__name__)

TextFilter = Callable[[str], bool]
Normalizer = Callable[[str], str]

# Everything that is not a visible ASCII character (space excluded)
PRINTABLE_TOKEN_PATTERN = re.compile(r"[^!-~]")


def has_printable_token(s: str) -> bool:
    """
    Default content filter.

    A fragment qualifies when something is left after removing every character
    outside '!'..'~', i.e. it holds at least one visible ASCII character.
    Whitespace-only fragments are dropped, and so are fragments made only of
    non-ASCII characters; use has_visible_text for such content.
    """
    return len(PRINTABLE_TOKEN_PATTERN.sub("", s)) > 0


def has_visible_text(s: str) -> bool:
    """Content filter accepting any fragment with a non-whitespace character."""
    return bool(s) and not s.isspace()


def _is_text(node: Node) -> bool:
    return node.kind is NodeType.TEXT


def first_text_descendant(node: Optional[Node]) -> Optional[Node]:
    """Return the first text node at or below node."""
    return first_match(node, _is_text)


def first_text_descendant_matching(node: Optional[Node], text_filter: TextFilter) -> Optional[Node]:
    """Return the first text node at or below node whose content passes text_filter."""
    return first_match(node, lambda n: _is_text(n) and text_filter(n.text_content))


def all_text_descendants(node: Optional[Node], text_filter: Optional[TextFilter] = None) -> List[Node]:
    """Return all text nodes at or below node, optionally filtered by content."""
    if text_filter is None:
        return all_matches(node, _is_text)
    return all_matches(node, lambda n: _is_text(n) and text_filter(n.text_content))


def join_fragments(
    fragments: Sequence[Union[Node, str]],
    delimiter: str = "",
    normalizer: Optional[Normalizer] = None,
) -> str:
    """
    Normalize each fragment and join them with delimiter.

    Args:
        fragments: Text nodes or plain strings
        delimiter: Separator placed between consecutive fragments
        normalizer: Applied to every fragment before joining (identity if None)

    Returns:
        Joined text

    Raises:
        MissingContentError: fragments is empty
    """
    if not fragments:
        raise MissingContentError("cannot join an empty sequence of text fragments")
    normalize = normalizer or (lambda s: s)
    return delimiter.join(
        normalize(fragment.text_content if isinstance(fragment, Node) else fragment)
        for fragment in fragments
    )


def cell_text(
    node: Optional[Node],
    normalizer: Optional[Normalizer] = None,
    allow_composite_text: bool = False,
    composite_delimiter: str = "",
    text_filter: TextFilter = has_printable_token,
) -> str:
    """
    Extract the text of a table cell (or any node).

    In single mode the first qualifying text node is used, in composite mode all
    qualifying text nodes are joined with composite_delimiter. Returns an empty
    string when no text qualifies.
    """
    normalize = normalizer or (lambda s: s)
    if allow_composite_text:
        fragments = all_text_descendants(node, text_filter)
        if not fragments:
            return ""
        return join_fragments(fragments, composite_delimiter, normalize)

    text_node = first_text_descendant_matching(node, text_filter)
    if text_node is None:
        return ""
    return normalize(text_node.text_content)
