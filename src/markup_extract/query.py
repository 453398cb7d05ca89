"""
Tree query engine for markup_extract.

Depth-first traversal of a Node tree plus predicate builders. All functions
return references into the original tree, never copies, so callers can modify
matched subtrees in place. A missing start node always yields an empty result.
"""

import logging
from typing import Callable, Iterator, List, Optional

from .errors import AttributeNotFoundError, InvalidNodeError
from .node import Node, NodeType

logger = logging.getLogger(__name__)

Predicate = Callable[[Node], bool]


def walk(node: Optional[Node], visit: Callable[[Node], bool]) -> None:
    """
    Visit all descendants of node in pre-order, node itself excluded.

    If visit returns False for a child, the child's subtree is skipped and the
    walk continues with its next sibling.

    Args:
        node: Node whose descendants are visited
        visit: Callback invoked for each descendant
    """
    if node is None:
        return
    stack = [node.first_child]
    while stack:
        current = stack.pop()
        if current is None:
            continue
        stack.append(current.next_sibling)
        if visit(current):
            stack.append(current.first_child)


def iter_descendants(node: Optional[Node]) -> Iterator[Node]:
    """Yield all descendants of node in pre-order, node itself excluded."""
    if node is None:
        return
    stack = [node.first_child]
    while stack:
        current = stack.pop()
        if current is None:
            continue
        stack.append(current.next_sibling)
        yield current
        stack.append(current.first_child)


def children(node: Optional[Node]) -> List[Node]:
    """Return the direct children of node."""
    if node is None:
        return []
    return list(node.iter_children())


def first_match(start: Optional[Node], predicate: Predicate) -> Optional[Node]:
    """Return the first node matching predicate, testing start itself first."""
    if start is None:
        return None
    if predicate(start):
        return start
    return first_match_excluding_start(start, predicate)


def first_match_excluding_start(start: Optional[Node], predicate: Predicate) -> Optional[Node]:
    """Return the first descendant of start matching predicate."""
    return next((node for node in iter_descendants(start) if predicate(node)), None)


def all_matches(start: Optional[Node], predicate: Predicate) -> List[Node]:
    """Return all nodes matching predicate in pre-order, start included."""
    if start is None:
        return []
    found = [start] if predicate(start) else []
    found.extend(all_matches_excluding_start(start, predicate))
    return found


def all_matches_excluding_start(start: Optional[Node], predicate: Predicate) -> List[Node]:
    """Return all descendants of start matching predicate in pre-order."""
    return [node for node in iter_descendants(start) if predicate(node)]


def by_tag(name: str) -> Predicate:
    """Match element nodes whose tag is exactly name."""
    def predicate(node: Node) -> bool:
        return node.kind is NodeType.ELEMENT and node.tag == name
    return predicate


def by_class_name(class_name: str) -> Predicate:
    """Match nodes whose class attribute contains class_name (case-insensitive)."""
    wanted = class_name.casefold()

    def predicate(node: Node) -> bool:
        try:
            classes = get_attribute(node, "class")
        except AttributeNotFoundError:
            return False
        return any(token.casefold() == wanted for token in classes.split())
    return predicate


def by_attribute(key: str, value: str) -> Predicate:
    """Match nodes whose first attribute named key equals value (case-insensitive)."""
    wanted = value.casefold()

    def predicate(node: Node) -> bool:
        try:
            return get_attribute(node, key).casefold() == wanted
        except AttributeNotFoundError:
            return False
    return predicate


def by_id(element_id: str) -> Predicate:
    return by_attribute("id", element_id)


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(node: Node) -> bool:
        return all(p(node) for p in predicates)
    return predicate


def any_of(*predicates: Predicate) -> Predicate:
    def predicate(node: Node) -> bool:
        return any(p(node) for p in predicates)
    return predicate


def negate(inner: Predicate) -> Predicate:
    def predicate(node: Node) -> bool:
        return not inner(node)
    return predicate


def element_by_tag_name(name: str, start: Optional[Node]) -> Optional[Node]:
    """Return the first element with the given tag, start included, or None."""
    return first_match(start, by_tag(name))


def cells_in_rows_matching(table_node: Optional[Node], predicate: Predicate) -> List[Node]:
    """
    Return the <td> cells of every <tr> that contains a node matching predicate.

    The row itself is tested too, so a predicate on the row's attributes
    selects all of its cells.

    Args:
        table_node: Table (or any ancestor of the rows) to search
        predicate: Condition at least one node of the row has to fulfil

    Returns:
        Matching <td> nodes in document order
    """
    is_td = by_tag("td")
    is_tr = by_tag("tr")
    row_matches = {}

    def wanted(node: Node) -> bool:
        parent = node.parent
        if parent is None or not is_tr(parent) or not is_td(node):
            return False
        if id(parent) not in row_matches:
            row_matches[id(parent)] = first_match(parent, predicate) is not None
        return row_matches[id(parent)]

    return all_matches(table_node, wanted)


def get_attribute(node: Optional[Node], key: str) -> str:
    """
    Return the value of the first attribute of node named key.

    Args:
        node: Node to inspect
        key: Attribute name, matched case-sensitively

    Returns:
        Attribute value

    Raises:
        InvalidNodeError: node is None
        AttributeNotFoundError: node has no attribute with that key
    """
    if node is None:
        raise InvalidNodeError("node is None")
    for attr_key, attr_value in node.attributes:
        if attr_key == key:
            return attr_value
    raise AttributeNotFoundError(f"node has no attribute with key: '{key}'")


def has_attribute(node: Optional[Node], key: str) -> bool:
    if node is None:
        return False
    return any(attr_key == key for attr_key, _ in node.attributes)
