"""
Node model for markup_extract.

A minimal DOM-like tree: element, text, comment, doctype and document nodes
linked through parent / first child / next sibling references. The tree is
owned by the caller; nothing in this package copies nodes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class NodeType(Enum):
    """Kinds of nodes in a parsed markup tree."""
    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    DOCTYPE = "doctype"


@dataclass(eq=False)
class Node:
    """Represents a single node of a markup tree.

    - kind: the NodeType of the node
    - tag: tag name, only meaningful for elements
    - attributes: ordered (key, value) pairs, keys are not guaranteed unique
    - text_content: character data of text, comment and doctype nodes
    - parent / first_child / last_child / next_sibling / previous_sibling:
      structural links maintained by append_child

    Nodes compare by identity.
    """
    kind: NodeType
    tag: str = ""
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    text_content: str = ""
    parent: Optional["Node"] = field(default=None, repr=False)
    first_child: Optional["Node"] = field(default=None, repr=False)
    last_child: Optional["Node"] = field(default=None, repr=False)
    next_sibling: Optional["Node"] = field(default=None, repr=False)
    previous_sibling: Optional["Node"] = field(default=None, repr=False)

    @classmethod
    def element(cls, tag: str, attributes: Optional[List[Tuple[str, str]]] = None, *children: "Node") -> "Node":
        """Build an element node and append the given children to it."""
        node = cls(NodeType.ELEMENT, tag=tag, attributes=list(attributes or []))
        for child in children:
            node.append_child(child)
        return node

    @classmethod
    def text(cls, data: str) -> "Node":
        return cls(NodeType.TEXT, text_content=data)

    @classmethod
    def document(cls, *children: "Node") -> "Node":
        node = cls(NodeType.DOCUMENT)
        for child in children:
            node.append_child(child)
        return node

    @property
    def is_element(self) -> bool:
        return self.kind is NodeType.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.kind is NodeType.TEXT

    def iter_children(self) -> Iterator["Node"]:
        """Iterate over direct children in sibling order."""
        child = self.first_child
        while child is not None:
            yield child
            child = child.next_sibling

    def append_child(self, child: "Node") -> "Node":
        """
        Append child as the last child of this node.

        The child is detached from its current parent first.

        Args:
            child: Node to append

        Returns:
            The appended child
        """
        if child is self:
            raise ValueError("Cannot append a node to itself")
        ancestor = self.parent
        while ancestor is not None:
            if ancestor is child:
                raise ValueError(f"Adding <{child.tag}> below <{self.tag}> would create a cycle")
            ancestor = ancestor.parent

        if child.parent is not None:
            child.detach()

        child.parent = self
        child.previous_sibling = self.last_child
        child.next_sibling = None
        if self.last_child is not None:
            self.last_child.next_sibling = child
        else:
            self.first_child = child
        self.last_child = child
        return child

    def detach(self) -> "Node":
        """Remove this node (and its subtree) from its parent."""
        parent = self.parent
        if parent is None:
            return self
        if self.previous_sibling is not None:
            self.previous_sibling.next_sibling = self.next_sibling
        else:
            parent.first_child = self.next_sibling
        if self.next_sibling is not None:
            self.next_sibling.previous_sibling = self.previous_sibling
        else:
            parent.last_child = self.previous_sibling
        self.parent = None
        self.next_sibling = None
        self.previous_sibling = None
        return self
