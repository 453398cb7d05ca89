"""
Error types for markup_extract.

Traversal helpers never raise on empty results; these exceptions are reserved
for extraction entry points that need a specific kind of node or content.
"""


class ExtractionError(Exception):
    """Base class for all markup_extract errors."""


class InvalidNodeError(ExtractionError, ValueError):
    """Node is missing or is not the kind of node the operation requires."""


class MissingAttributeError(ExtractionError, KeyError):
    """A required attribute is absent from a node."""

    def __str__(self) -> str:
        # KeyError quotes its message, keep it readable
        return str(self.args[0]) if self.args else ""


class AttributeNotFoundError(MissingAttributeError):
    """Raised by attribute lookups when the node has no attribute with the key."""


class MissingContentError(ExtractionError, ValueError):
    """Required text content is absent."""


class NodeNotFoundError(ExtractionError, LookupError):
    """A configured locator matched no node in the document."""


class SourceError(ExtractionError):
    """Markup could not be loaded from a file or URL."""
