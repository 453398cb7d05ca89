"""
Select extraction module for markup_extract.

Parses a <select> node into its options and the currently selected option.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .errors import AttributeNotFoundError, InvalidNodeError, MissingAttributeError, MissingContentError
from .node import Node
from .query import all_matches, by_tag, get_attribute, has_attribute
from .text import first_text_descendant

logger = logging.getLogger(__name__)


@dataclass
class SelectResult:
    """Options of a <select> node keyed by their text, plus the selected key."""
    options: Dict[str, str] = field(default_factory=dict)
    selected_key: str = ""

    @property
    def selected_value(self) -> Optional[str]:
        return self.options.get(self.selected_key)

    def __bool__(self) -> bool:
        return bool(self.options)


def extract_select(select_node: Optional[Node]) -> SelectResult:
    """
    Parse a <select> node into its options.

    Maps the text of every <option> to its 'value' attribute. If several
    options share a text only the last one is kept. The selected key is the
    text of the last option carrying a 'selected' attribute, or of the first
    option if none carries it.

    Args:
        select_node: Node to search for <option> elements, itself included

    Returns:
        SelectResult, empty if no options were found

    Raises:
        InvalidNodeError: select_node is None
        MissingAttributeError: an option has no 'value' attribute
        MissingContentError: an option has no text
    """
    if select_node is None:
        raise InvalidNodeError("cannot parse None node")

    option_nodes = all_matches(select_node, by_tag("option"))
    if not option_nodes:
        logger.info("Failed to get any available options")
        return SelectResult()

    options: Dict[str, str] = {}
    first_key = ""
    selected_key = None

    for i, option_node in enumerate(option_nodes):
        try:
            value = get_attribute(option_node, "value")
        except AttributeNotFoundError as e:
            raise MissingAttributeError(f"option {i} has no 'value' attribute") from e

        text_node = first_text_descendant(option_node)
        if text_node is None:
            raise MissingContentError(f"failed to get text of option {i} (value '{value}')")

        text = text_node.text_content
        options[text] = value

        if i == 0:
            first_key = text
        if has_attribute(option_node, "selected"):
            selected_key = text

    if selected_key is None:
        selected_key = first_key

    logger.debug(f"Parsed select with {len(options)} options, selected: '{selected_key}'")
    return SelectResult(options, selected_key)
