"""
Runner module for markup_extract.

Locates configured targets in a document and extracts them, collecting
per-run statistics.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import ExtractionConfig, SelectorSpec
from .errors import ExtractionError, NodeNotFoundError
from .node import Node
from .query import all_matches
from .select import SelectResult, extract_select
from .sources import load_document
from .table import HtmlTable, extract_table

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Statistics for an extraction run."""
    total: int = 0
    success: int = 0
    failed: int = 0


def locate(root: Optional[Node], target: SelectorSpec) -> Node:
    """
    Find the node described by target below root.

    Args:
        root: Document or subtree to search
        target: Target description

    Returns:
        The nth matching node

    Raises:
        NodeNotFoundError: fewer than nth + 1 nodes match
    """
    matches = all_matches(root, target.to_predicate())
    if len(matches) <= target.nth:
        raise NodeNotFoundError(
            f"Target '{target.name}' not found: {len(matches)} matching <{target.tag or target.kind}> nodes, "
            f"wanted #{target.nth}"
        )
    return matches[target.nth]


def extract_target(root: Optional[Node], target: SelectorSpec):
    """Locate and extract a single target, returning an HtmlTable or a SelectResult."""
    node = locate(root, target)
    if target.kind == "select":
        return extract_select(node)
    return extract_table(node, **target.options.extract_kwargs())


def serialize(result, records: bool = False) -> Dict[str, Any]:
    """Convert an extraction result to JSON-ready data."""
    if isinstance(result, HtmlTable):
        if records:
            return {"records": result.to_records()}
        return result.to_dict()
    if isinstance(result, SelectResult):
        return {"options": dict(result.options), "selected": result.selected_key}
    raise TypeError(f"Unsupported result type: {type(result).__name__}")


class ExtractionRunner:
    """Runs all targets of an ExtractionConfig against one document."""

    def __init__(self, config: ExtractionConfig):
        """
        Initialize ExtractionRunner.

        Args:
            config: Validated extraction configuration
        """
        self.config = config
        self.stats = RunStats()
        self.errors: Dict[str, str] = {}

    def run(self, document: Optional[Node] = None) -> Dict[str, Any]:
        """
        Extract every configured target.

        Args:
            document: Already parsed document; loaded from config.source if None

        Returns:
            Mapping of target name to serialized result
        """
        if document is None:
            document = load_document(self.config.source, self.config.timeout, self.config.parser)

        results: Dict[str, Any] = {}
        self.stats = RunStats(total=len(self.config.targets))
        self.errors = {}
        logger.info(f"Extracting {self.stats.total} targets from {self.config.source}")

        for target in self.config.targets:
            try:
                result = extract_target(document, target)
            except ExtractionError as e:
                logger.error(f"Failed to extract '{target.name}': {e}")
                self.errors[target.name] = str(e)
                self.stats.failed += 1
                continue
            results[target.name] = serialize(result)
            self.stats.success += 1

        logger.info(f"Extraction completed: {self.stats.success} success, {self.stats.failed} failed")
        return results

    def get_stats(self) -> RunStats:
        return self.stats
