"""
Utility functions for markup_extract.

Provides label deduplication, occurrence keys and text normalizers.
"""

import logging
import re
from typing import Callable, Dict, List, Sequence

logger = logging.getLogger(__name__)


def make_unique(labels: Sequence[str], postfix: str) -> List[str]:
    """
    Make labels unique by renaming repeated values.

    The first occurrence of a value is kept as is; the n-th repetition becomes
    '{value}{postfix}_{n}'. Positions are preserved.

    Generated labels are not checked against the input, so a generated label
    can repeat a label that already exists, e.g. ["A", "A", "A_1"] with an
    empty postfix gives ["A", "A_1", "A_1"]. Key lookups then resolve to the
    first of the two. Pick a postfix that cannot occur in the source labels
    when this matters. The numbering is kept so that occurrence_key always
    names the n-th repetition.

    Args:
        labels: Labels to deduplicate
        postfix: Inserted between the value and the occurrence number

    Returns:
        New list of unique labels
    """
    counts: Dict[str, int] = {}
    unique_labels = []

    for label in labels:
        seen = counts.get(label, 0)
        counts[label] = seen + 1
        if seen == 0:
            unique_labels.append(label)
        else:
            unique_labels.append(occurrence_key(label, postfix, seen))

    return unique_labels


def occurrence_key(key: str, postfix: str, occurrence: int) -> str:
    """
    Build the label make_unique assigns to the given occurrence of key.

    Occurrence 0 is the first occurrence and maps to key itself.
    """
    if occurrence == 0:
        return key
    return f"{key}{postfix}_{occurrence}"


def identity(s: str) -> str:
    return s


def strip(s: str) -> str:
    return s.strip()


def collapse_whitespace(s: str) -> str:
    """Strip s and replace each run of whitespace with a single space."""
    return re.sub(r"\s+", " ", s).strip()


NORMALIZERS: Dict[str, Callable[[str], str]] = {
    "identity": identity,
    "strip": strip,
    "collapse_whitespace": collapse_whitespace,
}


def get_normalizer(name: str) -> Callable[[str], str]:
    """
    Look up a normalizer by name.

    Args:
        name: One of the keys of NORMALIZERS

    Returns:
        Normalizer function
    """
    try:
        return NORMALIZERS[name]
    except KeyError:
        raise ValueError(f"Unsupported normalizer: {name}") from None
