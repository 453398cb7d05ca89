"""
Markup sources for markup_extract.

Loads markup text from local files or http(s) URLs and parses it into a
Node tree.
"""

import logging
from pathlib import Path
from typing import Union

import requests

from .errors import SourceError
from .node import Node
from .parser import DEFAULT_FEATURES, parse_html

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_markup(url: str, timeout: float = 30) -> str:
    """
    Fetch markup from a URL.

    Args:
        url: http(s) URL
        timeout: Request timeout in seconds

    Returns:
        Response body as text
    """
    logger.info(f"Fetching markup: {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise SourceError(f"Failed to fetch {url}: {e}") from e
    logger.debug(f"Fetched {len(response.text)} characters from {url}")
    return response.text


def read_markup(path: Union[str, Path]) -> str:
    """Read markup from a UTF-8 file."""
    path = Path(path)
    logger.info(f"Reading markup from: {path}")
    try:
        return path.read_text(encoding='utf-8')
    except OSError as e:
        raise SourceError(f"Failed to read {path}: {e}") from e


def load_markup(source: Union[str, Path], timeout: float = 30) -> str:
    """
    Load markup from a file path or an http(s) URL.

    Args:
        source: Path or URL
        timeout: Request timeout in seconds for URLs

    Returns:
        Markup text
    """
    if isinstance(source, str) and is_url(source):
        return fetch_markup(source, timeout)
    return read_markup(source)


def load_document(source: Union[str, Path], timeout: float = 30, features: str = DEFAULT_FEATURES) -> Node:
    """Load markup from source and parse it into a document node."""
    return parse_html(load_markup(source, timeout), features)
