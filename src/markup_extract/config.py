"""
Configuration module for markup_extract.

Uses Pydantic models for validation and parsing of extraction options and
batch configuration files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .query import Predicate, all_of, by_class_name, by_id, by_tag
from .text import has_printable_token, has_visible_text
from .utils import NORMALIZERS, get_normalizer

logger = logging.getLogger(__name__)

TEXT_FILTERS = {
    "printable": has_printable_token,
    "visible": has_visible_text,
}


class TableOptions(BaseModel):
    """Options passed to extract_table."""
    has_header_row: bool = Field(True, alias="hasHeaderRow")
    has_index_column: bool = Field(False, alias="hasIndexColumn")
    postfix: str = ""
    allow_composite_text: bool = Field(False, alias="allowCompositeText")
    composite_delimiter: str = Field(" ", alias="compositeDelimiter")
    normalizer: str = "identity"  # "identity" | "strip" | "collapse_whitespace"
    text_filter: Literal["printable", "visible"] = Field("printable", alias="textFilter")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _check_normalizer(self) -> "TableOptions":
        if self.normalizer not in NORMALIZERS:
            raise ValueError(f"normalizer must be one of {sorted(NORMALIZERS)}, got '{self.normalizer}'")
        return self

    def extract_kwargs(self) -> Dict[str, Any]:
        """
        Build keyword arguments for extract_table.

        Returns:
            Dictionary of extract_table parameters
        """
        return {
            "has_header_row": self.has_header_row,
            "has_index_column": self.has_index_column,
            "postfix": self.postfix,
            "normalizer": get_normalizer(self.normalizer),
            "allow_composite_text": self.allow_composite_text,
            "composite_delimiter": self.composite_delimiter,
            "text_filter": TEXT_FILTERS[self.text_filter],
        }


class SelectorSpec(BaseModel):
    """Describes one node to extract from a document."""
    name: str
    kind: Literal["table", "select"] = "table"
    id: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="className")
    tag: Optional[str] = None
    nth: int = Field(0, ge=0)
    options: TableOptions = Field(default_factory=TableOptions)

    model_config = ConfigDict(populate_by_name=True)

    def to_predicate(self) -> Predicate:
        """
        Build the query predicate locating this target.

        Without id or class name the target is located by tag, which defaults
        to the kind of the target.
        """
        predicates = [by_tag(self.tag or self.kind)]
        if self.id is not None:
            predicates.append(by_id(self.id))
        if self.class_name is not None:
            predicates.append(by_class_name(self.class_name))
        return all_of(*predicates)


class ExtractionConfig(BaseModel):
    """Main configuration class."""
    source: str
    timeout: float = 30.0
    parser: str = "html.parser"
    targets: List[SelectorSpec] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def load_config(config_path: Union[str, Path]) -> ExtractionConfig:
    """
    Load extraction configuration from a JSON file.

    A relative file source is resolved against the directory of the
    configuration file.

    Args:
        config_path: Path to configuration file

    Returns:
        Validated configuration object
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    config = ExtractionConfig.model_validate(data)

    if not config.source.startswith(("http://", "https://")):
        source_path = Path(config.source)
        if not source_path.is_absolute():
            config.source = str(config_path.parent / source_path)

    logger.info(f"Loaded {len(config.targets)} targets for source: {config.source}")

    return config
