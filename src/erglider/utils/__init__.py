"""Utility functions for ER Glider."""

from erglider.utils.config import ConfigSettings, find_config_file, load_config
from erglider.utils.identifiers import (
    InvalidIdentifierError,
    escape_identifier,
    escape_literal,
    parse_identifier_list,
    validate_identifier,
)
from erglider.utils.tabular import parse_tabular_output

__all__ = [
    "ConfigSettings",
    "find_config_file",
    "load_config",
    "InvalidIdentifierError",
    "escape_identifier",
    "escape_literal",
    "parse_identifier_list",
    "validate_identifier",
    "parse_tabular_output",
]
