"""Identifier validation and SQL quoting.

Every database name, table name, and filter value that ends up in catalog
query text goes through one of the functions in this module.
"""

import re
from typing import List, Optional

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class InvalidIdentifierError(ValueError):
    """Raised when a value is not an acceptable SQL identifier."""

    def __init__(self, value: str, field_label: str):
        self.value = value
        self.field_label = field_label
        self.suggestion: Optional[str] = suggest_identifier(value)
        super().__init__(_build_message(value, field_label, self.suggestion))


def suggest_identifier(value: str) -> Optional[str]:
    """Return the underscore variant of a hyphenated value, or None."""
    if "-" not in value:
        return None
    return value.replace("-", "_")


def _build_message(value: str, field_label: str, suggestion: Optional[str]) -> str:
    message = (
        f"Invalid {field_label}. Use snake_case with letters, numbers and "
        "underscore only; it must start with a letter or underscore."
    )
    if suggestion is None:
        return message
    return (
        f"{message} Hyphen (-) is not allowed. "
        f'Suggested {field_label}: "{suggestion}".'
    )


def validate_identifier(value: str, field_label: str) -> str:
    """
    Check a value against the identifier allow-list.

    Args:
        value: Candidate identifier
        field_label: Name of the field being validated, used in the error message

    Returns:
        The value unchanged

    Raises:
        InvalidIdentifierError: If the value is not a valid identifier
    """
    if not isinstance(value, str) or not IDENTIFIER_PATTERN.fullmatch(value):
        raise InvalidIdentifierError(str(value), field_label)
    return value


def escape_literal(value: str) -> str:
    """Quote a value as a single-quoted SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def escape_identifier(value: str) -> str:
    """Quote a value as a backtick-delimited MySQL identifier."""
    return "`" + value.replace("`", "``") + "`"


def parse_identifier_list(value: Optional[str], field_label: str) -> List[str]:
    """
    Parse a comma-separated list of identifiers.

    Blank entries are dropped, every remaining entry is validated, and
    duplicates are removed keeping the first occurrence.

    Args:
        value: Comma-separated identifiers (e.g., "users, orders")
        field_label: Name of the field being parsed, used in error messages

    Returns:
        List of validated identifiers in first-seen order

    Raises:
        InvalidIdentifierError: If any entry is not a valid identifier
    """
    if not value:
        return []

    names: List[str] = []
    for item in value.split(","):
        name = item.strip()
        if not name:
            continue
        validate_identifier(name, field_label)
        if name not in names:
            names.append(name)
    return names
